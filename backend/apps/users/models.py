from django.contrib.auth.models import AbstractUser
from django.db import models

DEFAULT_AVATAR_URL = (
    "https://i.pinimg.com/originals/1f/28/c6/1f28c68d2c35f389966b5a363b992d06.png"
)


class User(AbstractUser):
    # id, username, password, is_active, is_staff, is_superuser, groups, user_permissions are inherited
    class Gender(models.TextChoices):
        MALE = "MALE", "Male"
        FEMALE = "FEMALE", "Female"
        OTHER = "OTHER", "Other"

    name = models.CharField(max_length=150, blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    address = models.CharField(max_length=255, blank=True, null=True)
    dob = models.DateField(blank=True, null=True)
    gender = models.CharField(
        max_length=10, choices=Gender.choices, blank=True, default=Gender.OTHER
    )
    avatar_url = models.URLField(max_length=500, default=DEFAULT_AVATAR_URL)
    email = models.EmailField(unique=True)

    def __str__(self):
        return self.username

    @property
    def is_privileged(self) -> bool:
        return bool(self.is_staff or self.is_superuser)
