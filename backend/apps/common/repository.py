from typing import Generic, Iterable, Optional, Type, TypeVar

from django.db import models

T = TypeVar('T', bound=models.Model)


class GenericRepository(Generic[T]):
    """Single-model persistence helper shared by the app repositories."""

    def __init__(self, model: Type[T]):
        self.model = model

    def queryset(self):
        return self.model.objects.all()

    def get(self, **filters) -> Optional[T]:
        return self.queryset().filter(**filters).first()

    def exists(self, **filters) -> bool:
        return self.model.objects.filter(**filters).exists()

    def list(self, **filters) -> Iterable[T]:
        return self.queryset().filter(**filters)

    def create(self, **data) -> T:
        return self.model.objects.create(**data)

    def update(self, obj: T, **data) -> T:
        changed = []
        for field, value in data.items():
            if value is None:
                continue
            setattr(obj, field, value)
            changed.append(field)
        if changed:
            obj.save()
        return obj

    def delete(self, obj: T) -> None:
        obj.delete()
