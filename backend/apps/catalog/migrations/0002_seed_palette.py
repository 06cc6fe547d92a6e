from django.db import migrations

COLORS = [
    ("RED", "Red"),
    ("BLUE", "Blue"),
    ("GREEN", "Green"),
    ("YELLOW", "Yellow"),
    ("BLACK", "Black"),
    ("WHITE", "White"),
    ("GREY", "Grey"),
    ("ORANGE", "Orange"),
    ("PURPLE", "Purple"),
    ("PINK", "Pink"),
    ("BROWN", "Brown"),
]

SIZES = [
    ("XS", "Extra small"),
    ("S", "Small"),
    ("M", "Medium"),
    ("L", "Large"),
    ("XL", "Extra large"),
    ("XXL", "Double extra large"),
]


def seed_palette(apps, schema_editor):
    Color = apps.get_model("catalog", "Color")
    Size = apps.get_model("catalog", "Size")
    for code, name in COLORS:
        Color.objects.get_or_create(code=code, defaults={"name": name})
    for code, name in SIZES:
        Size.objects.get_or_create(code=code, defaults={"name": name})


def remove_palette(apps, schema_editor):
    Color = apps.get_model("catalog", "Color")
    Size = apps.get_model("catalog", "Size")
    Color.objects.filter(code__in=[code for code, _ in COLORS]).delete()
    Size.objects.filter(code__in=[code for code, _ in SIZES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_palette, remove_palette),
    ]
