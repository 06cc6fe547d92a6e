from typing import List

from django.db.models import Q

from apps.common.repository import GenericRepository
from .models import Brand, Category, Color, Product, Size, Subcategory
from .query import AnyOf, Equals, FilterOption, ProductQuerySpec, Range


def option_to_q(lookup: str, option: FilterOption) -> Q:
    """Translate one filter option into a ``Q``; ABSENT yields an empty ``Q``."""
    if isinstance(option, Equals):
        return Q(**{lookup: option.value})
    if isinstance(option, Range):
        clause = Q()
        if option.lower is not None:
            clause &= Q(**{f"{lookup}__gte": option.lower})
        if option.upper is not None:
            clause &= Q(**{f"{lookup}__lte": option.upper})
        return clause
    if isinstance(option, AnyOf):
        return Q(**{f"{lookup}__in": list(option.values)})
    return Q()


def predicate_for(spec: ProductQuerySpec) -> Q:
    predicate = Q()
    for lookup, option in spec.active_filters().items():
        predicate &= option_to_q(lookup, option)
    return predicate


class ProductRepository(GenericRepository[Product]):
    def __init__(self):
        super().__init__(Product)

    def queryset(self):
        return self.model.objects.select_related(
            "category", "subcategory", "brand", "color", "size"
        )

    def find_page(self, spec: ProductQuerySpec) -> List[Product]:
        start = spec.offset
        return list(
            self.queryset()
            .filter(predicate_for(spec))
            .order_by(*spec.ordering())[start : start + spec.page_size]
        )

    def count_matching(self, spec: ProductQuerySpec) -> int:
        # Same predicate as find_page; the pair is not read in one transaction.
        return self.model.objects.filter(predicate_for(spec)).count()

    def search(self, term: str):
        return (
            self.queryset()
            .filter(
                Q(name__icontains=term)
                | Q(description__icontains=term)
                | Q(category__name__icontains=term)
                | Q(subcategory__name__icontains=term)
            )
            .order_by("id")
        )

    def list_by_category(self, category_id: int):
        return self.queryset().filter(category_id=category_id).order_by("id")

    def list_by_subcategory(self, subcategory_id: int):
        return self.queryset().filter(subcategory_id=subcategory_id).order_by("id")

    def apply_changes(self, product: Product, changes: dict) -> Product:
        """Assign every key in ``changes``, explicit ``None`` included, then save."""
        if not changes:
            return product
        for field, value in changes.items():
            setattr(product, field, value)
        product.save()
        # Reload relations so mappers see renamed or re-pointed references.
        return self.get(id=product.id)


class CategoryRepository(GenericRepository[Category]):
    def __init__(self):
        super().__init__(Category)

    def queryset(self):
        return self.model.objects.prefetch_related("subcategories")


class SubcategoryRepository(GenericRepository[Subcategory]):
    def __init__(self):
        super().__init__(Subcategory)


class BrandRepository(GenericRepository[Brand]):
    def __init__(self):
        super().__init__(Brand)


class PaletteRepository:
    def color_by_code(self, code: str):
        return Color.objects.filter(code=code.upper()).first()

    def size_by_code(self, code: str):
        return Size.objects.filter(code=code.upper()).first()
