from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class PageMeta:
    total_items: int
    total_pages: int
    current_page: int
    page_size: int

    def as_dict(self) -> Dict[str, int]:
        return {
            "totalProducts": self.total_items,
            "totalPages": self.total_pages,
            "currentPage": self.current_page,
            "pageSize": self.page_size,
        }


def page_meta(total_items: int, page_size: int, current_page: int) -> PageMeta:
    """Derive page metadata; ``total_pages`` is ``ceil(total / size)`` and 0 for no items."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    if total_items < 0:
        raise ValueError("total_items cannot be negative")
    total_pages = -(-total_items // page_size)
    return PageMeta(
        total_items=total_items,
        total_pages=total_pages,
        current_page=current_page,
        page_size=page_size,
    )
