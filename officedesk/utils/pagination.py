# officedesk/utils/pagination.py
from pydantic import BaseModel

class PageMeta(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int
    has_prev: bool
    has_next: bool

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

def page_meta(total: int, page: int, page_size: int) -> PageMeta:
    """Página pedida recortada a la última existente (mínimo 1 aunque no haya filas)."""
    last = max(-(-total // page_size), 1)
    current = min(max(page, 1), last)
    return PageMeta(
        page=current, page_size=page_size, total=total, total_pages=last,
        has_prev=current > 1, has_next=current < last,
    )
