from pydantic import BaseModel

class PageMeta(BaseModel):
    page: int
    per_page: int
    total: int
    has_next_page: bool
    has_prev_page: bool
