# lucent_shop/schemas/common.py
import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel

DataType = TypeVar('DataType')


class PaginatedResponse(BaseModel, Generic[DataType]):
    """
    Generic paginated response body.
    """
    total_items: int
    total_pages: int
    current_page: int
    size: int
    items: List[DataType]

    @classmethod
    def build(cls, items: list, total_items: int, page: int, size: int):
        return cls(
            total_items=total_items,
            total_pages=math.ceil(total_items / size) if total_items > 0 else 1,
            current_page=page,
            size=size,
            items=items,
        )


class StatusMessage(BaseModel):
    status: str = "ok"
    message: str
