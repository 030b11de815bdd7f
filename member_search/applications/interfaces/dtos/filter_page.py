from typing import Optional

from pydantic import BaseModel, Field

from member_search.domain.models.search import SortDirection


class FilterPage(BaseModel):
    page_number: int = Field(default=0, ge=0, description="Zero-based page index")
    page_size: int = Field(default=20, gt=0, description="Maximum number of records per page")

    @property
    def offset(self) -> int:
        return self.page_number * self.page_size


class KeysetPage(BaseModel):
    last_seen_id: Optional[int] = Field(default=None, description="Id of the last record of the previous page")
    limit: int = Field(default=20, gt=0, description="Maximum number of records to return")
    direction: SortDirection = SortDirection.DESC


class OffsetWindow(BaseModel):
    offset: int = Field(default=0, ge=0, description="Number of matching ids to skip")
    limit: int = Field(default=20, gt=0, description="Maximum number of records to return")
