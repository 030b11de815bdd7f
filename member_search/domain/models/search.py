from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class FilterCriteria(BaseModel):
    """Optional search conditions. A field left as None places no constraint."""

    name_filter: Optional[str] = None
    group_filter: Optional[str] = None
    min_value: Optional[int] = None
    max_value: Optional[int] = None


class ProjectedRecord(BaseModel):
    """Member row joined with its team, reduced to the selected columns."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    value: int
    group_id: Optional[int] = None
    group_name: Optional[str] = None


class Page(BaseModel):
    content: List[ProjectedRecord] = Field(default_factory=list)
    total_count: Optional[int] = None
    has_next: bool = False
