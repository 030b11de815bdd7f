import operator
from enum import Enum
from typing import Any, Callable, Union

from pydantic import BaseModel, ConfigDict

from member_search.domain.models.search import ProjectedRecord


class SearchField(str, Enum):
    ID = "id"
    NAME = "name"
    VALUE = "value"
    GROUP_ID = "group_id"
    GROUP_NAME = "group_name"


class PredicateKind(str, Enum):
    EQUALS = "eq"
    GREATER_OR_EQUAL = "goe"
    LESS_OR_EQUAL = "loe"
    GREATER_THAN = "gt"
    LESS_THAN = "lt"


_OPERATORS = {
    PredicateKind.EQUALS: operator.eq,
    PredicateKind.GREATER_OR_EQUAL: operator.ge,
    PredicateKind.LESS_OR_EQUAL: operator.le,
    PredicateKind.GREATER_THAN: operator.gt,
    PredicateKind.LESS_THAN: operator.lt,
}


class Predicate(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: SearchField
    kind: PredicateKind
    value: Union[int, str]

    @property
    def compare(self) -> Callable[[Any, Any], Any]:
        return _OPERATORS[self.kind]

    def matches(self, record: ProjectedRecord) -> bool:
        actual = getattr(record, self.field.value)
        # NULL never satisfies a comparison
        if actual is None:
            return False
        return self.compare(actual, self.value)
