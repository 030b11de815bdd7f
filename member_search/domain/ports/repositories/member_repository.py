from abc import ABC, abstractmethod
from typing import Collection, List

from member_search.domain.models.member import Member, Team
from member_search.domain.models.predicate import Predicate
from member_search.domain.models.search import ProjectedRecord, SortDirection


class MemberRepository(ABC):
    @abstractmethod
    async def find(
        self,
        predicates: Collection[Predicate],
        direction: SortDirection = SortDirection.DESC,
        offset: int = 0,
        limit: int = 100,
    ) -> List[ProjectedRecord]:
        pass

    @abstractmethod
    async def count(self, predicates: Collection[Predicate]) -> int:
        pass

    @abstractmethod
    async def find_ids(
        self,
        predicates: Collection[Predicate],
        direction: SortDirection = SortDirection.DESC,
        offset: int = 0,
        limit: int = 100,
    ) -> List[int]:
        pass

    @abstractmethod
    async def find_by_ids(
        self, member_ids: Collection[int], direction: SortDirection = SortDirection.DESC
    ) -> List[ProjectedRecord]:
        pass

    @abstractmethod
    async def exists(self, member_id: int) -> bool:
        pass

    @abstractmethod
    async def find_team_members(self, team_id: int) -> List[ProjectedRecord]:
        pass

    @abstractmethod
    async def sum_values_by_group(self) -> List[int]:
        pass

    @abstractmethod
    async def add_team(self, team: Team) -> Team:
        pass

    @abstractmethod
    async def add_member(self, member: Member) -> Member:
        pass
