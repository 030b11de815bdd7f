from typing import FrozenSet, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from member_search.applications.interfaces.dtos.filter_page import FilterPage, KeysetPage, OffsetWindow
from member_search.domain.exceptions import InvalidArgumentError
from member_search.domain.models.predicate import Predicate
from member_search.domain.models.search import FilterCriteria, Page, ProjectedRecord, SortDirection
from member_search.domain.ports.repositories.member_repository import MemberRepository
from member_search.domain.ports.services.logger import LoggerPort
from member_search.domain.services.predicate_builder import build_predicates, id_after
from member_search.infrastructure.config.settings import Settings

P = TypeVar("P", bound=BaseModel)


class PredicateQueryService:
    """Dynamic member search over a record store.

    Only the conditions present in a ``FilterCriteria`` become predicates, and
    every read selects the projected columns rather than whole entities.

    Two paging modes are offered. ``search_offset`` skips ``page_number * page_size``
    rows and reports a total; the store still reads and discards every skipped
    row, so it is meant for shallow pages. ``search_keyset`` continues from the
    last id the caller saw and never scans skipped rows; prefer it for deep paging.

    The offset content read and its count read are separate statements. Under
    concurrent writes ``total_count`` can disagree with ``content``.
    """

    def __init__(
        self,
        member_repository: MemberRepository,
        logger: LoggerPort,
        default_page_size: int = 20,
        max_page_size: int = 1000,
    ):
        self.member_repository = member_repository
        self.logger = logger
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    @classmethod
    def from_settings(
        cls, member_repository: MemberRepository, settings: Settings, logger: LoggerPort
    ) -> "PredicateQueryService":
        return cls(
            member_repository=member_repository,
            logger=logger,
            default_page_size=settings.DEFAULT_PAGE_SIZE,
            max_page_size=settings.MAX_PAGE_SIZE,
        )

    def build_predicates(self, criteria: FilterCriteria) -> FrozenSet[Predicate]:
        return build_predicates(criteria)

    async def search_offset(
        self, criteria: FilterCriteria, page_number: int = 0, page_size: Optional[int] = None
    ) -> Page:
        filter_page = self._paging(
            FilterPage,
            page_number=page_number,
            page_size=self.default_page_size if page_size is None else page_size,
        )
        self._check_criteria(criteria)
        self._check_size("page_size", filter_page.page_size)

        predicates = build_predicates(criteria)
        offset = filter_page.offset
        page_size = filter_page.page_size
        self.logger.debug(f"Offset search: {len(predicates)} predicates, offset={offset}, size={page_size}")

        content = await self.member_repository.find(
            predicates, SortDirection.DESC, offset=offset, limit=page_size
        )
        total = await self._total_count(predicates, offset, page_size, content)
        return Page(content=content, total_count=total, has_next=offset + len(content) < total)

    async def search_keyset(
        self,
        criteria: FilterCriteria,
        last_seen_id: Optional[int] = None,
        limit: Optional[int] = None,
        direction: SortDirection = SortDirection.DESC,
    ) -> Page:
        keyset_page = self._paging(
            KeysetPage,
            last_seen_id=last_seen_id,
            limit=self.default_page_size if limit is None else limit,
            direction=direction,
        )
        self._check_criteria(criteria)
        self._check_size("limit", keyset_page.limit)

        limit = keyset_page.limit
        predicates = build_predicates(criteria)
        cursor = id_after(keyset_page.last_seen_id, keyset_page.direction)
        if cursor is not None:
            predicates = predicates | {cursor}
        self.logger.debug(f"Keyset search: {len(predicates)} predicates, after={last_seen_id}, limit={limit}")

        # one extra row tells us whether another page exists
        rows = await self.member_repository.find(predicates, keyset_page.direction, offset=0, limit=limit + 1)
        return Page(content=rows[:limit], total_count=None, has_next=len(rows) > limit)

    async def search_covering(self, criteria: FilterCriteria, offset: int, limit: int) -> List[ProjectedRecord]:
        """Page through ids only, then load the projected rows for that id window."""
        window = self._paging(OffsetWindow, offset=offset, limit=limit)
        self._check_criteria(criteria)
        self._check_size("limit", window.limit)

        predicates = build_predicates(criteria)
        ids = await self.member_repository.find_ids(
            predicates, SortDirection.DESC, offset=window.offset, limit=window.limit
        )
        if not ids:
            return []
        return await self.member_repository.find_by_ids(ids, SortDirection.DESC)

    async def exists(self, member_id: int) -> bool:
        return await self.member_repository.exists(member_id)

    async def find_team_members(self, team_id: int) -> List[ProjectedRecord]:
        self.logger.debug(f"Loading members of team {team_id}")
        return await self.member_repository.find_team_members(team_id)

    async def sum_values_by_group(self) -> List[int]:
        return await self.member_repository.sum_values_by_group()

    async def _total_count(
        self, predicates: FrozenSet[Predicate], offset: int, page_size: int, content: List[ProjectedRecord]
    ) -> int:
        # A short page is the last one, so the total follows without a count query.
        if offset == 0 and len(content) < page_size:
            return len(content)
        if content and len(content) < page_size:
            return offset + len(content)
        return await self.member_repository.count(predicates)

    def _paging(self, model: Type[P], **values) -> P:
        try:
            return model(**values)
        except ValidationError as e:
            self._reject("; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()))

    def _check_criteria(self, criteria: FilterCriteria) -> None:
        if criteria.min_value is not None and criteria.max_value is not None:
            if criteria.min_value > criteria.max_value:
                self._reject(f"min_value {criteria.min_value} is greater than max_value {criteria.max_value}")

    def _check_size(self, name: str, size: int) -> None:
        if size > self.max_page_size:
            self._reject(f"{name} must not exceed {self.max_page_size}, got {size}")

    def _reject(self, message: str) -> None:
        self.logger.warning(f"Rejected search: {message}")
        raise InvalidArgumentError(message)
