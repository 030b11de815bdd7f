import pytest

from member_search.applications.services.predicate_query_service import PredicateQueryService
from member_search.domain.models.search import FilterCriteria, SortDirection

from .fakes import InMemoryMemberRepository

SINGLE_FIELD_CRITERIA = [
    (FilterCriteria(name_filter="member3"), lambda r: r.name == "member3"),
    (FilterCriteria(group_filter="teamB"), lambda r: r.group_name == "teamB"),
    (FilterCriteria(min_value=12), lambda r: r.value >= 12),
    (FilterCriteria(max_value=12), lambda r: r.value <= 12),
]


class TestPaginationProperties:
    """Checks the service against plain list filtering over the same rows"""

    @pytest.fixture
    def repository(self, roster):
        return InMemoryMemberRepository(roster)

    @pytest.fixture
    def service(self, repository, mock_logger):
        return PredicateQueryService(repository, mock_logger)

    @pytest.mark.asyncio
    async def test_unfiltered_pages_cover_everything(self, service, roster):
        page = await service.search_offset(FilterCriteria(), page_number=0, page_size=100)

        assert [r.id for r in page.content] == sorted((r.id for r in roster), reverse=True)
        assert page.total_count == len(roster)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("criteria, condition", SINGLE_FIELD_CRITERIA)
    async def test_single_field_matches_reference_filter(self, service, roster, criteria, condition):
        expected = sorted((r for r in roster if condition(r)), key=lambda r: r.id, reverse=True)

        page = await service.search_offset(criteria, page_number=0, page_size=100)

        assert page.content == expected
        assert page.total_count == len(expected)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [1, 3, 4, 7, 30])
    async def test_keyset_pages_concatenate_without_gaps(self, service, roster, limit):
        criteria = FilterCriteria(min_value=5)
        expected = [r.id for r in sorted(roster, key=lambda r: r.id, reverse=True) if r.value >= 5]

        seen = []
        last_seen_id = None
        while True:
            page = await service.search_keyset(criteria, last_seen_id=last_seen_id, limit=limit)
            seen.extend(r.id for r in page.content)
            if not page.has_next:
                break
            last_seen_id = page.content[-1].id

        assert seen == expected
        assert len(seen) == len(set(seen))

    @pytest.mark.asyncio
    async def test_keyset_ascending_walk(self, service, roster):
        seen = []
        last_seen_id = None
        while True:
            page = await service.search_keyset(FilterCriteria(), last_seen_id, 8, SortDirection.ASC)
            seen.extend(r.id for r in page.content)
            if not page.has_next:
                break
            last_seen_id = page.content[-1].id

        assert seen == sorted(r.id for r in roster)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page_number, page_size", [(0, 3), (1, 3), (2, 4), (5, 2), (40, 5)])
    async def test_total_count_ignores_page_parameters(self, service, roster, page_number, page_size):
        criteria = FilterCriteria(group_filter="teamA", max_value=25)
        expected_total = sum(1 for r in roster if r.group_name == "teamA" and r.value <= 25)

        page = await service.search_offset(criteria, page_number, page_size)

        assert page.total_count == expected_total

    @pytest.mark.asyncio
    async def test_offset_pages_concatenate_without_gaps(self, service, roster):
        seen = []
        page_number = 0
        while True:
            page = await service.search_offset(FilterCriteria(), page_number, 7)
            seen.extend(r.id for r in page.content)
            if not page.has_next:
                break
            page_number += 1

        assert seen == sorted((r.id for r in roster), reverse=True)

    @pytest.mark.asyncio
    async def test_covering_search_matches_offset_content(self, service):
        criteria = FilterCriteria(group_filter="teamC")

        covering = await service.search_covering(criteria, offset=2, limit=4)
        page = await service.search_offset(criteria, page_number=1, page_size=2)

        assert covering[:2] == page.content
        assert len(covering) == 4

    @pytest.mark.asyncio
    async def test_sum_values_by_group(self, service, roster):
        totals = await service.sum_values_by_group()

        assert sorted(totals) == sorted(
            sum(r.value for r in roster if r.group_id == group_id) for group_id in (1, 2, 3)
        )

    @pytest.mark.asyncio
    async def test_team_members_lookup(self, service, roster):
        members = await service.find_team_members(2)

        assert [r.id for r in members] == [r.id for r in roster if r.group_id == 2]
