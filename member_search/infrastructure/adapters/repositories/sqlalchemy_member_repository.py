from typing import Collection, List

from sqlalchemy import Integer, Select, and_, func, literal, null, select
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from member_search.domain.models.member import Member as DomainMember
from member_search.domain.models.member import Team as DomainTeam
from member_search.domain.models.predicate import Predicate, SearchField
from member_search.domain.models.search import ProjectedRecord, SortDirection
from member_search.domain.ports.repositories.member_repository import MemberRepository
from member_search.infrastructure.persistence.models import Member as SQLMember
from member_search.infrastructure.persistence.models import Team as SQLTeam

_COLUMNS = {
    SearchField.ID: SQLMember.id,
    SearchField.NAME: SQLMember.username,
    SearchField.VALUE: SQLMember.age,
    SearchField.GROUP_ID: SQLMember.team_id,
    SearchField.GROUP_NAME: SQLTeam.name,
}

_TEAM_JOIN = SQLMember.team_id == SQLTeam.id

_GROUP_SORTING_DIALECTS = {"mysql", "mariadb"}


def to_clause(predicate: Predicate):
    return predicate.compare(_COLUMNS[predicate.field], predicate.value)


def needs_team_join(predicates: Collection[Predicate]) -> bool:
    return any(p.field == SearchField.GROUP_NAME for p in predicates)


def apply_predicates(stmt: Select, predicates: Collection[Predicate]) -> Select:
    # sorted so equal predicate sets always render the same SQL
    ordered = sorted(predicates, key=lambda p: (p.field.value, p.kind.value))
    if not ordered:
        return stmt
    return stmt.where(and_(*(to_clause(p) for p in ordered)))


def order_by_id(stmt: Select, direction: SortDirection) -> Select:
    return stmt.order_by(SQLMember.id.desc() if direction == SortDirection.DESC else SQLMember.id.asc())


def projection_statement() -> Select:
    """Member columns plus team id/name through an explicit LEFT OUTER JOIN."""
    return (
        select(
            SQLMember.id.label("member_id"),
            SQLMember.username,
            SQLMember.age,
            SQLTeam.id.label("team_id"),
            SQLTeam.name.label("team_name"),
        )
        .select_from(SQLMember)
        .outerjoin(SQLTeam, _TEAM_JOIN)
    )


def find_statement(
    predicates: Collection[Predicate], direction: SortDirection, offset: int, limit: int
) -> Select:
    stmt = apply_predicates(projection_statement(), predicates)
    return order_by_id(stmt, direction).offset(offset).limit(limit)


def count_statement(predicates: Collection[Predicate]) -> Select:
    stmt = select(func.count(SQLMember.id)).select_from(SQLMember)
    if needs_team_join(predicates):
        stmt = stmt.outerjoin(SQLTeam, _TEAM_JOIN)
    return apply_predicates(stmt, predicates)


def find_ids_statement(
    predicates: Collection[Predicate], direction: SortDirection, offset: int, limit: int
) -> Select:
    stmt = select(SQLMember.id).select_from(SQLMember)
    if needs_team_join(predicates):
        stmt = stmt.outerjoin(SQLTeam, _TEAM_JOIN)
    stmt = apply_predicates(stmt, predicates)
    return order_by_id(stmt, direction).offset(offset).limit(limit)


def exists_statement(member_id: int) -> Select:
    return select(literal(1)).select_from(SQLMember).where(SQLMember.id == member_id).limit(1)


def team_members_statement(team_id: int) -> Select:
    # team_id is already known to the caller, so it is echoed back as a bound literal
    return (
        select(
            SQLMember.id.label("member_id"),
            SQLMember.username,
            SQLMember.age,
            literal(team_id, type_=Integer).label("team_id"),
            SQLTeam.name.label("team_name"),
        )
        .select_from(SQLMember)
        .join(SQLTeam, _TEAM_JOIN)
        .where(SQLMember.team_id == team_id)
        .order_by(SQLMember.id.asc())
    )


def sum_by_group_statement(suppress_group_sort: bool = False) -> Select:
    """Per-team age totals.

    MySQL sorts GROUP BY output unless told ``ORDER BY NULL``; other engines
    never sort implicitly, so the clause is only added on request.
    """
    stmt = (
        select(func.sum(SQLMember.age))
        .select_from(SQLMember)
        .join(SQLTeam, _TEAM_JOIN)
        .group_by(SQLMember.team_id)
    )
    return stmt.order_by(null()) if suppress_group_sort else stmt


class SQLAlchemyMemberRepository(MemberRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_record(self, row: Row) -> ProjectedRecord:
        return ProjectedRecord(
            id=row.member_id,
            name=row.username,
            value=row.age,
            group_id=row.team_id,
            group_name=row.team_name,
        )

    async def find(
        self,
        predicates: Collection[Predicate],
        direction: SortDirection = SortDirection.DESC,
        offset: int = 0,
        limit: int = 100,
    ) -> List[ProjectedRecord]:
        result = await self.session.execute(find_statement(predicates, direction, offset, limit))
        return [self._to_record(row) for row in result.all()]

    async def count(self, predicates: Collection[Predicate]) -> int:
        total = await self.session.scalar(count_statement(predicates))
        return total or 0

    async def find_ids(
        self,
        predicates: Collection[Predicate],
        direction: SortDirection = SortDirection.DESC,
        offset: int = 0,
        limit: int = 100,
    ) -> List[int]:
        result = await self.session.scalars(find_ids_statement(predicates, direction, offset, limit))
        return list(result.all())

    async def find_by_ids(
        self, member_ids: Collection[int], direction: SortDirection = SortDirection.DESC
    ) -> List[ProjectedRecord]:
        if not member_ids:
            return []
        stmt = order_by_id(projection_statement().where(SQLMember.id.in_(list(member_ids))), direction)
        result = await self.session.execute(stmt)
        return [self._to_record(row) for row in result.all()]

    async def exists(self, member_id: int) -> bool:
        found = await self.session.scalar(exists_statement(member_id))
        return found is not None

    async def find_team_members(self, team_id: int) -> List[ProjectedRecord]:
        result = await self.session.execute(team_members_statement(team_id))
        return [self._to_record(row) for row in result.all()]

    async def sum_values_by_group(self) -> List[int]:
        suppress = self.session.get_bind().dialect.name in _GROUP_SORTING_DIALECTS
        result = await self.session.scalars(sum_by_group_statement(suppress_group_sort=suppress))
        return [int(total) for total in result.all()]

    async def add_team(self, team: DomainTeam) -> DomainTeam:
        sql_team = SQLTeam(name=team.name, leader_id=team.leader_id)
        self.session.add(sql_team)
        await self.session.commit()
        await self.session.refresh(sql_team)
        return DomainTeam(id=sql_team.id, name=sql_team.name, leader_id=sql_team.leader_id)

    async def add_member(self, member: DomainMember) -> DomainMember:
        sql_member = SQLMember(username=member.username, age=member.age, team_id=member.team_id)
        self.session.add(sql_member)
        await self.session.commit()
        await self.session.refresh(sql_member)
        return DomainMember(
            id=sql_member.id, username=sql_member.username, age=sql_member.age, team_id=sql_member.team_id
        )
