import argparse
import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from member_search.domain.models.member import Member, Team
from member_search.domain.models.search import FilterCriteria
from member_search.infrastructure.config.dependencies import get_logger, get_predicate_query_service, get_settings
from member_search.infrastructure.logging.logger import setup_logging
from member_search.infrastructure.persistence.database import (
    create_schema,
    dispose_engine,
    drop_schema,
    get_engine,
    get_session_factory,
)

logger = get_logger()


async def seed(session: AsyncSession, num_teams: int, num_members: int) -> None:
    service = get_predicate_query_service(session)
    repository = service.member_repository

    teams = [await repository.add_team(Team(name=f"team{i}")) for i in range(1, num_teams + 1)]
    for i in range(1, num_members + 1):
        team = teams[(i - 1) % len(teams)] if teams else None
        await repository.add_member(Member(username=f"member{i}", age=i, team_id=team.id if team else None))
    logger.info(f"Inserted {len(teams)} teams and {num_members} members")


async def show_first_page(session: AsyncSession, team_name: str, page_size: int) -> None:
    service = get_predicate_query_service(session)
    page = await service.search_offset(FilterCriteria(group_filter=team_name), page_number=0, page_size=page_size)
    logger.info(f"{team_name}: {page.total_count} members, has_next={page.has_next}")
    for record in page.content:
        logger.info(f"  {record.id} {record.name} age={record.value}")


async def run(args: argparse.Namespace) -> None:
    engine = get_engine()
    try:
        if args.drop:
            await drop_schema(engine)
        await create_schema(engine)
        async with get_session_factory()() as session:
            await seed(session, args.teams, args.members)
            if args.show and args.teams:
                await show_first_page(session, "team1", args.page_size)
    except Exception:
        logger.exception("Seeding failed")
        raise
    finally:
        await dispose_engine()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the member/team schema and insert sample rows")
    parser.add_argument("--teams", type=int, default=2)
    parser.add_argument("--members", type=int, default=100)
    parser.add_argument("--page_size", type=int, default=10)
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    parser.add_argument("--show", action="store_true", help="print the first page of team1")
    args = parser.parse_args()

    setup_logging(get_settings().LOG_LEVEL)
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
