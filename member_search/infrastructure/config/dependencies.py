from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from member_search.applications.services.predicate_query_service import PredicateQueryService
from member_search.domain.ports.repositories.member_repository import MemberRepository
from member_search.domain.ports.services.logger import LoggerPort
from member_search.infrastructure.adapters.repositories.sqlalchemy_member_repository import (
    SQLAlchemyMemberRepository,
)
from member_search.infrastructure.config.settings import Settings
from member_search.infrastructure.logging.std_logger_adapter import StdLoggerAdapter


def get_logger() -> LoggerPort:
    return StdLoggerAdapter("member_search")


def get_settings() -> Settings:
    return Settings()


def get_member_repository(session: AsyncSession) -> MemberRepository:
    return SQLAlchemyMemberRepository(session)


def get_predicate_query_service(
    session: AsyncSession,
    settings: Optional[Settings] = None,
    logger: Optional[LoggerPort] = None,
) -> PredicateQueryService:
    return PredicateQueryService.from_settings(
        member_repository=get_member_repository(session),
        settings=settings or get_settings(),
        logger=logger or get_logger(),
    )
