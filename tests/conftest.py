from unittest.mock import AsyncMock, MagicMock

import docker
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from testcontainers.postgres import PostgresContainer

from member_search.applications.services.predicate_query_service import PredicateQueryService
from member_search.domain.ports.repositories.member_repository import MemberRepository
from member_search.domain.ports.services.logger import LoggerPort
from member_search.infrastructure.persistence.database import create_schema, drop_schema
from .factories import record_factory
from .fakes import InMemoryMemberRepository


def _docker_available() -> bool:
    try:
        docker.from_env().ping()
    except Exception:
        return False
    return True


requires_docker = pytest.mark.skipif(not _docker_available(), reason="Docker daemon is not reachable")


@pytest.fixture
def mock_member_repository():
    """Mock record store for service testing"""
    return AsyncMock(spec=MemberRepository)


@pytest.fixture
def mock_logger():
    return MagicMock(spec=LoggerPort)


@pytest.fixture
def sample_records():
    """The three-row example: ids 1..3, names a/b/a, values 10/20/30"""
    return record_factory.from_tuples([(1, "a", 10), (2, "b", 20), (3, "a", 30)])


@pytest.fixture
def roster():
    return record_factory.create_roster(members=30, teams=3)


@pytest.fixture
def in_memory_repository(sample_records):
    return InMemoryMemberRepository(sample_records)


@pytest.fixture
def query_service(in_memory_repository, mock_logger):
    return PredicateQueryService(in_memory_repository, mock_logger)


@pytest.fixture
def mocked_query_service(mock_member_repository, mock_logger):
    return PredicateQueryService(mock_member_repository, mock_logger, default_page_size=5, max_page_size=50)


@pytest.fixture(scope="module")
def postgres_url():
    """One PostgreSQL container per test module"""
    with PostgresContainer("postgres:16", driver="psycopg") as postgres:
        yield postgres.get_connection_url()


class BaseIntegrationTest:
    """Base class for integration tests with common setup"""

    @pytest_asyncio.fixture
    async def postgres_engine(self, postgres_url):
        """Create test database engine with a fresh schema"""
        engine = create_async_engine(postgres_url)
        await create_schema(engine)

        yield engine

        await drop_schema(engine)
        await engine.dispose()

    @pytest_asyncio.fixture
    async def test_session(self, postgres_engine):
        async with AsyncSession(postgres_engine, expire_on_commit=False) as session:
            yield session
