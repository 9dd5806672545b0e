from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio

# ============================================================================
# Clock
# ============================================================================


class FixedClock:
    """Deterministic clock; advance it explicitly between operations."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock():
    """A clock frozen at 2026-01-01 12:00 UTC."""
    return FixedClock(datetime(2026, 1, 1, 12, 0, tzinfo=UTC))


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def database(tmp_path):
    """Create a file-backed SQLite database for testing."""
    from music_room.infrastructure.persistence.database import Database

    db = Database(str(tmp_path / "music_room.db"))
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def account_repository(database):
    from music_room.infrastructure.persistence.repositories.account_repository import (
        SQLiteAccountRepository,
    )

    return SQLiteAccountRepository(database)


@pytest_asyncio.fixture
async def relationship_repository(database):
    from music_room.infrastructure.persistence.repositories.relationship_repository import (
        SQLiteRelationshipRepository,
    )

    return SQLiteRelationshipRepository(database)


@pytest_asyncio.fixture
async def resource_repository(database):
    from music_room.infrastructure.persistence.repositories.resource_repository import (
        SQLiteResourceRepository,
    )

    return SQLiteResourceRepository(database)


@pytest_asyncio.fixture
async def invitation_repository(database):
    from music_room.infrastructure.persistence.repositories.resource_repository import (
        SQLiteInvitationRepository,
    )

    return SQLiteInvitationRepository(database)


@pytest_asyncio.fixture
async def track_repository(database):
    from music_room.infrastructure.persistence.repositories.track_repository import (
        SQLiteTrackRepository,
    )

    return SQLiteTrackRepository(database)


@pytest_asyncio.fixture
async def vote_repository(database):
    from music_room.infrastructure.persistence.repositories.vote_repository import (
        SQLiteVoteRepository,
    )

    return SQLiteVoteRepository(database)


# ============================================================================
# Container / Service Fixtures
# ============================================================================


@pytest.fixture
def settings(tmp_path):
    from music_room.config.settings import DatabaseSettings, Settings

    return Settings(
        _env_file=None,
        environment="test",
        database=DatabaseSettings(url=f"sqlite:///{tmp_path / 'music_room.db'}"),
    )


@pytest_asyncio.fixture
async def container(settings, database, clock):
    """A container wired to the test database and the fixed clock."""
    from music_room.config.container import Container

    c = Container(settings, clock=clock)
    c._database = database
    yield c
    c.event_bus.clear()


@pytest.fixture
def account_service(container):
    return container.account_service


@pytest.fixture
def relationship_service(container):
    return container.relationship_service


@pytest.fixture
def invitation_service(container):
    return container.invitation_service


@pytest.fixture
def resource_service(container):
    return container.resource_service


@pytest.fixture
def track_service(container):
    return container.track_service


@pytest.fixture
def voting_service(container):
    return container.voting_service


@pytest.fixture
def event_bus(container):
    return container.event_bus


@pytest.fixture
def recorded_events(event_bus):
    """Collect every published domain event, in publication order."""
    from music_room.domain.shared import events as ev

    recorded: list = []

    async def record(event):
        recorded.append(event)

    for event_type in (
        ev.ResourceStatusChanged,
        ev.MembershipChanged,
        ev.TrackAdded,
        ev.TrackRemoved,
        ev.TrackPlayed,
        ev.TrackRankingChanged,
        ev.VoteCast,
        ev.VoteRetracted,
        ev.RelationshipRequested,
        ev.RelationshipEstablished,
    ):
        event_bus.subscribe(event_type, record)
    return recorded


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def make_principal(account_service):
    """Factory registering an account and returning its principal."""
    from music_room.domain.accounts.entities import AccountTier

    async def _make(handle: str, tier: AccountTier = AccountTier.STANDARD):
        account = await account_service.register(handle, f"{handle}@example.com", tier=tier)
        return await account_service.principal_for(account.id)

    return _make


@pytest_asyncio.fixture
async def host(make_principal):
    return await make_principal("host")


@pytest_asyncio.fixture
async def guest(make_principal):
    return await make_principal("guest")


@pytest.fixture
def sample_draft():
    from music_room.domain.music.value_objects import TrackDraft

    def _draft(title: str = "Test Track", video_id: str | None = "vid-123", **kwargs):
        return TrackDraft(title=title, artist="Test Artist", video_id=video_id, **kwargs)

    return _draft
