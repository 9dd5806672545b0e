"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the database, repositories, domain services
and application services. Components are created on demand and cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.datetime_utils import Clock, utcnow

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.geolocation import GeoFenceChecker
    from ..application.services.access_guard import AccessGuard
    from ..application.services.account_service import AccountService
    from ..application.services.invitation_service import InvitationService
    from ..application.services.ranking_service import RankingService
    from ..application.services.relationship_service import RelationshipService
    from ..application.services.resource_service import ResourceService
    from ..application.services.track_service import TrackService
    from ..application.services.voting_service import VotingService
    from ..domain.access.services import AccessEvaluator
    from ..domain.accounts.repository import AccountRepository
    from ..domain.music.repository import TrackRepository
    from ..domain.resources.repository import InvitationRepository, ResourceRepository
    from ..domain.shared.events import EventBus
    from ..domain.social.repository import RelationshipRepository
    from ..domain.voting.repository import VoteRepository
    from ..infrastructure.persistence.database import Database
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings
    clock: Clock = utcnow

    # Persistence layer
    _database: Database | None = None
    _account_repository: AccountRepository | None = None
    _relationship_repository: RelationshipRepository | None = None
    _resource_repository: ResourceRepository | None = None
    _invitation_repository: InvitationRepository | None = None
    _track_repository: TrackRepository | None = None
    _vote_repository: VoteRepository | None = None

    # Infrastructure adapters
    _geo_fence_checker: GeoFenceChecker | None = None

    # Domain services
    _access_evaluator: AccessEvaluator | None = None
    _event_bus: EventBus | None = None

    # Application services
    _access_guard: AccessGuard | None = None
    _ranking_service: RankingService | None = None
    _account_service: AccountService | None = None
    _relationship_service: RelationshipService | None = None
    _invitation_service: InvitationService | None = None
    _resource_service: ResourceService | None = None
    _track_service: TrackService | None = None
    _voting_service: VotingService | None = None

    # === Database ===

    @property
    def database(self) -> Database:
        """Get the database connection manager."""
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.database.url, settings=self.settings.database)
        return self._database

    # === Repositories ===

    @property
    def account_repository(self) -> AccountRepository:
        if self._account_repository is None:
            from ..infrastructure.persistence.repositories.account_repository import (
                SQLiteAccountRepository,
            )

            self._account_repository = SQLiteAccountRepository(self.database)
        return self._account_repository

    @property
    def relationship_repository(self) -> RelationshipRepository:
        if self._relationship_repository is None:
            from ..infrastructure.persistence.repositories.relationship_repository import (
                SQLiteRelationshipRepository,
            )

            self._relationship_repository = SQLiteRelationshipRepository(self.database)
        return self._relationship_repository

    @property
    def resource_repository(self) -> ResourceRepository:
        if self._resource_repository is None:
            from ..infrastructure.persistence.repositories.resource_repository import (
                SQLiteResourceRepository,
            )

            self._resource_repository = SQLiteResourceRepository(self.database)
        return self._resource_repository

    @property
    def invitation_repository(self) -> InvitationRepository:
        if self._invitation_repository is None:
            from ..infrastructure.persistence.repositories.resource_repository import (
                SQLiteInvitationRepository,
            )

            self._invitation_repository = SQLiteInvitationRepository(self.database)
        return self._invitation_repository

    @property
    def track_repository(self) -> TrackRepository:
        if self._track_repository is None:
            from ..infrastructure.persistence.repositories.track_repository import (
                SQLiteTrackRepository,
            )

            self._track_repository = SQLiteTrackRepository(self.database)
        return self._track_repository

    @property
    def vote_repository(self) -> VoteRepository:
        if self._vote_repository is None:
            from ..infrastructure.persistence.repositories.vote_repository import (
                SQLiteVoteRepository,
            )

            self._vote_repository = SQLiteVoteRepository(self.database)
        return self._vote_repository

    # === Adapters ===

    @property
    def geo_fence_checker(self) -> GeoFenceChecker:
        if self._geo_fence_checker is None:
            from ..infrastructure.geo.haversine import HaversineGeoFenceChecker

            self._geo_fence_checker = HaversineGeoFenceChecker()
        return self._geo_fence_checker

    # === Domain Services ===

    @property
    def access_evaluator(self) -> AccessEvaluator:
        if self._access_evaluator is None:
            from ..domain.access.services import AccessEvaluator

            self._access_evaluator = AccessEvaluator(clock=self.clock)
        return self._access_evaluator

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    # === Application Services ===

    @property
    def access_guard(self) -> AccessGuard:
        if self._access_guard is None:
            from ..application.services.access_guard import AccessGuard

            self._access_guard = AccessGuard(
                resource_repository=self.resource_repository,
                invitation_repository=self.invitation_repository,
                evaluator=self.access_evaluator,
            )
        return self._access_guard

    @property
    def ranking_service(self) -> RankingService:
        if self._ranking_service is None:
            from ..application.services.ranking_service import RankingService

            self._ranking_service = RankingService(
                transactions=self.database,
                track_repository=self.track_repository,
                vote_repository=self.vote_repository,
            )
        return self._ranking_service

    @property
    def account_service(self) -> AccountService:
        if self._account_service is None:
            from ..application.services.account_service import AccountService

            self._account_service = AccountService(
                transactions=self.database,
                account_repository=self.account_repository,
                clock=self.clock,
            )
        return self._account_service

    @property
    def relationship_service(self) -> RelationshipService:
        if self._relationship_service is None:
            from ..application.services.relationship_service import RelationshipService

            self._relationship_service = RelationshipService(
                transactions=self.database,
                account_repository=self.account_repository,
                relationship_repository=self.relationship_repository,
                event_bus=self.event_bus,
                clock=self.clock,
            )
        return self._relationship_service

    @property
    def invitation_service(self) -> InvitationService:
        if self._invitation_service is None:
            from ..application.services.invitation_service import InvitationService

            self._invitation_service = InvitationService(
                transactions=self.database,
                account_repository=self.account_repository,
                invitation_repository=self.invitation_repository,
                access_guard=self.access_guard,
                event_bus=self.event_bus,
                clock=self.clock,
            )
        return self._invitation_service

    @property
    def resource_service(self) -> ResourceService:
        if self._resource_service is None:
            from ..application.services.resource_service import ResourceService

            self._resource_service = ResourceService(
                transactions=self.database,
                resource_repository=self.resource_repository,
                access_guard=self.access_guard,
                event_bus=self.event_bus,
                default_fence_radius_m=self.settings.access.default_fence_radius_m,
                clock=self.clock,
            )
        return self._resource_service

    @property
    def track_service(self) -> TrackService:
        if self._track_service is None:
            from ..application.services.track_service import TrackService

            self._track_service = TrackService(
                transactions=self.database,
                track_repository=self.track_repository,
                access_guard=self.access_guard,
                ranking_service=self.ranking_service,
                event_bus=self.event_bus,
                max_tracks_per_resource=self.settings.ranking.max_tracks_per_resource,
                clock=self.clock,
            )
        return self._track_service

    @property
    def voting_service(self) -> VotingService:
        if self._voting_service is None:
            from ..application.services.voting_service import VotingService

            self._voting_service = VotingService(
                transactions=self.database,
                track_repository=self.track_repository,
                vote_repository=self.vote_repository,
                access_guard=self.access_guard,
                ranking_service=self.ranking_service,
                event_bus=self.event_bus,
                geo_fence_checker=self.geo_fence_checker,
                clock=self.clock,
            )
        return self._voting_service

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize all async resources."""
        await self.database.initialize()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._event_bus is not None:
            self._event_bus.clear()

        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings, clock: Clock = utcnow) -> Container:
    """Create a new dependency injection container."""
    return Container(settings, clock=clock)
