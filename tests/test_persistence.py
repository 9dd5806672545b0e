"""
Tests for the SQLite persistence layer.

Covers transaction joining and rollback, snapshots, statistics and the
uniqueness rules each repository enforces.
"""

from datetime import UTC, datetime, timedelta

import aiosqlite
import pytest

from music_room.domain.accounts.entities import Account, AccountTier
from music_room.domain.music.entities import Track
from music_room.domain.resources.entities import EditableList, Event, Invitation
from music_room.domain.resources.value_objects import (
    AccessTier,
    CollaboratorRole,
    GeoFence,
    TimeWindow,
)
from music_room.domain.shared.enums import HandshakeState, ResourceKind, Visibility
from music_room.domain.shared.exceptions import ConflictError
from music_room.domain.social.entities import Relationship, RelationshipRequest
from music_room.domain.voting.entities import Vote
from music_room.domain.voting.value_objects import VoteDirection

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


async def _account(repository, handle: str) -> Account:
    return await repository.add(Account(handle=handle, contact=f"{handle}@example.com"))


def _track(resource_id: str = "evt", title: str = "Song", **kwargs) -> Track:
    return Track(
        resource_id=resource_id,
        resource_kind=ResourceKind.EVENT,
        title=title,
        video_id="vid",
        added_by="someone",
        added_at=T0,
        **kwargs,
    )


class TestDatabase:
    async def test_initialize_creates_all_tables(self, database):
        stats = await database.get_stats()

        assert stats["initialized"] is True
        assert set(stats["tables"]) == {
            "accounts",
            "relationship_requests",
            "relationships",
            "events",
            "editable_lists",
            "invitations",
            "tracks",
            "votes",
        }
        assert all(count == 0 for count in stats["tables"].values())
        assert stats["page_size"] > 0

    async def test_initialize_is_idempotent(self, database):
        await database.initialize()

        assert (await database.get_stats())["initialized"] is True

    async def test_nested_transactions_share_one_commit(self, database, account_repository):
        async with database.transaction():
            assert database.in_transaction
            await _account(account_repository, "first")
            async with database.transaction():
                await _account(account_repository, "second")

        assert not database.in_transaction
        assert (await database.get_stats())["tables"]["accounts"] == 2

    async def test_failure_rolls_back_every_joined_write(self, database, account_repository):
        with pytest.raises(RuntimeError):
            async with database.transaction():
                await _account(account_repository, "first")
                async with database.transaction():
                    await _account(account_repository, "second")
                raise RuntimeError("boom")

        assert (await database.get_stats())["tables"]["accounts"] == 0

    async def test_snapshot_sees_uncommitted_writes_of_same_task(self, database, account_repository):
        async with database.transaction():
            account = await _account(account_repository, "inside")
            async with database.snapshot():
                assert await account_repository.get(account.id) is not None

    async def test_snapshot_does_not_count_as_write_transaction(self, database):
        async with database.snapshot():
            assert database.in_transaction is False

    async def test_stats_before_initialize(self, tmp_path):
        from music_room.infrastructure.persistence.database import Database

        db = Database(f"sqlite:///{tmp_path / 'fresh.db'}")

        stats = await db.get_stats()

        assert stats["initialized"] is False
        assert stats["tables"] == {}
        assert stats["db_path"].endswith("fresh.db")

    async def test_in_memory_database(self):
        from music_room.infrastructure.persistence.database import Database

        db = Database(":memory:")
        await db.initialize()
        try:
            await db.execute(
                "INSERT INTO accounts (id, handle, contact, created_at) VALUES (?, ?, ?, ?)",
                ("a1", "mem", "mem@example.com", T0.isoformat()),
            )
            row = await db.fetch_one("SELECT handle FROM accounts WHERE id = ?", ("a1",))
        finally:
            await db.close()

        assert row == {"handle": "mem"}


class TestAccountRepository:
    async def test_roundtrip(self, account_repository):
        account = await _account(account_repository, "dj_ana")

        loaded = await account_repository.get(account.id)

        assert loaded == account

    async def test_duplicate_handle_is_case_insensitive(self, account_repository):
        await _account(account_repository, "dj_ana")

        with pytest.raises(ConflictError, match="already taken"):
            await account_repository.add(Account(handle="DJ_Ana", contact="other@example.com"))

    async def test_duplicate_contact(self, account_repository):
        await _account(account_repository, "dj_ana")

        with pytest.raises(ConflictError, match="already registered"):
            await account_repository.add(Account(handle="other", contact="DJ_ANA@example.com"))

    async def test_set_tier(self, account_repository):
        account = await _account(account_repository, "vip")

        assert await account_repository.set_tier(account.id, AccountTier.ELEVATED)
        assert (await account_repository.get(account.id)).tier is AccountTier.ELEVATED
        assert not await account_repository.set_tier("missing", AccountTier.ELEVATED)

    async def test_search_escapes_wildcards(self, account_repository):
        await _account(account_repository, "a_b")
        await _account(account_repository, "axb")

        results = await account_repository.search("a_", 10)

        assert [a.handle for a in results] == ["a_b"]


class TestRelationshipRepository:
    async def test_one_pending_request_per_pair(self, account_repository, relationship_repository):
        a = await _account(account_repository, "alice")
        b = await _account(account_repository, "bobby")
        await relationship_repository.add_request(
            RelationshipRequest(requester_id=a.id, recipient_id=b.id)
        )

        with pytest.raises(ConflictError):
            await relationship_repository.add_request(
                RelationshipRequest(requester_id=a.id, recipient_id=b.id)
            )

    async def test_resolved_request_allows_new_one(
        self, account_repository, relationship_repository
    ):
        a = await _account(account_repository, "alice")
        b = await _account(account_repository, "bobby")
        first = await relationship_repository.add_request(
            RelationshipRequest(requester_id=a.id, recipient_id=b.id)
        )
        await relationship_repository.update_state(first.id, HandshakeState.DECLINED, T0)

        second = await relationship_repository.add_request(
            RelationshipRequest(requester_id=a.id, recipient_id=b.id)
        )

        assert (await relationship_repository.find_pending(a.id, b.id)).id == second.id

    async def test_update_state_only_from_pending(
        self, account_repository, relationship_repository
    ):
        a = await _account(account_repository, "alice")
        b = await _account(account_repository, "bobby")
        request = await relationship_repository.add_request(
            RelationshipRequest(requester_id=a.id, recipient_id=b.id)
        )

        assert await relationship_repository.update_state(request.id, HandshakeState.ACCEPTED, T0)
        assert not await relationship_repository.update_state(
            request.id, HandshakeState.DECLINED, T0
        )

    async def test_add_edges_ignores_existing(self, account_repository, relationship_repository):
        a = await _account(account_repository, "alice")
        b = await _account(account_repository, "bobby")
        edges = [
            Relationship(owner_id=a.id, peer_id=b.id, created_at=T0),
            Relationship(owner_id=b.id, peer_id=a.id, created_at=T0),
        ]

        assert await relationship_repository.add_edges(edges) == 2
        assert await relationship_repository.add_edges(edges) == 0
        assert len(await relationship_repository.list_edges(a.id)) == 1

    async def test_delete_edge_is_directional(self, account_repository, relationship_repository):
        a = await _account(account_repository, "alice")
        b = await _account(account_repository, "bobby")
        await relationship_repository.add_edges(
            [
                Relationship(owner_id=a.id, peer_id=b.id, created_at=T0),
                Relationship(owner_id=b.id, peer_id=a.id, created_at=T0),
            ]
        )

        assert await relationship_repository.delete_edge(a.id, b.id)

        assert not await relationship_repository.has_edge(a.id, b.id)
        assert await relationship_repository.has_edge(b.id, a.id)


class TestResourceRepository:
    async def test_event_roundtrip_with_fence_and_window(
        self, account_repository, resource_repository
    ):
        owner = await _account(account_repository, "host")
        event = Event(
            owner_id=owner.id,
            name="Rooftop",
            visibility=Visibility.PRIVATE,
            access_tier=AccessTier.LOCATION_BOUNDED,
            geo_fence=GeoFence(latitude=48.8566, longitude=2.3522, radius_m=250),
            time_window=TimeWindow(starts_at=T0, ends_at=T0 + timedelta(hours=3)),
            created_at=T0,
            updated_at=T0,
        )
        await resource_repository.add(event)

        loaded = await resource_repository.get(event.id)

        assert loaded == event
        assert await resource_repository.get_list(event.id) is None

    async def test_list_roundtrip(self, account_repository, resource_repository):
        owner = await _account(account_repository, "host")
        editable_list = EditableList(owner_id=owner.id, name="Mix", created_at=T0, updated_at=T0)
        await resource_repository.add(editable_list)

        assert await resource_repository.get(editable_list.id) == editable_list

    async def test_public_events_exclude_private_and_inactive(
        self, account_repository, resource_repository
    ):
        owner = await _account(account_repository, "host")
        visible = Event(owner_id=owner.id, name="Open")
        hidden = Event(owner_id=owner.id, name="Closed", visibility=Visibility.PRIVATE)
        stopped = Event(owner_id=owner.id, name="Over", is_active=False)
        for event in (visible, hidden, stopped):
            await resource_repository.add(event)

        public = await resource_repository.list_public_events()

        assert [e.id for e in public] == [visible.id]

    async def test_update_missing_resource(self, resource_repository):
        assert not await resource_repository.update(Event(owner_id="nobody", name="Ghost"))


class TestInvitationRepository:
    async def test_one_invitation_per_invitee(self, account_repository, invitation_repository):
        guest = await _account(account_repository, "guest")
        invitation = Invitation(
            resource_id="evt",
            resource_kind=ResourceKind.EVENT,
            invitee_id=guest.id,
            grantor_id="host",
        )
        await invitation_repository.add(invitation)

        with pytest.raises(ConflictError):
            await invitation_repository.add(
                Invitation(
                    resource_id="evt",
                    resource_kind=ResourceKind.EVENT,
                    invitee_id=guest.id,
                    grantor_id="host",
                    role=CollaboratorRole.VIEWER,
                )
            )

    async def test_list_for_invitee_filters_state(self, account_repository, invitation_repository):
        guest = await _account(account_repository, "guest")
        pending = Invitation(
            resource_id="evt-1",
            resource_kind=ResourceKind.EVENT,
            invitee_id=guest.id,
            grantor_id="host",
        )
        accepted = Invitation(
            resource_id="evt-2",
            resource_kind=ResourceKind.EVENT,
            invitee_id=guest.id,
            grantor_id="host",
            state=HandshakeState.ACCEPTED,
        )
        await invitation_repository.add(pending)
        await invitation_repository.add(accepted)

        only_pending = await invitation_repository.list_for_invitee(guest.id, HandshakeState.PENDING)
        everything = await invitation_repository.list_for_invitee(guest.id)

        assert [i.id for i in only_pending] == [pending.id]
        assert {i.id for i in everything} == {pending.id, accepted.id}


class TestTrackAndVoteRepositories:
    async def test_add_assigns_increasing_sequence(self, track_repository):
        first = await track_repository.add(_track(title="One"))
        second = await track_repository.add(_track(title="Two"))

        assert 0 < first.sequence < second.sequence
        assert (await track_repository.get(second.id)).sequence == second.sequence

    async def test_list_puts_played_tracks_last(self, track_repository):
        played = await track_repository.add(_track(title="Old"))
        fresh = await track_repository.add(_track(title="New"))
        await track_repository.mark_played(played.id)
        await track_repository.set_positions([(fresh.id, 1)])

        tracks = await track_repository.list_for_resource("evt")

        assert [t.id for t in tracks] == [fresh.id, played.id]
        assert await track_repository.count_for_resource("evt") == 2

    async def test_mark_played_only_once(self, track_repository):
        track = await track_repository.add(_track())

        assert await track_repository.mark_played(track.id)
        assert not await track_repository.mark_played(track.id)

    async def test_table_rejects_track_without_media(self, database):
        with pytest.raises(aiosqlite.IntegrityError):
            await database.execute(
                """
                INSERT INTO tracks (
                    id, resource_id, resource_kind, title, artist,
                    video_id, catalog_uri, added_by, added_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                ("t1", "evt", "event", "Song", "Band", "  ", None, "someone", T0.isoformat()),
            )

        assert await database.fetch_one("SELECT id FROM tracks WHERE id = ?", ("t1",)) is None

    async def test_vote_upsert_replaces_direction(self, track_repository, vote_repository):
        track = await track_repository.add(_track())
        await vote_repository.upsert(
            Vote(
                account_id="a",
                track_id=track.id,
                resource_id="evt",
                direction=VoteDirection.UP,
                created_at=T0,
                updated_at=T0,
            )
        )

        later = T0 + timedelta(minutes=1)
        stored = await vote_repository.upsert(
            Vote(
                account_id="a",
                track_id=track.id,
                resource_id="evt",
                direction=VoteDirection.DOWN,
                created_at=later,
                updated_at=later,
            )
        )

        assert stored.direction is VoteDirection.DOWN
        assert stored.created_at == T0
        assert stored.updated_at == later
        assert await vote_repository.directions_for_track(track.id) == [VoteDirection.DOWN]

    async def test_deleting_track_deletes_its_votes(self, track_repository, vote_repository):
        track = await track_repository.add(_track())
        await vote_repository.upsert(
            Vote(account_id="a", track_id=track.id, resource_id="evt", direction=VoteDirection.UP)
        )

        await track_repository.delete(track.id)

        assert await vote_repository.get("a", track.id) is None
