"""Tests for TrackService: adding, removing, playing and moving tracks."""

import pytest
import pytest_asyncio

from music_room.domain.music.value_objects import TrackState
from music_room.domain.resources.value_objects import CollaboratorRole, EditPolicy
from music_room.domain.shared.enums import Visibility
from music_room.domain.shared.events import TrackAdded, TrackPlayed, TrackRankingChanged
from music_room.domain.shared.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    InvalidArgumentError,
    InvalidOperationError,
)


@pytest_asyncio.fixture
async def event(resource_service, host):
    return await resource_service.create_event(host, "Block Party")


@pytest_asyncio.fixture
async def mix(resource_service, host):
    return await resource_service.create_list(host, "Road Trip")


@pytest_asyncio.fixture
async def outsider(make_principal):
    return await make_principal("outsider")


class TestAddTrack:
    async def test_track_gets_next_position(self, track_service, event, host, guest, sample_draft):
        first = await track_service.add_track(host, event.id, sample_draft("One"))
        second = await track_service.add_track(guest, event.id, sample_draft("Two"))

        assert first.position == 1
        assert second.position == 2
        assert second.added_by == guest.account_id
        assert second.tally == 0

    async def test_catalog_uri_is_enough(self, track_service, event, host, sample_draft):
        track = await track_service.add_track(
            host, event.id, sample_draft(video_id=None, catalog_uri="catalog:track:42")
        )

        assert track.media_reference == "catalog:track:42"

    async def test_media_reference_required(self, track_service, event, host, sample_draft):
        with pytest.raises(InvalidArgumentError, match="video id or a catalog uri"):
            await track_service.add_track(host, event.id, sample_draft(video_id=None))

    async def test_unknown_resource(self, track_service, host, sample_draft):
        with pytest.raises(EntityNotFoundError):
            await track_service.add_track(host, "missing", sample_draft())

    async def test_private_event_rejects_strangers(
        self, track_service, resource_service, host, guest, sample_draft
    ):
        event = await resource_service.create_event(host, "Secret", visibility=Visibility.PRIVATE)

        with pytest.raises(ForbiddenError):
            await track_service.add_track(guest, event.id, sample_draft())

    async def test_open_list_accepts_anyone(self, track_service, mix, guest, sample_draft):
        track = await track_service.add_track(guest, mix.id, sample_draft())

        assert track.position == 1

    async def test_invite_only_list_needs_collaborator(
        self, track_service, resource_service, invitation_service, host, guest, sample_draft
    ):
        mix = await resource_service.create_list(host, "Crew", edit_policy=EditPolicy.INVITE_ONLY)

        with pytest.raises(ForbiddenError):
            await track_service.add_track(guest, mix.id, sample_draft())

        invitation = await invitation_service.invite(
            host, mix.id, guest.account_id, role=CollaboratorRole.COLLABORATOR
        )
        await invitation_service.respond(guest, invitation.id, accept=True)

        assert (await track_service.add_track(guest, mix.id, sample_draft())).added_by == (
            guest.account_id
        )

    async def test_viewer_cannot_add_to_invite_only_list(
        self, track_service, resource_service, invitation_service, host, guest, sample_draft
    ):
        mix = await resource_service.create_list(host, "Crew", edit_policy=EditPolicy.INVITE_ONLY)
        invitation = await invitation_service.invite(
            host, mix.id, guest.account_id, role=CollaboratorRole.VIEWER
        )
        await invitation_service.respond(guest, invitation.id, accept=True)

        with pytest.raises(ForbiddenError):
            await track_service.add_track(guest, mix.id, sample_draft())

    async def test_resource_limit(self, settings, database, clock, host, sample_draft):
        from music_room.config.container import Container
        from music_room.config.settings import RankingSettings

        limited = Container(
            settings.model_copy(update={"ranking": RankingSettings(max_tracks_per_resource=2)}),
            clock=clock,
        )
        limited._database = database
        event = await limited.resource_service.create_event(host, "Tiny")
        await limited.track_service.add_track(host, event.id, sample_draft("One"))
        await limited.track_service.add_track(host, event.id, sample_draft("Two"))

        with pytest.raises(InvalidOperationError, match="maximum of 2"):
            await limited.track_service.add_track(host, event.id, sample_draft("Three"))

    async def test_publishes_added_and_ranking(
        self, track_service, event, host, sample_draft, recorded_events
    ):
        track = await track_service.add_track(host, event.id, sample_draft())

        assert [type(e) for e in recorded_events] == [TrackAdded, TrackRankingChanged]
        assert recorded_events[0].track_id == track.id


class TestRemoveTrack:
    async def test_host_removes_any_track(
        self, track_service, voting_service, event, host, guest, sample_draft
    ):
        track = await track_service.add_track(guest, event.id, sample_draft())

        await track_service.remove_track(host, track.id)

        assert await voting_service.ranked_tracks(host, event.id) == []

    async def test_adder_removes_own_track(
        self, track_service, voting_service, event, host, guest, sample_draft
    ):
        track = await track_service.add_track(guest, event.id, sample_draft())

        await track_service.remove_track(guest, track.id)

        assert await voting_service.ranked_tracks(host, event.id) == []

    async def test_others_cannot_remove(self, track_service, event, host, outsider, sample_draft):
        track = await track_service.add_track(host, event.id, sample_draft())

        with pytest.raises(ForbiddenError):
            await track_service.remove_track(outsider, track.id)

    async def test_removal_deletes_votes_and_repacks_positions(
        self, track_service, voting_service, vote_repository, event, host, guest, clock,
        sample_draft,
    ):
        first = await track_service.add_track(host, event.id, sample_draft("One"))
        clock.advance(1)
        second = await track_service.add_track(host, event.id, sample_draft("Two"))
        await voting_service.cast_vote(guest, first.id, "up")

        await track_service.remove_track(host, first.id)

        assert await vote_repository.get(guest.account_id, first.id) is None
        ranked = await voting_service.ranked_tracks(host, event.id)
        assert [(t.id, t.position) for t in ranked] == [(second.id, 1)]

    async def test_list_editors_remove_tracks(self, track_service, mix, host, guest, sample_draft):
        track = await track_service.add_track(host, mix.id, sample_draft())

        await track_service.remove_track(guest, track.id)

    async def test_unknown_track(self, track_service, host):
        with pytest.raises(EntityNotFoundError):
            await track_service.remove_track(host, "missing")


class TestMarkPlayed:
    async def test_played_track_leaves_ranking(
        self, track_service, voting_service, event, host, clock, sample_draft, recorded_events
    ):
        first = await track_service.add_track(host, event.id, sample_draft("One"))
        clock.advance(1)
        second = await track_service.add_track(host, event.id, sample_draft("Two"))

        played = await track_service.mark_played(host, first.id)

        assert played.state is TrackState.PLAYED
        ranked = await voting_service.ranked_tracks(host, event.id)
        assert [t.id for t in ranked] == [second.id, first.id]
        assert ranked[0].position == 1
        assert TrackPlayed in {type(e) for e in recorded_events}

    async def test_playing_twice_is_noop(self, track_service, event, host, sample_draft):
        track = await track_service.add_track(host, event.id, sample_draft())
        await track_service.mark_played(host, track.id)

        again = await track_service.mark_played(host, track.id)

        assert again.is_played

    async def test_only_owner_marks_played(self, track_service, event, host, guest, sample_draft):
        track = await track_service.add_track(guest, event.id, sample_draft())

        with pytest.raises(ForbiddenError, match="Only the owner"):
            await track_service.mark_played(guest, track.id)


class TestMoveTrack:
    @pytest_asyncio.fixture
    async def three(self, track_service, mix, host, clock, sample_draft):
        tracks = []
        for title in ("A", "B", "C"):
            tracks.append(await track_service.add_track(host, mix.id, sample_draft(title)))
            clock.advance(1)
        return tracks

    async def test_move_to_front(self, track_service, three, guest):
        a, b, c = three

        ranked = await track_service.move_track(guest, c.id, 1)

        assert [t.id for t in ranked] == [c.id, a.id, b.id]
        assert [t.position for t in ranked] == [1, 2, 3]

    async def test_new_tracks_append_after_moves(
        self, track_service, voting_service, mix, three, host, sample_draft
    ):
        a, b, c = three
        await track_service.move_track(host, a.id, 3)

        added = await track_service.add_track(host, mix.id, sample_draft("D"))

        ranked = await voting_service.ranked_tracks(host, mix.id)
        assert [t.id for t in ranked] == [b.id, c.id, a.id, added.id]

    async def test_out_of_range(self, track_service, three, host):
        with pytest.raises(InvalidArgumentError, match="between 1 and 3"):
            await track_service.move_track(host, three[0].id, 4)

    async def test_played_track_cannot_move(self, track_service, three, host):
        await track_service.mark_played(host, three[0].id)

        with pytest.raises(InvalidOperationError):
            await track_service.move_track(host, three[0].id, 1)

    async def test_invite_only_list_rejects_strangers(
        self, track_service, resource_service, host, outsider, sample_draft
    ):
        crew = await resource_service.create_list(host, "Crew", edit_policy=EditPolicy.INVITE_ONLY)
        track = await track_service.add_track(host, crew.id, sample_draft())

        with pytest.raises(ForbiddenError):
            await track_service.move_track(outsider, track.id, 1)

    async def test_event_tracks_cannot_move(self, track_service, event, host, sample_draft):
        track = await track_service.add_track(host, event.id, sample_draft())

        with pytest.raises(InvalidOperationError, match="editable list"):
            await track_service.move_track(host, track.id, 1)
