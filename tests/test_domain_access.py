"""
Unit Tests for the Access Evaluator

Tests for:
- Visibility rules for public and private resources
- Deactivated resources denying everyone, owner included
- Premium tier gate and location-bounded voting windows
- Edit rights on editable lists
"""

from datetime import UTC, datetime, timedelta

import pytest

from music_room.domain.access.services import AccessEvaluator
from music_room.domain.access.value_objects import Principal
from music_room.domain.accounts.entities import AccountTier
from music_room.domain.resources.entities import EditableList, Event, Invitation
from music_room.domain.resources.value_objects import (
    AccessTier,
    CollaboratorRole,
    EditPolicy,
    GeoFence,
    TimeWindow,
)
from music_room.domain.shared.enums import HandshakeState, ResourceKind, Visibility

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

OWNER = Principal(account_id="owner")
STRANGER = Principal(account_id="stranger")
ELEVATED = Principal(account_id="vip", tier=AccountTier.ELEVATED)


@pytest.fixture
def evaluator():
    return AccessEvaluator(clock=lambda: NOW)


def _event(**kwargs) -> Event:
    return Event(id="evt", owner_id="owner", name="Party", **kwargs)


def _list(**kwargs) -> EditableList:
    return EditableList(id="lst", owner_id="owner", name="Mix", **kwargs)


def _invitation(
    invitee: str,
    resource_id: str = "evt",
    kind: ResourceKind = ResourceKind.EVENT,
    state: HandshakeState = HandshakeState.ACCEPTED,
    role: CollaboratorRole = CollaboratorRole.COLLABORATOR,
) -> Invitation:
    return Invitation(
        resource_id=resource_id,
        resource_kind=kind,
        invitee_id=invitee,
        grantor_id="owner",
        state=state,
        role=role,
    )


class TestVisibility:
    def test_public_event_is_readable_by_anyone(self, evaluator):
        assert evaluator.can_access(_event(), STRANGER) is True

    def test_private_event_denies_uninvited_account(self, evaluator):
        event = _event(visibility=Visibility.PRIVATE)

        assert evaluator.can_access(event, STRANGER) is False
        assert evaluator.can_vote(event, STRANGER) is False

    def test_private_event_allows_owner(self, evaluator):
        event = _event(visibility=Visibility.PRIVATE)

        assert evaluator.can_access(event, OWNER) is True
        assert evaluator.can_vote(event, OWNER) is True

    def test_private_event_allows_accepted_invitee(self, evaluator):
        event = _event(visibility=Visibility.PRIVATE)
        invitation = _invitation("stranger")

        assert evaluator.can_access(event, STRANGER, invitation) is True

    def test_pending_invitation_grants_nothing(self, evaluator):
        event = _event(visibility=Visibility.PRIVATE)
        invitation = _invitation("stranger", state=HandshakeState.PENDING)

        assert evaluator.can_access(event, STRANGER, invitation) is False

    def test_invitation_to_another_resource_grants_nothing(self, evaluator):
        event = _event(visibility=Visibility.PRIVATE)
        invitation = _invitation("stranger", resource_id="other-event")

        assert evaluator.can_access(event, STRANGER, invitation) is False

    def test_invitation_held_by_someone_else_grants_nothing(self, evaluator):
        event = _event(visibility=Visibility.PRIVATE)
        invitation = _invitation("somebody-else")

        assert evaluator.can_access(event, STRANGER, invitation) is False


class TestDeactivation:
    def test_inactive_event_denies_owner_access_and_vote(self, evaluator):
        event = _event(is_active=False)

        assert evaluator.can_access(event, OWNER) is False
        assert evaluator.can_vote(event, OWNER) is False

    def test_inactive_event_still_manageable_by_owner(self, evaluator):
        event = _event(is_active=False)

        assert evaluator.can_manage(event, OWNER) is True
        assert evaluator.can_manage(event, STRANGER) is False

    def test_inactive_list_denies_owner_edit(self, evaluator):
        editable_list = _list(is_active=False)

        assert evaluator.can_edit(editable_list, OWNER) is False


class TestTierGate:
    def test_premium_event_denies_standard_voter(self, evaluator):
        event = _event(access_tier=AccessTier.PREMIUM)

        assert evaluator.can_access(event, STRANGER) is True
        assert evaluator.can_vote(event, STRANGER) is False

    def test_premium_event_allows_elevated_voter(self, evaluator):
        event = _event(access_tier=AccessTier.PREMIUM)

        assert evaluator.can_vote(event, ELEVATED) is True

    def test_premium_event_gate_applies_to_owner(self, evaluator):
        event = _event(access_tier=AccessTier.PREMIUM)

        assert evaluator.can_vote(event, OWNER) is False
        assert evaluator.can_vote(event, OWNER.model_copy(update={"tier": AccountTier.ELEVATED}))


class TestLocationBounded:
    def _bounded(self, **kwargs) -> Event:
        return _event(access_tier=AccessTier.LOCATION_BOUNDED, **kwargs)

    def test_vote_allowed_inside_time_window(self, evaluator):
        event = self._bounded(
            time_window=TimeWindow(
                starts_at=NOW - timedelta(hours=1), ends_at=NOW + timedelta(hours=1)
            )
        )

        assert evaluator.can_vote(event, STRANGER) is True

    def test_vote_denied_before_start(self, evaluator):
        event = self._bounded(time_window=TimeWindow(starts_at=NOW + timedelta(minutes=1)))

        assert evaluator.can_vote(event, STRANGER) is False

    def test_vote_denied_after_end(self, evaluator):
        event = self._bounded(time_window=TimeWindow(ends_at=NOW - timedelta(seconds=1)))

        assert evaluator.can_vote(event, STRANGER) is False

    def test_window_bounds_are_inclusive(self, evaluator):
        event = self._bounded(time_window=TimeWindow(starts_at=NOW, ends_at=NOW))

        assert evaluator.can_vote(event, STRANGER) is True

    @pytest.mark.parametrize(
        ("inside_fence", "expected"),
        [(True, True), (False, False), (None, False)],
    )
    def test_fence_requires_positive_answer(self, evaluator, inside_fence, expected):
        event = self._bounded(geo_fence=GeoFence(latitude=48.85, longitude=2.35))

        assert evaluator.can_vote(event, STRANGER, inside_fence=inside_fence) is expected

    def test_fence_answer_ignored_when_no_fence(self, evaluator):
        event = self._bounded()

        assert evaluator.can_vote(event, STRANGER, inside_fence=None) is True

    def test_free_event_ignores_window_outside_location_tier(self, evaluator):
        event = _event(time_window=TimeWindow(ends_at=NOW - timedelta(days=1)))

        assert evaluator.can_vote(event, STRANGER) is True


class TestListEditing:
    def test_lists_never_accept_votes(self, evaluator):
        assert evaluator.can_vote(_list(), OWNER) is False
        assert evaluator.can_vote(_list(), STRANGER, inside_fence=True) is False

    def test_owner_can_edit(self, evaluator):
        assert evaluator.can_edit(_list(edit_policy=EditPolicy.INVITE_ONLY), OWNER) is True

    def test_open_public_list_editable_by_anyone(self, evaluator):
        assert evaluator.can_edit(_list(), STRANGER) is True

    def test_invite_only_list_denies_stranger(self, evaluator):
        assert evaluator.can_edit(_list(edit_policy=EditPolicy.INVITE_ONLY), STRANGER) is False

    def test_invite_only_list_allows_collaborator(self, evaluator):
        editable_list = _list(edit_policy=EditPolicy.INVITE_ONLY)
        invitation = _invitation("stranger", resource_id="lst", kind=ResourceKind.LIST)

        assert evaluator.can_edit(editable_list, STRANGER, invitation) is True

    def test_invite_only_list_denies_viewer(self, evaluator):
        editable_list = _list(edit_policy=EditPolicy.INVITE_ONLY)
        invitation = _invitation(
            "stranger", resource_id="lst", kind=ResourceKind.LIST, role=CollaboratorRole.VIEWER
        )

        assert evaluator.can_access(editable_list, STRANGER, invitation) is True
        assert evaluator.can_edit(editable_list, STRANGER, invitation) is False

    def test_private_open_list_requires_membership(self, evaluator):
        editable_list = _list(visibility=Visibility.PRIVATE)
        viewer = _invitation(
            "stranger", resource_id="lst", kind=ResourceKind.LIST, role=CollaboratorRole.VIEWER
        )

        assert evaluator.can_edit(editable_list, STRANGER) is False
        assert evaluator.can_edit(editable_list, STRANGER, viewer) is True

    def test_events_are_edited_by_host_only(self, evaluator):
        assert evaluator.can_edit(_event(), OWNER) is True
        assert evaluator.can_edit(_event(), STRANGER) is False
