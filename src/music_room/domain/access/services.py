"""
Access Domain Services

Pure policy checks deciding whether a principal may see, vote on, edit or
manage an event or editable list. Nothing here touches storage; callers load
the resource and the principal's invitation first and evaluate inside their
own transaction.
"""

from __future__ import annotations

from music_room.domain.access.value_objects import Principal
from music_room.domain.resources.entities import EditableList, Event, Invitation, Resource
from music_room.domain.resources.value_objects import AccessTier, CollaboratorRole
from music_room.domain.shared.datetime_utils import Clock, utcnow


class AccessEvaluator:
    """Evaluates access rules for events and editable lists.

    Rules are applied in order and the first one that decides wins:

    1. An inactive resource denies access, voting and editing to everyone,
       its owner included.
    2. Public resources are readable by anyone; private ones only by the
       owner or a principal holding an accepted invitation to that resource.
    3. Premium events only accept votes from elevated accounts. The owner is
       not exempt.
    4. Location-bounded events only accept votes inside their time window and,
       when a fence is configured, from a caller reported inside it.
    """

    def __init__(self, clock: Clock = utcnow) -> None:
        self._clock = clock

    def can_access(
        self,
        resource: Resource,
        principal: Principal,
        invitation: Invitation | None = None,
    ) -> bool:
        if not resource.is_active:
            return False
        if resource.is_public or resource.is_owned_by(principal.account_id):
            return True
        return self._holds_invitation(resource, principal, invitation)

    def can_vote(
        self,
        resource: Resource,
        principal: Principal,
        invitation: Invitation | None = None,
        inside_fence: bool | None = None,
    ) -> bool:
        """Check whether ``principal`` may vote on tracks of ``resource``.

        Args:
            resource: The event being voted in. Lists never accept votes.
            principal: The voter.
            invitation: The voter's invitation to this resource, if any.
            inside_fence: Whether the caller's reported location lies inside
                the event's geo-fence. ``None`` means unknown and is treated
                as outside.
        """
        if not isinstance(resource, Event):
            return False
        if not self.can_access(resource, principal, invitation):
            return False
        if resource.access_tier is AccessTier.PREMIUM and not principal.is_elevated:
            return False
        if resource.is_location_bounded:
            if resource.time_window is not None and not resource.time_window.contains(self._clock()):
                return False
            if resource.geo_fence is not None and inside_fence is not True:
                return False
        return True

    def can_edit(
        self,
        resource: Resource,
        principal: Principal,
        invitation: Invitation | None = None,
    ) -> bool:
        """Check whether ``principal`` may add, move or remove list tracks.

        Events are edited by their host only.
        """
        if not resource.is_active:
            return False
        if resource.is_owned_by(principal.account_id):
            return True
        if not isinstance(resource, EditableList):
            return False
        if resource.is_open and self.can_access(resource, principal, invitation):
            return True
        return self._holds_invitation(
            resource, principal, invitation, minimum=CollaboratorRole.COLLABORATOR
        )

    def can_manage(self, resource: Resource, principal: Principal) -> bool:
        # Not gated on is_active so a deactivated resource can be reactivated.
        return resource.is_owned_by(principal.account_id)

    @staticmethod
    def _holds_invitation(
        resource: Resource,
        principal: Principal,
        invitation: Invitation | None,
        minimum: CollaboratorRole = CollaboratorRole.VIEWER,
    ) -> bool:
        if invitation is None:
            return False
        if not invitation.grants_access_to(resource.id, principal.account_id):
            return False
        return invitation.role.at_least(minimum)
