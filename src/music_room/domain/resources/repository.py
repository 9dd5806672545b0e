"""
Resources Domain Repository Interfaces

Abstract base classes defining the contracts for event, list and
invitation persistence.
"""

from abc import ABC, abstractmethod

from music_room.domain.resources.entities import EditableList, Event, Invitation, Resource
from music_room.domain.shared.enums import HandshakeState


class ResourceRepository(ABC):
    """Abstract repository for events and editable lists.

    Resources are soft-deactivated and never deleted.
    """

    @abstractmethod
    async def add(self, resource: Resource) -> Resource:
        """Persist a new event or list."""
        ...

    @abstractmethod
    async def get(self, resource_id: str) -> Resource | None:
        """Retrieve an event or list by id, whichever it is."""
        ...

    @abstractmethod
    async def get_event(self, event_id: str) -> Event | None:
        ...

    @abstractmethod
    async def get_list(self, list_id: str) -> EditableList | None:
        ...

    @abstractmethod
    async def update(self, resource: Resource) -> bool:
        """Overwrite the mutable fields of an existing resource.

        Returns:
            True if the resource existed.
        """
        ...

    @abstractmethod
    async def list_public_events(self, limit: int = 50) -> list[Event]:
        """Active public events, newest first."""
        ...

    @abstractmethod
    async def list_owned(self, owner_id: str) -> list[Resource]:
        """Events and lists owned by ``owner_id``, newest first."""
        ...


class InvitationRepository(ABC):
    """Abstract repository for invitations.

    At most one invitation exists per (resource, invitee).
    """

    @abstractmethod
    async def add(self, invitation: Invitation) -> Invitation:
        """Persist a new invitation.

        Raises:
            ConflictError: If an invitation for (resource, invitee) exists.
        """
        ...

    @abstractmethod
    async def get(self, invitation_id: str) -> Invitation | None:
        ...

    @abstractmethod
    async def get_for(self, resource_id: str, invitee_id: str) -> Invitation | None:
        ...

    @abstractmethod
    async def update(self, invitation: Invitation) -> bool:
        ...

    @abstractmethod
    async def delete(self, invitation_id: str) -> bool:
        ...

    @abstractmethod
    async def list_for_invitee(
        self, invitee_id: str, state: HandshakeState | None = None
    ) -> list[Invitation]:
        """Invitations addressed to ``invitee_id``, newest first."""
        ...

    @abstractmethod
    async def list_for_resource(self, resource_id: str) -> list[Invitation]:
        ...
