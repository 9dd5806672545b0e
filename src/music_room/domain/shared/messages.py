"""Centralized message constants for error messages, validation, and log output."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Account Errors
    HANDLE_TAKEN = "Handle '{handle}' is already taken"
    CONTACT_TAKEN = "Contact address is already registered"

    # Relationship Errors
    SELF_REQUEST = "You cannot send a request to yourself"
    REQUEST_ALREADY_PENDING = "A request to this account is already pending"
    ALREADY_CONNECTED = "You are already connected with this account"
    NOT_REQUEST_RECIPIENT = "Only the recipient can resolve this request"
    NOT_REQUEST_REQUESTER = "Only the requester can cancel this request"
    NO_PENDING_REQUEST = "No pending request with id '{request_id}'"
    INVALID_OUTCOME = "Outcome must be 'accept' or 'decline'"

    # Invitation Errors
    SELF_INVITE = "You cannot invite yourself"
    INVITATION_EXISTS = "An invitation for this account already exists"
    NOT_INVITEE = "Only the invitee can respond to this invitation"
    NO_PENDING_INVITATION = "No pending invitation with id '{invitation_id}'"
    JOIN_PRIVATE = "Private resources can only be joined by invitation"

    # Resource Errors
    NOT_OWNER = "Only the owner can {action}"
    RESOURCE_INACTIVE = "This {kind} is no longer active"
    TIME_WINDOW_ORDER = "Time window must start before it ends"
    TIME_WINDOW_EMPTY = "Time window needs a start or an end"
    FENCE_REQUIRES_LOCATION_TIER = "A geo-fence is only valid for location-bounded events"

    # Track Errors
    NO_MEDIA_REFERENCE = "Track must carry a video id or a catalog uri"
    TRACK_ALREADY_PLAYED = "Track '{title}' has already been played"
    TRACK_NOT_IN_LIST = "Tracks can only be moved within an editable list"
    INVALID_MOVE_POSITION = "Position must be between 1 and {count}"
    RESOURCE_FULL = "This {kind} already holds the maximum of {limit} tracks"

    # Voting Errors
    INVALID_VOTE_DIRECTION = "Vote direction must be 'up' or 'down', got {value!r}"
    LIST_NOT_VOTABLE = "Editable lists do not accept votes"

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "UtcDateTime requires a timezone-aware datetime"

    # Database Validation Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Application Lifecycle
    APP_STARTING = "Starting music room ({environment})"
    LOGGING_CONFIG_FALLBACK = "Could not load %s, falling back to basic config"
    COMMAND_FAILED = "Command %s failed: %s"

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"
    DATABASE_STATS_FAILED = "Failed to get database stats: %s"
    TRANSACTION_ROLLED_BACK = "Transaction rolled back: %r"

    # Accounts
    ACCOUNT_REGISTERED = "Registered account %s (%s)"
    ACCOUNT_TIER_CHANGED = "Account %s tier changed to %s"

    # Relationships
    REQUEST_SENT = "Relationship request %s: %s -> %s"
    REQUEST_ACCEPTED = "Relationship request %s accepted"
    REQUEST_DECLINED = "Relationship request %s declined"
    REQUEST_CANCELLED = "Relationship request %s cancelled"
    REQUEST_REACCEPTED = "Relationship request %s already accepted, edges re-ensured"
    CONNECTION_REMOVED = "Account %s removed connection to %s"

    # Invitations
    INVITATION_SENT = "Invitation %s to %s %s for %s"
    INVITATION_REOPENED = "Invitation %s reopened"
    INVITATION_RESOLVED = "Invitation %s %s"
    INVITATION_REVOKED = "Invitation %s revoked"
    RESOURCE_JOINED = "Account %s joined %s %s"

    # Resources
    RESOURCE_CREATED = "Created %s %s owned by %s"
    RESOURCE_UPDATED = "Updated %s %s"
    RESOURCE_STATUS_CHANGED = "%s %s active=%s"

    # Access
    ACCESS_DENIED = "Access denied: %s may not %s %s %s"

    # Tracks
    TRACK_ADDED = "Track %s added to %s %s"
    TRACK_REMOVED = "Track %s removed from %s"
    TRACK_PLAYED = "Track %s marked played"
    TRACK_MOVED = "Track %s moved to position %s"
    TRACK_VANISHED = "Track %s disappeared before its tally could be refreshed"

    # Voting / Ranking
    VOTE_CAST = "Vote %s by %s on track %s (tally=%s)"
    VOTE_RETRACTED = "Vote by %s on track %s retracted (tally=%s)"
    RANKING_RECOMPUTED = "Recomputed ranking for %s %s: %d unplayed tracks"
