"""Centralized constants for database configuration and shared limits."""

from __future__ import annotations


class SQLPragmas:
    """SQLite PRAGMA statements for database configuration.

    These constants define database behavior settings.
    """

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    FOREIGN_KEYS_ON = "PRAGMA foreign_keys=ON"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"
    PAGE_COUNT = "PRAGMA page_count"
    PAGE_SIZE = "PRAGMA page_size"


class SQLStatements:
    """Transaction control statements."""

    BEGIN_IMMEDIATE = "BEGIN IMMEDIATE"
    BEGIN_DEFERRED = "BEGIN"


class DatabaseTables:
    """Tables created by the schema bootstrap."""

    ACCOUNTS = "accounts"
    RELATIONSHIP_REQUESTS = "relationship_requests"
    RELATIONSHIPS = "relationships"
    EVENTS = "events"
    EDITABLE_LISTS = "editable_lists"
    INVITATIONS = "invitations"
    TRACKS = "tracks"
    VOTES = "votes"

    ALL = (
        ACCOUNTS,
        RELATIONSHIP_REQUESTS,
        RELATIONSHIPS,
        EVENTS,
        EDITABLE_LISTS,
        INVITATIONS,
        TRACKS,
        VOTES,
    )


class LimitConstants:
    """Default limits shared by settings and services."""

    DEFAULT_FENCE_RADIUS_M = 100
    DEFAULT_MAX_TRACKS_PER_RESOURCE = 500
    DEFAULT_SEARCH_LIMIT = 20
    DEFAULT_PUBLIC_EVENTS_LIMIT = 50
