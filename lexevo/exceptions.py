class LexEvoError(Exception):
    """Base for all lexevo exceptions."""

    pass


# High-level families
class ValidationError(LexEvoError):
    """Data validation failures."""

    pass


class StorageError(LexEvoError):
    """Snapshot storage operation failures."""

    pass


class SyncError(LexEvoError):
    """Peer synchronization failures."""

    pass


class CatalogError(ValidationError):
    """Malformed concept catalog."""

    pass


# Sync subtypes
class SyncFetchError(SyncError):
    """Raised when the peer cannot be reached or answers with an error status."""

    pass


class SyncPayloadError(SyncError):
    """Raised when the peer answers with a snapshot that cannot be parsed."""

    pass
