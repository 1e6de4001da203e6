"""Error types raised by the poster pipeline."""


class PosterError(Exception):
    """Base class for every pipeline failure."""


class InvalidRequest(PosterError, ValueError):
    """The caller supplied an unusable selection or payload."""


class MissingOwner(PosterError):
    """No owner id was available for a scoped operation."""

    def __init__(self, message: str = "Authentication required: no owner id available"):
        super().__init__(message)


# Background generation

class RateLimited(PosterError):
    """Upstream throughput limit hit and the retry budget is spent."""

    def __init__(self, message: str, attempts: int = 0, retry_after: float | None = None):
        super().__init__(message)
        self.attempts = attempts
        self.retry_after = retry_after


class ContentRejected(PosterError):
    """Upstream safety filters blocked the request. Retrying will not help."""


class GenerationFailed(PosterError):
    """Upstream returned an error that is not worth retrying, or no image."""


class GenerationCancelled(PosterError):
    """The caller abandoned the request while it was waiting to retry."""


# Compositing

class AssetUnavailable(PosterError):
    """An image or logo could not be loaded by any strategy."""


# Persistence

class PersistenceConflict(PosterError):
    pass


class PosterNotFound(PersistenceConflict):
    pass


class PermissionDenied(PersistenceConflict):
    pass


class IndexUnavailable(PosterError):
    """The metadata store cannot serve the owner/date query."""


class StorageUnavailable(PosterError):
    """The blob or metadata store failed a round trip."""


# Fatal

class FatalError(PosterError):
    pass


class SurfaceUnavailable(FatalError):
    pass


class MissingCredential(FatalError):
    pass
