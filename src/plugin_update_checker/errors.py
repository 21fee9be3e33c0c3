"""Failure taxonomy for manifest retrieval.

Created: 2026-10-12

Every error here is recoverable: ``UpdateChecker.fetch_manifest()`` catches
them all and reports "no information available" to the host.
"""


class UpdateCheckError(Exception):
    """Base class for all update-check failures."""


class FetchError(UpdateCheckError):
    """The manifest could not be retrieved. Surfaced to admins as a notice."""


class TransportError(FetchError):
    """Network, DNS or TLS failure before any HTTP status was received."""


class HttpStatusError(FetchError):
    """The manifest server answered with something other than 200."""

    def __init__(self, status: int):
        self.status = status
        super().__init__(f"Unexpected HTTP status {status}")


class EmptyBodyError(FetchError):
    def __init__(self):
        super().__init__("Empty response body")


class ManifestDecodeError(UpdateCheckError):
    """The response body is not valid JSON."""


class SchemaValidationError(UpdateCheckError):
    """The manifest is valid JSON but lacks mandatory fields."""

    def __init__(self, missing: tuple[str, ...], message: str | None = None):
        self.missing = missing
        super().__init__(message or f"Missing required fields: {', '.join(missing)}")
