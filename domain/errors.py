"""Error taxonomy for a single classification request.

Every request-level error is terminal: the orchestrator turns it into exactly one
outcome and nothing is retried. `status_code` is the response status that outcome
is reported with.
"""

EXCERPT_LENGTH = 200
TRANSPORT_MESSAGE_LENGTH = 500


class ClassifierError(Exception):
    """Base class for request-level failures."""

    status_code: int = 500


class ValidationError(ClassifierError):
    """Malformed or missing input URL."""

    status_code = 400


class FetchError(ClassifierError):
    """Non-success status or timeout while fetching the origin resource."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ContentUnavailableError(ClassifierError):
    """Extracted (and truncated) text is empty; the oracle is never called."""


class OracleTransportError(ClassifierError):
    """Non-success response from the oracle."""

    def __init__(self, message: str) -> None:
        if len(message) > TRANSPORT_MESSAGE_LENGTH:
            message = message[:TRANSPORT_MESSAGE_LENGTH] + "..."
        super().__init__(message)


class OracleBlockedError(ClassifierError):
    """The oracle refused the content on policy grounds."""

    status_code = 400

    def __init__(self, reason: str, *, provider: str = "oracle") -> None:
        self.reason = reason
        self.provider = provider
        super().__init__(f"Content blocked by {provider}: {reason}")


class SanitizeError(ClassifierError):
    """Oracle text could not be decoded as JSON by any extraction strategy."""

    def __init__(self, raw_text: str) -> None:
        self.excerpt = (raw_text or "")[:EXCERPT_LENGTH]
        super().__init__(f"AI returned a response, but it was not valid JSON. Response: {self.excerpt}...")


class TreeConflictError(Exception):
    """A tree path is needed both as a leaf set and as an internal branch."""

    def __init__(self, path: list[str], *, existing: str, requested: str) -> None:
        self.path = list(path)
        self.existing = existing
        self.requested = requested
        super().__init__(
            f"Node kind conflict at {' > '.join(self.path)}: "
            f"existing node is {existing}, entry requires {requested}"
        )
