"""Error taxonomy for document canonicalization and processor routing."""

from enum import StrEnum


class DocumentAIError(Exception):
    """Base class for all errors raised by the service."""


class InvalidAnchorError(DocumentAIError):
    """A text anchor span falls outside the document text or is inverted.

    Args:
        start: Span start offset as reported by the provider.
        end: Span end offset as reported by the provider.
        text_length: Length of the document text the span points into.
    """

    def __init__(self, start: int, end: int, text_length: int) -> None:
        self.start = start
        self.end = end
        self.text_length = text_length
        super().__init__(
            f"Invalid text anchor span [{start}, {end}) "
            f"for document text of length {text_length}"
        )


class UnknownCapabilityError(DocumentAIError):
    """No processor is configured for the requested capability."""

    def __init__(self, capability: object) -> None:
        self.capability = capability
        super().__init__(f"No processor configured for capability: {capability}")


class ProviderErrorKind(StrEnum):
    """Broad categories of extraction provider failures."""

    INVALID_INPUT = "invalid_input"
    UNAUTHENTICATED = "unauthenticated"
    PERMISSION_DENIED = "permission_denied"
    QUOTA_EXCEEDED = "quota_exceeded"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class ProviderError(DocumentAIError):
    """The extraction provider failed to process a document.

    Args:
        message: Human-readable description from the provider.
        kind: Failure category.
        processor_id: Processor that was being invoked, if known.
    """

    def __init__(
        self,
        message: str,
        kind: ProviderErrorKind = ProviderErrorKind.UNKNOWN,
        processor_id: str | None = None,
    ) -> None:
        self.kind = kind
        self.processor_id = processor_id
        super().__init__(message)

    @property
    def is_client_error(self) -> bool:
        """Whether the failure was caused by the submitted document."""
        return self.kind == ProviderErrorKind.INVALID_INPUT
