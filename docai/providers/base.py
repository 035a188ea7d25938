"""Extraction provider interface and MIME type detection."""

from typing import Protocol

from docai.canonical.models import RawDocument

# (magic prefix, MIME type); checked in order.
_MAGIC_NUMBERS: list[tuple[bytes, str]] = [
    (b"%PDF", "application/pdf"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
]

SUPPORTED_MIME_TYPES: frozenset[str] = frozenset(
    {mime for _, mime in _MAGIC_NUMBERS} | {"image/webp"}
)


class ExtractionProvider(Protocol):
    """A document-analysis service producing raw hierarchical output."""

    async def process_document(
        self, processor_id: str, content: bytes, mime_type: str
    ) -> RawDocument:
        """Run ``processor_id`` over ``content`` and return its raw output.

        Raises:
            ProviderError: If the provider rejects or fails the request.
        """
        ...


def sniff_mime_type(content: bytes, default: str = "application/pdf") -> str:
    """Detect a document's MIME type from its leading bytes.

    Args:
        content: Raw document bytes.
        default: Type returned when no known signature matches.

    Returns:
        The detected MIME type, or ``default``.
    """
    for magic, mime_type in _MAGIC_NUMBERS:
        if content.startswith(magic):
            return mime_type
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    return default
