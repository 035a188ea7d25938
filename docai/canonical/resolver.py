"""Resolution of text anchors into the literal text they denote."""

from docai.errors import InvalidAnchorError

from .models import TextAnchor


def resolve(full_text: str, anchor: TextAnchor | None) -> str | None:
    """Resolve a text anchor against the document text.

    Spans are sliced in the order given and concatenated without a
    separator, so non-contiguous or out-of-order spans keep their order.

    Args:
        full_text: Complete document text all offsets refer to.
        anchor: Anchor to resolve, or ``None`` when the provider gave none.

    Returns:
        The resolved text, ``""`` for an anchor with no spans, or ``None``
        when ``anchor`` is ``None``.

    Raises:
        InvalidAnchorError: If a span is inverted or out of range.
    """
    if anchor is None:
        return None

    text_length = len(full_text)
    parts: list[str] = []
    for span in anchor.spans:
        if span.start < 0 or span.end > text_length or span.start > span.end:
            raise InvalidAnchorError(span.start, span.end, text_length)
        parts.append(full_text[span.start : span.end])
    return "".join(parts)
