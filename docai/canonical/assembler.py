"""Assembly of a raw provider document into the canonical result."""

from docai.utils.logger import get_logger

from .entities import extract_entities
from .fields import extract_fields
from .models import CanonicalResult, RawDocument
from .tables import extract_tables

logger = get_logger(__name__)


def assemble(raw: RawDocument) -> CanonicalResult:
    """Build the canonical result for a raw document.

    Pure and deterministic. Any ``InvalidAnchorError`` from a
    sub-extractor propagates, so a partially canonicalized result is
    never returned.

    Args:
        raw: Provider output for one extraction call.

    Returns:
        Canonical result holding no references to ``raw``'s containers.
    """
    entities = extract_entities(raw.full_text, raw.entities)
    fields = extract_fields(raw.full_text, raw.pages)
    tables = extract_tables(raw.full_text, raw.pages)

    logger.debug(
        "Assembled document: %d chars, %d entities, %d fields, %d tables",
        len(raw.full_text),
        len(entities),
        len(fields),
        len(tables),
    )
    return CanonicalResult(
        text=raw.full_text,
        entities=tuple(entities),
        fields=tuple(fields),
        tables=tuple(tables),
    )
