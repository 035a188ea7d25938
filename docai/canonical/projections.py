"""JSON-ready views of a canonical result.

Endpoints expose either the full result or a narrower projection of it.
Keys follow the wire naming consumers rely on (``mentionText``).
"""

from enum import StrEnum
from typing import Any

from .models import CanonicalEntity, CanonicalField, CanonicalResult, CanonicalTable


class Projection(StrEnum):
    """Which parts of a canonical result to serialize."""

    FULL = "full"
    ENTITIES = "entities"
    FIELDS = "fields"


def entity_to_dict(entity: CanonicalEntity) -> dict[str, Any]:
    return {
        "type": entity.type,
        "mentionText": entity.mention_text,
        "confidence": entity.confidence,
    }


def field_to_dict(field: CanonicalField) -> dict[str, Any]:
    return {"name": field.name, "value": field.value}


def table_to_dict(table: CanonicalTable) -> dict[str, Any]:
    return {
        "headers": [list(row) for row in table.headers],
        "body": [list(row) for row in table.body],
    }


def to_dict(
    result: CanonicalResult, projection: Projection = Projection.FULL
) -> dict[str, Any]:
    """Serialize a canonical result to plain dicts and lists.

    ``ENTITIES`` keeps text and entities; ``FIELDS`` keeps text, fields,
    and entities; ``FULL`` keeps everything.

    Args:
        result: Canonical result to serialize.
        projection: Subset of the result to include.

    Returns:
        A JSON-serializable dictionary.
    """
    data: dict[str, Any] = {"text": result.text}
    data["entities"] = [entity_to_dict(e) for e in result.entities]

    if projection in (Projection.FIELDS, Projection.FULL):
        data["fields"] = [field_to_dict(f) for f in result.fields]
    if projection == Projection.FULL:
        data["tables"] = [table_to_dict(t) for t in result.tables]
    return data


def summary_text(result: CanonicalResult) -> str:
    """Pick the text to render for a summarized document.

    Summarizer processors report the summary as ``summary`` entities;
    without any, the full document text is used.

    Args:
        result: Canonical result of a summarize call.

    Returns:
        Summary mention texts joined by blank lines, or ``result.text``.
    """
    summaries = [e.mention_text for e in result.entities if e.type == "summary"]
    if summaries:
        return "\n\n".join(summaries)
    return result.text
