"""Semantic entity projection."""

from collections.abc import Sequence

from .models import CanonicalEntity, RawEntity
from .resolver import resolve


def _mention_text(full_text: str, entity: RawEntity) -> str:
    if entity.mention_anchor is not None:
        return resolve(full_text, entity.mention_anchor) or ""
    return entity.mention_text or ""


def extract_entities(
    full_text: str, entities: Sequence[RawEntity]
) -> list[CanonicalEntity]:
    """Project raw entities one-to-one, preserving order.

    Confidence is passed through untouched.

    Args:
        full_text: Document text mention anchors refer to.
        entities: Raw entities in provider order.

    Returns:
        Canonical entities with resolved mention text.
    """
    return [
        CanonicalEntity(
            type=entity.type,
            mention_text=_mention_text(full_text, entity),
            confidence=entity.confidence,
        )
        for entity in entities
    ]
