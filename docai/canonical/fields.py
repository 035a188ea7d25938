"""Key/value form field extraction."""

from collections.abc import Sequence

from .models import CanonicalField, RawPage
from .resolver import resolve


def extract_fields(full_text: str, pages: Sequence[RawPage]) -> list[CanonicalField]:
    """Flatten form fields across pages into name/value pairs.

    Output is page-major, field-minor. Repeated names are kept as
    separate entries. A missing anchor yields ``None`` rather than ``""``.

    Args:
        full_text: Document text the anchors refer to.
        pages: Pages in document order.

    Returns:
        Resolved fields, empty when no page carries form fields.
    """
    return [
        CanonicalField(
            name=resolve(full_text, form_field.name_anchor),
            value=resolve(full_text, form_field.value_anchor),
        )
        for page in pages
        for form_field in page.form_fields
    ]
