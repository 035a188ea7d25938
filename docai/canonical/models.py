"""Raw provider document model and canonical result model.

The raw model mirrors the nested page, field, table, and entity shape a
document-analysis provider returns, decoupled from any SDK wire types.
The canonical model is the flattened, processor-agnostic projection that
leaves the service. Both are immutable values.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TextSpan:
    """Half-open ``[start, end)`` offset range into the document text."""

    start: int
    end: int


@dataclass(frozen=True)
class TextAnchor:
    """Reference into the document text as an ordered list of spans."""

    spans: tuple[TextSpan, ...] = ()

    @classmethod
    def of(cls, *ranges: tuple[int, int]) -> "TextAnchor":
        """Build an anchor from ``(start, end)`` pairs."""
        return cls(spans=tuple(TextSpan(start, end) for start, end in ranges))


@dataclass(frozen=True)
class RawFormField:
    """A key/value pair detected on a page."""

    name_anchor: TextAnchor | None = None
    value_anchor: TextAnchor | None = None


@dataclass(frozen=True)
class RawCell:
    layout_anchor: TextAnchor | None = None


@dataclass(frozen=True)
class RawRow:
    cells: tuple[RawCell, ...] = ()


@dataclass(frozen=True)
class RawTable:
    header_rows: tuple[RawRow, ...] = ()
    body_rows: tuple[RawRow, ...] = ()


@dataclass(frozen=True)
class RawPage:
    """Structured content detected on a single page."""

    form_fields: tuple[RawFormField, ...] = ()
    tables: tuple[RawTable, ...] = ()


@dataclass(frozen=True)
class RawEntity:
    """A semantic entity detected in the document.

    Providers reference the mention either through ``mention_anchor`` or
    as literal ``mention_text``; the anchor wins when both are present.
    """

    type: str
    confidence: float
    mention_anchor: TextAnchor | None = None
    mention_text: str | None = None


@dataclass(frozen=True)
class RawDocument:
    """Provider output for one extraction call."""

    full_text: str
    pages: tuple[RawPage, ...] = ()
    entities: tuple[RawEntity, ...] = ()


@dataclass(frozen=True)
class CanonicalEntity:
    type: str
    mention_text: str
    confidence: float


@dataclass(frozen=True)
class CanonicalField:
    name: str | None
    value: str | None


@dataclass(frozen=True)
class CanonicalTable:
    headers: tuple[tuple[str, ...], ...]
    body: tuple[tuple[str, ...], ...]


@dataclass(frozen=True)
class CanonicalResult:
    """Processor-agnostic result of canonicalizing a raw document."""

    text: str
    entities: tuple[CanonicalEntity, ...] = field(default_factory=tuple)
    fields: tuple[CanonicalField, ...] = field(default_factory=tuple)
    tables: tuple[CanonicalTable, ...] = field(default_factory=tuple)
