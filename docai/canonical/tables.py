"""Table extraction into grids of resolved cell text.

Rows keep exactly the cells the provider reported. Ragged rows are not
padded or truncated, so a provider-side extraction gap stays visible to
consumers instead of turning into blank cells.
"""

from collections.abc import Sequence

from .models import CanonicalTable, RawCell, RawPage, RawRow
from .resolver import resolve


def _cell_text(full_text: str, cell: RawCell) -> str:
    # Cells without a layout reference render as empty text.
    text = resolve(full_text, cell.layout_anchor)
    return "" if text is None else text


def _rows(full_text: str, rows: Sequence[RawRow]) -> tuple[tuple[str, ...], ...]:
    return tuple(
        tuple(_cell_text(full_text, cell) for cell in row.cells) for row in rows
    )


def extract_tables(full_text: str, pages: Sequence[RawPage]) -> list[CanonicalTable]:
    """Convert every table on every page into a header/body grid.

    Args:
        full_text: Document text the cell anchors refer to.
        pages: Pages in document order.

    Returns:
        Tables in page order, then table order within each page.
    """
    tables: list[CanonicalTable] = []
    for page in pages:
        for table in page.tables:
            tables.append(
                CanonicalTable(
                    headers=_rows(full_text, table.header_rows),
                    body=_rows(full_text, table.body_rows),
                )
            )
    return tables
