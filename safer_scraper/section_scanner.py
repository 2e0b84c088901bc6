"""
Section scanning for checklist blocks and bounded regions of a container table.

The snapshot table lists several checklists the same way: a header row whose
first cell names the section, followed by one row holding nested tables of
`X | label` pairs.
"""

import logging
from enum import Enum
from typing import Iterable, List, Optional

from bs4 import Tag

from .config import CHECK_MARKER, EXCLUDED_LABEL
from .document import Document, visible_text
from .table_processor import Grid, TableProcessor, is_empty_row

logger = logging.getLogger(__name__)


class ScanState(Enum):
    IDLE = 'idle'
    CAPTURING = 'capturing'
    DONE = 'done'


def first_cell_text(row: Tag) -> str:
    """Visible text of the first <td> under a row, nested tables included."""
    return visible_text(row.find('td'))


def checked_items(nested_table: Tag) -> List[str]:
    """Labels of the rows of a checklist table whose marker cell holds an X."""
    items = []
    for row in nested_table.find_all('tr'):
        cells = row.find_all('td')
        if len(cells) < 2:
            continue

        marker = visible_text(cells[0])
        label = visible_text(cells[1])
        if marker == CHECK_MARKER and label and EXCLUDED_LABEL not in label:
            items.append(label)
    return items


class SectionScanner:
    """
    Single-pass scanner collecting the checked items of one named section.

    IDLE looks for the header row, CAPTURING reads exactly one row after it,
    DONE closes the occurrence and behaves like IDLE from the next row on.
    """

    def __init__(self, section_title: str):
        self.section_title = section_title
        self.state = ScanState.IDLE
        self.occurrences = 0
        self._items = {}

    @property
    def items(self) -> List[str]:
        return list(self._items)

    def feed(self, row: Tag):
        """Advance the scanner by one row."""
        if self.state is ScanState.CAPTURING:
            self._capture(row)
            self.state = ScanState.DONE
            return

        # Substring match: "Cargo Carried:" and "Cargo Carried" both open the section
        if self.section_title in first_cell_text(row):
            logger.debug(f"Found header row for '{self.section_title}'")
            self.occurrences += 1
            self.state = ScanState.CAPTURING
        else:
            self.state = ScanState.IDLE

    def _capture(self, row: Tag):
        nested_tables = row.find_all('table')
        if not nested_tables:
            logger.debug(f"Row after '{self.section_title}' has no checklist table")
            return

        for nested_table in nested_tables:
            for item in checked_items(nested_table):
                self._items.setdefault(item, None)


def scan_section(container: Tag, section_title: str) -> List[str]:
    """
    Collect the checked items of a section of a container table.

    Args:
        container: Table holding the section header and checklist rows
        section_title: Text the header row's first cell must contain

    Returns:
        Distinct item labels in first-seen order
    """
    scanner = SectionScanner(section_title)
    for row in TableProcessor.iter_rows(container):
        scanner.feed(row)

    if scanner.occurrences == 0:
        logger.debug(f"Section '{section_title}' not found")
    return scanner.items


def render_section(section_title: str, items: List[str]) -> str:
    if not items:
        return ''
    return f"| {section_title}: | {', '.join(items)} |"


def extract_checked_items(document: Document, container_selector: str, section_title: str) -> str:
    """Scan the first container matching a selector and render the section row."""
    container = document.query_one(container_selector)
    if container is None:
        logger.debug(f"No container matches '{container_selector}'")
        return ''

    return render_section(section_title, scan_section(container, section_title))


# ============================================================================
# BOUNDED REGIONS
# ============================================================================

def _contains_any(text: str, titles: Iterable[str]) -> bool:
    return any(title in text for title in titles)


def extract_region(
    container: Tag,
    start_title: str,
    stop_titles: Iterable[str],
    skip_markers: Iterable[str] = (),
    max_columns: Optional[int] = None
) -> Grid:
    """
    Rows of a container table between a start row and a stop row.

    The region opens on a row whose first cell is exactly `start_title` and
    closes on a row whose first cell contains any of `stop_titles`. Rows that
    embed tables contribute the non-empty texts of their direct cells; other
    rows contribute their first `max_columns` cells.

    Args:
        container: Table to scan, nested rows included
        start_title: First-cell text opening the region
        stop_titles: Texts closing the region
        skip_markers: Texts marking rows already reported through a nested table
        max_columns: Keep only the first N cells of plain rows

    Returns:
        Grid of the region's rows (not padded)
    """
    stop_titles = tuple(stop_titles)
    skip_markers = tuple(skip_markers)
    grid = []
    inside = False

    for row in container.find_all('tr'):
        if row.find('table') is not None:
            cells = row.find_all(['td', 'th'], recursive=False)
            if not cells:
                continue

            if _contains_any(visible_text(cells[0]), stop_titles):
                inside = False
                continue

            if inside:
                values = [text for text in (visible_text(cell) for cell in cells) if text]
                if values:
                    grid.append(values)
            continue

        cells = row.find_all(['td', 'th'])
        if not cells:
            continue

        first = visible_text(cells[0])
        if first == start_title:
            inside = True
            continue

        if _contains_any(first, stop_titles):
            inside = False
            continue

        if not inside or _contains_any(first, skip_markers):
            continue

        if max_columns is not None:
            cells = cells[:max_columns]
        values = [visible_text(cell) for cell in cells]
        if is_empty_row(values):
            continue

        grid.append(values)

    logger.debug(f"Region '{start_title}': {len(grid)} rows")
    return grid
