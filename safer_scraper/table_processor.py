"""
Table processing utilities for turning HTML tables into text grids.
"""

import csv
import io
import logging
from typing import List, NamedTuple, Optional

import pandas as pd
from bs4 import Tag

from .config import CSV, MARKDOWN, MAX_COLSPAN, OUTPUT_FORMATS
from .document import Document, visible_text

logger = logging.getLogger(__name__)

Grid = List[List[str]]


class Cell(NamedTuple):
    """Visible text of one table cell and the number of columns it covers."""
    text: str
    span: int = 1


# ============================================================================
# CELL UTILITIES
# ============================================================================

def parse_colspan(value) -> int:
    """
    Read a colspan attribute value.

    Missing or malformed values count as 1, and so do zero or negative spans.
    Spans wider than MAX_COLSPAN are clamped to it.
    """
    if value is None:
        return 1
    try:
        span = int(str(value).strip())
    except ValueError:
        logger.debug(f"Malformed colspan '{value}', using 1")
        return 1
    return min(max(span, 1), MAX_COLSPAN)


def expand_cells(cells: List[Cell]) -> List[str]:
    """Lay cells out on grid columns, padding each span with empty strings."""
    values = []
    for cell in cells:
        values.append(cell.text)
        values.extend([''] * (cell.span - 1))
    return values


def is_empty_row(row: List[str]) -> bool:
    return all(not cell.strip() for cell in row)


# ============================================================================
# TABLE GRID CONSTRUCTION
# ============================================================================

class TableProcessor:
    """Processes HTML tables into structured grids."""

    @staticmethod
    def iter_rows(table: Tag) -> List[Tag]:
        """
        Rows that belong to the table itself.

        Rows of body groupings when the table has them, otherwise the table's
        direct rows; rows of nested tables are never included.
        """
        bodies = table.find_all('tbody', recursive=False)
        if bodies:
            return [row for body in bodies for row in body.find_all('tr', recursive=False)]
        return table.find_all('tr', recursive=False)

    @staticmethod
    def read_cells(row: Tag, include_nested: bool = False) -> List[Cell]:
        """
        Read the cells of one row.

        Args:
            row: BeautifulSoup Tag representing a <tr>
            include_nested: Also read cells of tables nested in the row

        Returns:
            Cells in document order
        """
        cell_tags = row.find_all(['td', 'th'], recursive=include_nested)
        return [
            Cell(visible_text(cell_tag), parse_colspan(cell_tag.get('colspan')))
            for cell_tag in cell_tags
        ]

    @staticmethod
    def build_grid(
        table: Tag,
        include_nested: bool = False,
        max_columns: Optional[int] = None
    ) -> Grid:
        """
        Build a rectangular 2D list from a BeautifulSoup table tag.
        Handles colspan and drops rows without any text.

        Args:
            table: BeautifulSoup Tag representing a <table>
            include_nested: Read every cell under a row, nested tables included
            max_columns: Keep only the first N columns

        Returns:
            2D list of cell values (strings)
        """
        grid = []

        for row_tag in TableProcessor.iter_rows(table):
            row = expand_cells(TableProcessor.read_cells(row_tag, include_nested))

            if max_columns is not None:
                row = row[:max_columns]

            if not row or is_empty_row(row):
                continue

            grid.append(row)

        # Ensure rectangular grid
        if grid:
            max_cols = max(len(row) for row in grid)
            for row in grid:
                row.extend([''] * (max_cols - len(row)))

        return grid


def extract_table(
    document: Document,
    selector: str,
    index: int = 0,
    include_nested: bool = False,
    max_columns: Optional[int] = None
) -> Grid:
    """
    Grid of the index-th table matching a selector.

    Returns an empty grid when fewer than index + 1 tables match.
    """
    tables = document.query(selector)
    if index < 0 or len(tables) <= index:
        logger.debug(f"Only {len(tables)} table(s) match '{selector}', wanted index {index}")
        return []

    return TableProcessor.build_grid(tables[index], include_nested, max_columns)


# ============================================================================
# SERIALIZATION
# ============================================================================

def grid_to_markdown(grid: Grid) -> str:
    """Render grid rows as `| c1 | c2 |` lines."""
    if not grid:
        return ''
    return '\n'.join('| ' + ' | '.join(cell.strip() for cell in row) + ' |' for row in grid)


def grid_to_csv(grid: Grid) -> str:
    """Render grid rows as CSV with every value quoted."""
    if not grid:
        return ''
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerows(grid)
    return buffer.getvalue()[:-1]


def render_grid(grid: Grid, output_format: str = MARKDOWN) -> str:
    if output_format == MARKDOWN:
        return grid_to_markdown(grid)
    if output_format == CSV:
        return grid_to_csv(grid)
    raise ValueError(f"Unsupported output format: {output_format} (expected one of {OUTPUT_FORMATS})")


def grid_to_frame(grid: Grid) -> pd.DataFrame:
    """Grid as a string DataFrame, ragged rows padded with empty strings."""
    if not grid:
        return pd.DataFrame()
    return pd.DataFrame(grid).fillna('').astype(str)
