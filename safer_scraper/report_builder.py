"""
Main orchestration for turning a fetched page into a text report.
"""

import logging
import os
from typing import Iterable, List, Optional, Sequence, Union

from .config import (
    MARKDOWN,
    NO_DATA,
    NO_TABLE,
    SNAPSHOT_PLAN,
    RegionStep,
    ScraperConfig,
    SectionStep,
    Selectors,
    TableStep,
)
from .document import Document
from .section_scanner import extract_checked_items, extract_region
from .table_processor import (
    Grid,
    TableProcessor,
    extract_table,
    grid_to_frame,
    grid_to_markdown,
    render_grid,
)

logger = logging.getLogger(__name__)


# ============================================================================
# STEPS
# ============================================================================

def run_step(document: Document, step: Union[TableStep, SectionStep, RegionStep]) -> str:
    """
    Run one extraction step against a document.

    Args:
        document: Parsed page
        step: TableStep, SectionStep or RegionStep

    Returns:
        Rendered fragment, empty when the step found nothing
    """
    if isinstance(step, TableStep):
        grid = extract_table(
            document, step.selector, step.index, max_columns=step.max_columns
        )
        return render_grid(grid, step.output_format)

    if isinstance(step, SectionStep):
        return extract_checked_items(document, step.container_selector, step.title)

    if isinstance(step, RegionStep):
        container = document.query_one(step.container_selector)
        if container is None:
            return ''
        grid = extract_region(
            container, step.start_title, step.stop_titles,
            step.skip_markers, step.max_columns
        )
        return grid_to_markdown(grid)

    raise TypeError(f"Unknown extraction step: {step!r}")


def join_fragments(fragments: Iterable[str], sentinel: str = NO_DATA) -> str:
    """Join non-empty fragments with blank lines, or return the sentinel."""
    parts = [fragment for fragment in fragments if fragment]
    if not parts:
        return sentinel
    return '\n\n'.join(parts)


# ============================================================================
# REPORTS
# ============================================================================

def build_report(
    document: Document,
    plan: Sequence = SNAPSHOT_PLAN,
    config: Optional[ScraperConfig] = None
) -> str:
    """
    Run every step of an extraction plan and compose the report.

    Args:
        document: Parsed page
        plan: Ordered extraction steps
        config: Optional scraper configuration

    Returns:
        Non-empty fragments separated by blank lines, or NO_DATA

    Raises:
        BotProtectionError: The page is a challenge page and the config asks
            for it to be reported as such
    """
    if config is None:
        config = ScraperConfig()

    if config.fail_on_bot_protection:
        document.check_bot_protection()

    fragments = []
    for step in plan:
        fragment = run_step(document, step)
        if fragment:
            logger.info(f"✓ Extracted '{step.name}'")
            fragments.append(fragment)
        else:
            logger.debug(f"No data for '{step.name}'")

    if not fragments:
        logger.warning("Report is empty - no step produced data")
        if config.debug_dir:
            save_tables_debug(document, config.debug_dir)

    return join_fragments(fragments, NO_DATA)


def collect_table_grids(
    document: Document,
    selector: Optional[str] = None,
    offset: int = 0
) -> List[Grid]:
    """Grids of every matching table after the first `offset`, empty ones left out."""
    tables = document.query(selector or 'table')
    grids = []
    for table in tables[offset:]:
        grid = TableProcessor.build_grid(table, include_nested=True)
        if grid:
            grids.append(grid)
    return grids


def render_tables(
    document: Document,
    selector: Optional[str] = None,
    offset: int = 0,
    output_format: str = MARKDOWN
) -> str:
    """
    Render every table of a document as one block.

    Grids of distinct tables are separated by one blank row; there is no
    trailing separator.

    Args:
        document: Parsed page
        selector: CSS selector of the tables (all tables when omitted)
        offset: Number of matching tables to skip from the beginning
        output_format: 'markdown' or 'csv'

    Returns:
        Rendered rows, or an empty string when no table has any data
    """
    rows = []
    for grid in collect_table_grids(document, selector, offset):
        if rows:
            rows.append([])
        rows.extend(grid)

    return render_grid(rows, output_format)


def build_history_report(
    documents: Sequence[Document],
    selector: str = Selectors.HISTORY_TABLE
) -> str:
    """
    Compose the licensing and insurance history of a carrier.

    The first document is the carrier details page; each following one is a
    history page whose first matching table only repeats the carrier header.

    Raises:
        BotProtectionError: One of the pages is a challenge page
    """
    fragments = []
    for position, document in enumerate(documents):
        document.check_bot_protection(source=f"history page {position}")
        offset = 0 if position == 0 else 1
        fragments.append(render_tables(document, selector, offset))

    return join_fragments(fragments, NO_TABLE)


# ============================================================================
# DEBUG UTILITIES
# ============================================================================

def save_tables_debug(document: Document, debug_dir: str, prefix: str = 'tables') -> List[str]:
    """
    Save every table of a document to CSV for debugging.

    Args:
        document: Parsed page
        debug_dir: Directory receiving the files
        prefix: File name prefix

    Returns:
        Paths of the files written
    """
    paths = []
    try:
        os.makedirs(debug_dir, exist_ok=True)
        for idx, table in enumerate(document.query('table')):
            grid = TableProcessor.build_grid(table, include_nested=False)
            if not grid:
                continue
            path = os.path.join(debug_dir, f"{prefix}_{idx}.csv")
            grid_to_frame(grid).to_csv(path, index=False, header=False)
            paths.append(path)

        logger.info(f"Saved {len(paths)} table(s) for debugging in {debug_dir}")

    except OSError as e:
        logger.error(f"Failed to save table debug files: {e}")

    return paths
