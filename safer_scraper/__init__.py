"""
SAFER Snapshot Scraper

Extracts tables and checklist sections from FMCSA SAFER and L&I pages and
renders them as Markdown or CSV text.
"""

__version__ = "1.0.0"

# Public API
from .config import (
    NO_DATA,
    NO_TABLE,
    SNAPSHOT_PLAN,
    RegionStep,
    ScraperConfig,
    SectionStep,
    SectionTitles,
    Selectors,
    TableStep,
)
from .document import BotProtectionError, Document, ScraperError, load, normalize_text, visible_text
from .table_processor import (
    Cell,
    TableProcessor,
    extract_table,
    grid_to_csv,
    grid_to_frame,
    grid_to_markdown,
    render_grid,
)
from .section_scanner import ScanState, SectionScanner, extract_checked_items, extract_region, scan_section
from .report_builder import build_history_report, build_report, render_tables, run_step
from .log_config import setup_logging

__all__ = [
    # Main functions
    'build_report',
    'build_history_report',
    'render_tables',
    'run_step',

    # Configuration
    'ScraperConfig',
    'SNAPSHOT_PLAN',
    'TableStep',
    'SectionStep',
    'RegionStep',
    'Selectors',
    'SectionTitles',
    'NO_DATA',
    'NO_TABLE',

    # Components (for advanced usage)
    'Document',
    'TableProcessor',
    'Cell',
    'SectionScanner',
    'ScanState',
    'scan_section',
    'extract_checked_items',
    'extract_region',
    'extract_table',

    # Errors
    'ScraperError',
    'BotProtectionError',

    # Utilities
    'load',
    'visible_text',
    'normalize_text',
    'grid_to_markdown',
    'grid_to_csv',
    'grid_to_frame',
    'render_grid',
    'setup_logging',
]
