"""
Configuration and constants for the SAFER snapshot scraper.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


# ============================================================================
# MARKERS
# ============================================================================

# Elements carrying this class are not meant for display
HIDDEN_CLASS = 'hidden'

# Checklist cell value marking a checked item
CHECK_MARKER = 'X'

# Checklist labels containing this text are links back to the site, not items
EXCLUDED_LABEL = 'SAFER'

# Widest colspan honoured, as in browsers
MAX_COLSPAN = 1000


# ============================================================================
# SENTINELS
# ============================================================================

NO_DATA = 'No data found'
NO_TABLE = 'No table found'


# ============================================================================
# SELECTORS
# ============================================================================

class Selectors:
    """CSS selectors for the tables of SAFER and L&I pages."""

    # Company snapshot
    SNAPSHOT_TABLE = 'table[border="1"][width="70%"][bordercolor="SILVER"]'
    INSPECTIONS = 'table[summary="Inspections"]'
    CRASHES = 'table[summary="Crashes"]'
    REVIEW = 'table[summary="Review Information"]'

    # Licensing & insurance history
    HISTORY_TABLE = 'table[width="100%"][border="4"]'

    # Bot protection
    RECAPTCHA_WIDGET = '.g-recaptcha'
    RECAPTCHA_SCRIPT = 'script[src*="recaptcha"]'
    RECAPTCHA_RESPONSE = 'input[name="g_recaptcha_response"]'


class SectionTitles:
    """Header texts of the sections of the snapshot table."""

    USDOT_INFORMATION = 'USDOT INFORMATION'
    OPERATION_CLASSIFICATION = 'Operation Classification'
    CARRIER_OPERATION = 'Carrier Operation'
    CARGO_CARRIED = 'Cargo Carried'

    # Checklist sections that close the USDOT information block
    CHECKLISTS = (OPERATION_CLASSIFICATION, CARRIER_OPERATION, CARGO_CARRIED)

    # Rows already reported through the nested power units table
    NON_CMV_UNITS = 'Non-CMV Units:'


LICENSING_INSURANCE_TEXT = 'Licensing & Insurance'


# ============================================================================
# OUTPUT FORMATS
# ============================================================================

MARKDOWN = 'markdown'
CSV = 'csv'
OUTPUT_FORMATS = (MARKDOWN, CSV)


# ============================================================================
# EXTRACTION STEPS
# ============================================================================

@dataclass(frozen=True)
class TableStep:
    """Grid of the index-th table matching a selector."""
    name: str
    selector: str
    index: int = 0
    max_columns: Optional[int] = None
    output_format: str = MARKDOWN


@dataclass(frozen=True)
class SectionStep:
    """Checked items of a checklist section inside a container table."""
    name: str
    container_selector: str
    title: str


@dataclass(frozen=True)
class RegionStep:
    """Rows of a container table between a start title and a stop title."""
    name: str
    container_selector: str
    start_title: str
    stop_titles: Tuple[str, ...]
    skip_markers: Tuple[str, ...] = ()
    max_columns: Optional[int] = None


# Company snapshot, in report order
SNAPSHOT_PLAN = (
    RegionStep(
        name='USDOT Information',
        container_selector=Selectors.SNAPSHOT_TABLE,
        start_title=SectionTitles.USDOT_INFORMATION,
        stop_titles=SectionTitles.CHECKLISTS,
        skip_markers=(SectionTitles.NON_CMV_UNITS,),
        max_columns=4,
    ),
    SectionStep(
        name='Operation Classification',
        container_selector=Selectors.SNAPSHOT_TABLE,
        title=SectionTitles.OPERATION_CLASSIFICATION,
    ),
    SectionStep(
        name='Carrier Operation',
        container_selector=Selectors.SNAPSHOT_TABLE,
        title=SectionTitles.CARRIER_OPERATION,
    ),
    SectionStep(
        name='Cargo Carried',
        container_selector=Selectors.SNAPSHOT_TABLE,
        title=SectionTitles.CARGO_CARRIED,
    ),
    TableStep(name='US Inspections', selector=Selectors.INSPECTIONS, index=0),
    TableStep(name='US Crashes', selector=Selectors.CRASHES, index=0),
    TableStep(name='Canadian Inspections', selector=Selectors.INSPECTIONS, index=1),
    TableStep(name='Canadian Crashes', selector=Selectors.CRASHES, index=1),
    TableStep(name='Safety Rating', selector=Selectors.REVIEW, index=0),
)


# ============================================================================
# SCRAPER CONFIGURATION
# ============================================================================

@dataclass
class ScraperConfig:
    """Configuration for report building."""

    # Raise instead of reporting "no data" when a challenge page is returned
    fail_on_bot_protection: bool = True

    # Directory for CSV dumps of the tables of documents that yield no data
    debug_dir: Optional[str] = None
