"""
Parsed HTML documents and the read-only queries the extractors run on them.
"""

import copy
import logging
from typing import Dict, List, Optional

from bs4 import BeautifulSoup, Tag

from .config import HIDDEN_CLASS, LICENSING_INSURANCE_TEXT, Selectors

logger = logging.getLogger(__name__)


class ScraperError(Exception):
    """Base exception for scraper errors."""
    pass


class BotProtectionError(ScraperError):
    """The page is a bot-protection challenge, not the expected report."""

    def __init__(self, reason: str, source: Optional[str] = None):
        self.reason = reason
        self.source = source
        message = f"Bot protection detected ({reason})"
        if source:
            message += f" at {source}"
        super().__init__(message)


# ============================================================================
# TEXT UTILITIES
# ============================================================================

def normalize_text(text: str) -> str:
    """
    Normalize text by removing extra whitespace and invisible Unicode characters.

    This is the canonical version used throughout the scraper.
    """
    if not text:
        return ""

    invisible_chars = [
        '\u200b',  # Zero-width space
        '\u200c',  # Zero-width non-joiner
        '\u200d',  # Zero-width joiner
        '\ufeff',  # Byte order mark
    ]

    for char in invisible_chars:
        text = text.replace(char, '')

    return ' '.join(text.split())


def visible_text(node: Tag, hidden_class: str = HIDDEN_CLASS) -> str:
    """
    Text of a node without the descendants flagged as not for display.

    Works on a copy of the subtree, so the document itself is never modified.

    Args:
        node: BeautifulSoup element
        hidden_class: Class marking elements that must not be reported

    Returns:
        Trimmed text with whitespace runs collapsed to single spaces
    """
    if node is None:
        return ""

    clone = copy.copy(node)
    for hidden_tag in clone.select(f'.{hidden_class}'):
        # Nested hidden tags go away with their hidden ancestor
        if not hidden_tag.decomposed:
            hidden_tag.decompose()

    text = normalize_text(clone.get_text())
    clone.decompose()
    return text


# ============================================================================
# DOCUMENT
# ============================================================================

class Document:
    """One fetched page, parsed once and only queried afterwards."""

    def __init__(self, markup: str):
        """
        Parse markup into a queryable tree.

        Args:
            markup: Complete HTML of the page
        """
        self.soup = BeautifulSoup(markup or '', 'html.parser')

    def query(self, selector: str) -> List[Tag]:
        """All elements matching a CSS selector, in document order."""
        return self.soup.select(selector)

    def query_one(self, selector: str) -> Optional[Tag]:
        """First element matching a CSS selector, or None."""
        return self.soup.select_one(selector)

    def find_link_by_text(self, link_text: str) -> Optional[str]:
        """
        Find the target of the first link whose text contains `link_text`.

        Args:
            link_text: Text to search for in the link

        Returns:
            The href value, or None if no such link exists
        """
        for anchor in self.soup.find_all('a'):
            if link_text in anchor.get_text():
                href = anchor.get('href')
                if href:
                    return href
                break

        logger.debug(f"No link with text '{link_text}'")
        return None

    def licensing_insurance_link(self) -> Optional[str]:
        return self.find_link_by_text(LICENSING_INSURANCE_TEXT)

    def form_data(self, action: str) -> Dict[str, str]:
        """
        Collect the hidden inputs of the form posting to `action`.

        Args:
            action: Value of the form's action attribute

        Returns:
            Mapping of input names to values (empty if the form is missing)
        """
        form = self.soup.find('form', attrs={'action': action})
        if form is None:
            logger.debug(f"No form found for action '{action}'")
            return {}

        data = {}
        for hidden_input in form.find_all('input', attrs={'type': 'hidden'}):
            name = hidden_input.get('name')
            value = hidden_input.get('value')
            if name and value:
                data[name] = value
        return data

    def bot_protection_reason(self) -> Optional[str]:
        """Describe the reCAPTCHA markup found on the page, if any."""
        checks = [
            (Selectors.RECAPTCHA_WIDGET, 'recaptcha widget'),
            (Selectors.RECAPTCHA_SCRIPT, 'recaptcha script'),
            (Selectors.RECAPTCHA_RESPONSE, 'recaptcha response field'),
        ]
        for selector, reason in checks:
            if self.query_one(selector) is not None:
                return reason
        return None

    def has_bot_protection(self) -> bool:
        return self.bot_protection_reason() is not None

    def check_bot_protection(self, source: Optional[str] = None):
        """
        Raise BotProtectionError when the page is a challenge page.

        Args:
            source: Optional URL or label included in the error
        """
        reason = self.bot_protection_reason()
        if reason:
            logger.error(f"Bot protection markup found: {reason}")
            raise BotProtectionError(reason, source)


def load(markup: str) -> Document:
    """Parse markup into a Document."""
    return Document(markup)
