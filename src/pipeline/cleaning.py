# ========================
# src/pipeline/cleaning.py
# ========================

"""
Data Cleaning Module

Drops excluded columns and strips display-irrelevant markup from cell text.
"""

import re
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..utils.config import EXCLUDED_HEADERS, GLOSS_HEADER

logger = logging.getLogger(__name__)

# Morpheme-boundary marker in the source orthography
BOUNDARY_PATTERN = re.compile(r'=')
SMALL_CAPS_PATTERN = re.compile(r'\\textsc\{([^}]*)\}')
# Nested braces are not supported: "\a{\b{c}}" only loses its inner command.
COMMAND_PATTERN = re.compile(r'\\[a-zA-Z]+\{([^}]*)\}')
GLOSS_OPEN_QUOTE = re.compile(r'\A`')
GLOSS_CLOSE_QUOTE = re.compile(r"'\Z")

def clean_text(text: Optional[str], is_gloss: bool = False) -> str:
    """
    Clean a single cell for display and search.

    Removes '=' markers and LaTeX-style '\\command{X}' markup (keeping X). For
    gloss cells, one leading backtick and one trailing apostrophe are removed.
    The result is trimmed. Never raises.

    Args:
        text (str): Raw cell text, possibly None
        is_gloss (bool): Whether the cell belongs to the gloss column

    Returns:
        str: Cleaned text
    """
    if not text:
        return ''

    cleaned = BOUNDARY_PATTERN.sub('', text)
    cleaned = SMALL_CAPS_PATTERN.sub(r'\1', cleaned)
    cleaned = COMMAND_PATTERN.sub(r'\1', cleaned)

    if is_gloss:
        cleaned = GLOSS_OPEN_QUOTE.sub('', cleaned, count=1)
        cleaned = GLOSS_CLOSE_QUOTE.sub('', cleaned, count=1)

    return cleaned.strip()

class DataCleaner:
    """
    Projects raw rows onto the retained columns and cleans every kept cell.
    Column exclusion runs first because cleaning depends on the output header.
    """

    def __init__(self,
                 excluded_headers: Iterable[str] = EXCLUDED_HEADERS,
                 gloss_header: str = GLOSS_HEADER):
        """
        Initialize the data cleaner.

        Args:
            excluded_headers (iterable): Header names to drop
            gloss_header (str): Header whose cells get quote stripping
        """
        self.excluded_headers = frozenset(excluded_headers)
        self.gloss_header = gloss_header
        self.records_processed = 0
        self.cells_changed = 0
        self.columns_excluded: List[str] = []
        logger.debug(f"DataCleaner initialized, excluding {sorted(self.excluded_headers)}")

    def select_columns(self, headers: Sequence[str]) -> Tuple[List[int], List[str]]:
        """
        Work out which columns survive exclusion.

        Args:
            headers (list[str]): Source header row

        Returns:
            tuple: Retained source indices and their headers, in source order
        """
        retained = [i for i, header in enumerate(headers) if header not in self.excluded_headers]
        self.columns_excluded = [h for h in headers if h in self.excluded_headers]
        if self.columns_excluded:
            logger.info(f"Excluding columns: {self.columns_excluded}")
        return retained, [headers[i] for i in retained]

    def clean_record(self, record: Sequence[str], retained: Sequence[int],
                     headers: Sequence[str]) -> Tuple[str, ...]:
        """
        Project one raw row onto the retained columns and clean each cell.

        Args:
            record (list[str]): Raw row from the tokenizer
            retained (list[int]): Source indices to keep
            headers (list[str]): Output headers, aligned with `retained`

        Returns:
            tuple[str]: Cleaned row with exactly len(retained) fields
        """
        self.records_processed += 1
        cleaned = []
        for out_index, source_index in enumerate(retained):
            raw = record[source_index] if source_index < len(record) else ''
            value = clean_text(raw, headers[out_index] == self.gloss_header)
            if value != raw:
                self.cells_changed += 1
            cleaned.append(value)
        return tuple(cleaned)

    def get_statistics(self) -> Dict[str, object]:
        """Get cleaning statistics."""
        return {
            'records_processed': self.records_processed,
            'cells_changed': self.cells_changed,
            'columns_excluded': list(self.columns_excluded),
        }
