# ========================
# src/query/collation.py
# ========================

"""
String Collation

Sort keys from the Unicode Collation Algorithm, so text is ordered the way a
reader expects rather than by code point: punctuation before letters, letters
such as ə, ŋ and ʔ placed in the Latin alphabet, accents and then case
(lowercase first) breaking ties.
"""

from typing import Optional, Tuple

from pyuca import Collator

# Loading the default collation table is slow; build it once per process.
_collator = Collator()

def collation_key(value: Optional[str]) -> Tuple[int, ...]:
    """
    Build a multi-level comparison key for a cell value.

    Args:
        value (str): Cell text; None compares as the empty string

    Returns:
        tuple: UCA sort key
    """
    return _collator.sort_key(value or '')
