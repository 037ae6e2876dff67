# ========================
# src/pipeline/models.py
# ========================

"""
Table Models

The canonical dataset produced by ingestion.
"""

from dataclasses import dataclass, field
from typing import Tuple

Row = Tuple[str, ...]

@dataclass(frozen=True)
class Table:
    """
    Canonical dataset: ordered headers and rows aligned positionally with them.
    Every row holds exactly len(headers) fields.
    """
    headers: Tuple[str, ...]
    rows: Tuple[Row, ...] = field(default_factory=tuple)

    def __post_init__(self):
        width = len(self.headers)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(f"Row {index} has {len(row)} fields, expected {width}")

    @classmethod
    def from_lists(cls, headers, rows) -> 'Table':
        return cls(tuple(headers), tuple(tuple(row) for row in rows))

    def __len__(self) -> int:
        return len(self.rows)
