# ========================
# src/query/models.py
# ========================

"""
Query Models

Filter and sort inputs and the derived view they produce.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from ..pipeline.models import Row

ASCENDING = 'asc'
DESCENDING = 'desc'

# Column index -> raw search term. Blank terms impose no constraint.
FilterSet = Mapping[int, str]

@dataclass(frozen=True)
class SortDirective:
    column: int
    direction: str = ASCENDING

    def __post_init__(self):
        if self.direction not in (ASCENDING, DESCENDING):
            raise ValueError(f"Unknown sort direction: {self.direction!r}")

    @property
    def descending(self) -> bool:
        return self.direction == DESCENDING

    def to_dict(self) -> Dict[str, Any]:
        return {'column': self.column, 'direction': self.direction}

@dataclass(frozen=True)
class ViewTable:
    """
    The rows currently on display: a subset and/or reordering of the
    canonical rows, with the canonical row count kept alongside.
    """
    headers: Tuple[str, ...]
    rows: Tuple[Row, ...]
    total_rows: int = 0

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def is_filtered(self) -> bool:
        return len(self.rows) != self.total_rows

    def to_dict(self, sort: Optional[SortDirective] = None) -> Dict[str, Any]:
        return {
            'headers': list(self.headers),
            'rows': [list(row) for row in self.rows],
            'row_count': len(self.rows),
            'total_rows': self.total_rows,
            'sort': sort.to_dict() if sort else None,
        }
