# ========================
# src/pipeline/orchestrator.py
# ========================

"""
Pipeline Orchestrator Module

Coordinates fetching, tokenizing, column exclusion and cleaning into the
canonical lexicon table.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional
from pathlib import Path

from .ingestion import CSVReader, tokenize
from .cleaning import DataCleaner
from .errors import EmptyInputError, ParseError
from .models import Table
from ..utils.performance_monitor import monitor_performance
from ..utils.config import Config, EXCLUDED_HEADERS, GLOSS_HEADER

logger = logging.getLogger(__name__)

def ingest(raw_csv_text: str,
           excluded_headers: Iterable[str] = EXCLUDED_HEADERS,
           gloss_header: str = GLOSS_HEADER,
           cleaner: Optional[DataCleaner] = None) -> Table:
    """
    Turn raw CSV text into the canonical table.

    Args:
        raw_csv_text (str): CSV text whose first row holds the headers
        excluded_headers (iterable): Header names to drop
        gloss_header (str): Header whose cells get quote stripping
        cleaner (DataCleaner): Optional cleaner to collect statistics on

    Returns:
        Table: Headers and cleaned rows

    Raises:
        ParseError: If the tokenizer reported a diagnostic
        EmptyInputError: If there is not even a header row
    """
    result = tokenize(raw_csv_text)
    if result.errors:
        first = result.errors[0]
        raise ParseError(first.message, row=first.row)
    if not result.rows:
        raise EmptyInputError("The data file contains no rows")

    cleaner = cleaner or DataCleaner(excluded_headers, gloss_header)
    retained, headers = cleaner.select_columns(result.rows[0])
    rows = [cleaner.clean_record(row, retained, headers) for row in result.rows[1:]]

    logger.info(f"Ingested {len(rows):,} rows across {len(headers)} columns")
    return Table.from_lists(headers, rows)

@dataclass
class LoadResult:
    """Outcome of a successful pipeline run."""
    table: Table
    stats: Dict[str, Any] = field(default_factory=dict)

class LexiconPipeline:
    """
    Loads the lexicon once: one fetch, then ingestion.
    """

    def __init__(self, source: Optional[str] = None, config: Optional[Config] = None):
        """
        Initialize the pipeline.

        Args:
            source (str): Path or URL of the CSV resource; defaults to config
            config (Config): Configuration object
        """
        self.config = config or Config()
        self.source = str(source or self.config.DATA_SOURCE)
        self.reader = CSVReader(self.source, timeout=self.config.FETCH_TIMEOUT)
        self.cleaner = DataCleaner()

        logger.info(f"LexiconPipeline initialized for {self.source}")

    def run(self) -> LoadResult:
        """
        Fetch and ingest the dataset.

        Returns:
            LoadResult: The canonical table and load statistics

        Raises:
            IngestError: If any step of the load fails
        """
        logger.info(f"Loading lexicon from '{self.source}'...")

        with monitor_performance("Lexicon load") as monitor:
            text = self.reader.fetch()
            monitor.add_checkpoint('fetched', {'bytes': self.reader.bytes_read})
            table = ingest(text, cleaner=self.cleaner)
            monitor.update_progress(len(table))

        stats = {
            'source': self.source,
            'bytes_read': self.reader.bytes_read,
            'rows_loaded': len(table),
            'columns': list(table.headers),
            'elapsed_seconds': monitor.elapsed_seconds,
            'peak_memory_mb': monitor.peak_memory_mb,
            **self.cleaner.get_statistics(),
        }
        self._log_final_summary(stats)
        return LoadResult(table=table, stats=stats)

    def _log_final_summary(self, stats: Dict[str, Any]) -> None:
        """Log load summary."""
        logger.info("=" * 60)
        logger.info("LEXICON LOAD SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Source: {stats['source']} ({stats['bytes_read']:,} bytes)")
        logger.info(f"Rows loaded: {stats['rows_loaded']:,}")
        logger.info(f"Columns: {', '.join(stats['columns'])}")
        logger.info(f"Columns excluded: {', '.join(stats['columns_excluded']) or 'none'}")
        logger.info(f"Cells cleaned: {stats['cells_changed']:,}")
        logger.info(f"Elapsed: {stats['elapsed_seconds']:.3f}s")
        logger.info("=" * 60)

    def validate_input(self) -> bool:
        """
        Check that a local source exists and is a file. Remote sources are
        only checked when fetched.

        Returns:
            bool: True if the source looks loadable
        """
        if self.reader.is_remote:
            return True

        input_path = Path(self.source)
        if not input_path.exists():
            logger.error(f"Input file does not exist: {self.source}")
            return False

        if not input_path.is_file():
            logger.error(f"Input path is not a file: {self.source}")
            return False

        logger.info(f"Input validation passed: {self.source}")
        return True
