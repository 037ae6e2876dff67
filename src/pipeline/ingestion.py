# ========================
# src/pipeline/ingestion.py
# ========================

"""
Data Ingestion Module

Fetches the raw CSV text for the lexicon and tokenizes it into string rows.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import requests

from .errors import LoadError

logger = logging.getLogger(__name__)

@dataclass
class Diagnostic:
    """A problem reported by the tokenizer."""
    message: str
    row: int = 0

@dataclass
class TokenizeResult:
    rows: List[List[str]] = field(default_factory=list)
    errors: List[Diagnostic] = field(default_factory=list)

def tokenize(text: str) -> TokenizeResult:
    """
    Split CSV text into rows of plain strings.

    Empty lines are skipped and no header typing is applied. Malformed quoting
    stops tokenizing and is reported as a diagnostic rather than raised.

    Args:
        text (str): Raw CSV text

    Returns:
        TokenizeResult: Rows read so far and any diagnostics
    """
    result = TokenizeResult()
    # No cell can be longer than the whole input
    if len(text) > csv.field_size_limit():
        csv.field_size_limit(len(text))
    reader = csv.reader(io.StringIO(text, newline=''), strict=True)
    try:
        for row in reader:
            if not row or row == ['']:
                continue
            result.rows.append(row)
    except csv.Error as e:
        logger.warning(f"CSV tokenizer stopped at line {reader.line_num}: {e}")
        result.errors.append(Diagnostic(message=str(e), row=reader.line_num))
    return result

class CSVReader:
    """
    Reads the lexicon CSV from a local path or an http(s) URL.
    Exactly one fetch is made per call to `fetch`.
    """

    def __init__(self, source, timeout: float = 10.0):
        """
        Initialize the CSV reader.

        Args:
            source (str): Local file path or http(s) URL of the CSV resource
            timeout (float): Seconds to wait for a remote response
        """
        self.source = str(source)
        self.timeout = timeout
        self.bytes_read = 0
        logger.info(f"Initialized CSVReader for source: {self.source}")

    @property
    def is_remote(self) -> bool:
        return self.source.lower().startswith(('http://', 'https://'))

    def fetch(self) -> str:
        """
        Fetch the CSV resource and return it as text.

        Returns:
            str: Decoded CSV text

        Raises:
            LoadError: If the resource cannot be fetched, read or decoded
        """
        raw = self._fetch_remote() if self.is_remote else self._read_local()
        self.bytes_read = len(raw)
        try:
            text = raw.decode('utf-8-sig')
        except UnicodeDecodeError as e:
            logger.error(f"CSV resource is not valid UTF-8: {e}")
            raise LoadError(f"Could not decode {self.source} as UTF-8") from e
        logger.info(f"Fetched {self.bytes_read:,} bytes from {self.source}")
        return text

    def read_rows(self) -> TokenizeResult:
        """Fetch the resource and tokenize it."""
        return tokenize(self.fetch())

    def _fetch_remote(self) -> bytes:
        try:
            response = requests.get(self.source, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Error fetching CSV resource: {e}")
            raise LoadError(f"Could not load {self.source}; check that the file exists") from e
        return response.content

    def _read_local(self) -> bytes:
        try:
            return Path(self.source).read_bytes()
        except FileNotFoundError as e:
            logger.error(f"File '{self.source}' was not found")
            raise LoadError(f"Could not load {self.source}; check that the file exists") from e
        except OSError as e:
            logger.error(f"Error reading CSV file: {e}")
            raise LoadError(f"Could not read {self.source}: {e}") from e
