# ========================
# tests/test_ingestion.py
# ========================

import unittest
import tempfile
import os
import sys
from unittest import mock

import requests

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.pipeline import EmptyInputError, LoadError, ParseError, ingest
from src.pipeline.ingestion import CSVReader, tokenize

class TestTokenizer(unittest.TestCase):
    """Test the CSV tokenizer."""

    def test_skips_empty_lines(self):
        """Blank lines do not produce rows."""
        result = tokenize("a,b\n\nc,d\n\n")
        self.assertEqual(result.rows, [['a', 'b'], ['c', 'd']])
        self.assertEqual(result.errors, [])

    def test_quoted_fields_keep_commas(self):
        result = tokenize('Gloss,Proto-Seediq\n"hand, arm",*baga\n')
        self.assertEqual(result.rows[1], ['hand, arm', '*baga'])

    def test_oversized_cell(self):
        """Cells longer than the csv module's default limit are still read."""
        long_gloss = 'x' * 200000
        result = tokenize(f'Gloss,Cognates\n"{long_gloss}",y\n')
        self.assertEqual(result.errors, [])
        self.assertEqual(len(result.rows[1][0]), 200000)

    def test_malformed_quotes_reported(self):
        """A stray character after a closing quote is a diagnostic, not an exception."""
        result = tokenize('a,b\n"x"y,z\n')
        self.assertEqual(len(result.errors), 1)
        self.assertTrue(result.errors[0].message)
        self.assertEqual(result.rows, [['a', 'b']])

class TestIngest(unittest.TestCase):
    """Test turning CSV text into the canonical table."""

    def test_excluded_columns_removed(self):
        """Proto-Toda-Truku and Proto-Truku never reach the table."""
        text = (
            "Proto-Seediq,Proto-Toda-Truku,Proto-Truku,Gloss\n"
            "*baga,*baga,*baga,`hand'\n"
            "*papak,*papak\n"
        )
        table = ingest(text)

        self.assertEqual(table.headers, ('Proto-Seediq', 'Gloss'))
        self.assertNotIn('Proto-Truku', table.headers)
        self.assertNotIn('Proto-Toda-Truku', table.headers)
        for row in table.rows:
            self.assertEqual(len(row), len(table.headers))
        self.assertEqual(table.rows[0], ('*baga', 'hand'))
        self.assertEqual(table.rows[1], ('*papak', ''))

    def test_short_rows_padded_and_long_rows_cut(self):
        table = ingest("A,Gloss,C\nx\n1,2,3,4\n")
        self.assertEqual(table.rows, (('x', '', ''), ('1', '2', '3')))

    def test_gloss_cleaning_depends_on_header(self):
        """Quote stripping only applies to the Gloss column."""
        table = ingest("Gloss,Note\n`to run',`to run'\n")
        self.assertEqual(table.rows[0], ('to run', "`to run'"))

    def test_header_only_gives_empty_table(self):
        table = ingest("Proto-Seediq,Gloss\n")
        self.assertEqual(table.headers, ('Proto-Seediq', 'Gloss'))
        self.assertEqual(len(table), 0)

    def test_empty_input(self):
        with self.assertRaises(EmptyInputError):
            ingest("")
        with self.assertRaises(EmptyInputError):
            ingest("\n\n")

    def test_parse_error_carries_first_diagnostic(self):
        with self.assertRaises(ParseError) as ctx:
            ingest('Gloss\n"bad"quote\n')
        self.assertTrue(ctx.exception.message)
        self.assertEqual(ctx.exception.title, "CSV parse error")

class TestCSVReader(unittest.TestCase):
    """Test fetching the CSV resource."""

    def test_reads_local_file(self):
        with tempfile.NamedTemporaryFile(mode='wb', suffix='.csv', delete=False) as f:
            f.write("\ufeffProto-Seediq,Gloss\n*ruŋu,`x'\n".encode('utf-8'))
            temp_file_path = f.name

        try:
            reader = CSVReader(temp_file_path)
            result = reader.read_rows()

            # The BOM must not leak into the first header
            self.assertEqual(result.rows[0], ['Proto-Seediq', 'Gloss'])
            self.assertEqual(result.rows[1][0], '*ruŋu')
            self.assertGreater(reader.bytes_read, 0)
        finally:
            os.unlink(temp_file_path)

    def test_missing_file(self):
        reader = CSVReader("non_existent_file.csv")
        with self.assertRaises(LoadError):
            reader.fetch()

    def test_invalid_utf8(self):
        with tempfile.NamedTemporaryFile(mode='wb', suffix='.csv', delete=False) as f:
            f.write(b"Gloss\n\xff\xfe\xfa\n")
            temp_file_path = f.name

        try:
            with self.assertRaises(LoadError):
                CSVReader(temp_file_path).fetch()
        finally:
            os.unlink(temp_file_path)

    @mock.patch('src.pipeline.ingestion.requests.get')
    def test_remote_fetch(self, mock_get):
        """Remote sources are fetched exactly once with the configured timeout."""
        response = mock.Mock()
        response.content = "Gloss\n`water'\n".encode('utf-8')
        response.raise_for_status.return_value = None
        mock_get.return_value = response

        reader = CSVReader("https://example.org/data.csv", timeout=3)
        text = reader.fetch()

        self.assertEqual(text, "Gloss\n`water'\n")
        mock_get.assert_called_once_with("https://example.org/data.csv", timeout=3)

    @mock.patch('src.pipeline.ingestion.requests.get')
    def test_remote_http_error(self, mock_get):
        response = mock.Mock()
        response.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
        mock_get.return_value = response

        with self.assertRaises(LoadError):
            CSVReader("http://example.org/missing.csv").fetch()

    @mock.patch('src.pipeline.ingestion.requests.get')
    def test_remote_network_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("connection refused")

        with self.assertRaises(LoadError):
            CSVReader("http://example.org/data.csv").fetch()

if __name__ == '__main__':
    unittest.main()
