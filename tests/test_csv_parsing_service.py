from __future__ import annotations

import io
import unittest

from fastapi import UploadFile

from app.domain.media_data import EMPTY, Number, Text
from app.services.csv_parsing_service import CSVParsingError, CSVParsingService


class TestCSVParsingService(unittest.TestCase):
    def setUp(self) -> None:
        self.parser = CSVParsingService()

    def test_first_row_is_headers_and_cells_are_coerced(self) -> None:
        table = self.parser.parse_bytes(b"Platform,CTR,Notes\nFacebook,2.3,\nGoogle,3.1,Q1 push\n")

        self.assertEqual(table.headers, ("Platform", "CTR", "Notes"))
        self.assertEqual(table.row_count, 2)
        self.assertEqual(table.rows[0], (Text("Facebook"), Number(2.3), EMPTY))
        self.assertEqual(table.rows[1][2], Text("Q1 push"))

    def test_empty_lines_are_skipped(self) -> None:
        table = self.parser.parse_bytes(b"\nPlatform,CTR\n\nFacebook,2.3\n\n")

        self.assertEqual(table.headers, ("Platform", "CTR"))
        self.assertEqual(table.row_count, 1)

    def test_separator_only_lines_count_as_rows(self) -> None:
        table = self.parser.parse_bytes(b"Platform,CTR\n,\nFacebook,2.3\n,,\n")

        self.assertEqual(table.row_count, 3)
        self.assertEqual(table.rows[0], (EMPTY, EMPTY))
        self.assertEqual(table.rows[2], (EMPTY, EMPTY, EMPTY))

    def test_byte_order_mark_is_removed(self) -> None:
        table = self.parser.parse_bytes(b"\xef\xbb\xbfPlatform,CTR\nFacebook,2.3\n")

        self.assertEqual(table.headers[0], "Platform")

    def test_quoted_cells(self) -> None:
        table = self.parser.parse_bytes(b'Platform,Notes\n"Meta, Inc.","said ""hi"""\n')

        self.assertEqual(table.rows[0], (Text("Meta, Inc."), Text('said "hi"')))

    def test_empty_file_has_no_headers(self) -> None:
        table = self.parser.parse_bytes(b"")

        self.assertEqual(table.headers, ())
        self.assertEqual(table.rows, ())

    def test_non_utf8_content_is_rejected(self) -> None:
        with self.assertRaises(CSVParsingError):
            self.parser.parse_bytes(b"Platform,CTR\n\xff\xfe,1\n")

    def test_parse_upload_keeps_filename(self) -> None:
        upload = UploadFile(file=io.BytesIO(b"Channel,CPM\nSearch,12\n"), filename="q1.csv")

        parsed = self.parser.parse_upload(upload)

        self.assertEqual(parsed.filename, "q1.csv")
        self.assertEqual(parsed.table.rows[0][1], Number(12.0))
        self.assertFalse(upload.file.closed)


if __name__ == "__main__":
    unittest.main()
