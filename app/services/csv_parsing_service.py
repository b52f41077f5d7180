"""
app/services/csv_parsing_service.py

Turns an uploaded CSV export into a typed TabularInput.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import BinaryIO

from fastapi import UploadFile

from app.domain.media_data import TabularInput, to_cell_value

logger = logging.getLogger(__name__)


class CSVParsingError(ValueError):
    """
    Raised when an uploaded file cannot be read as CSV text.
    """


@dataclass(frozen=True)
class ParsedCSV:
    """
    Parsed upload with its source filename.
    """

    filename: str | None
    table: TabularInput


class CSVParsingService:
    """
    Reads CSV bytes into headers plus rows, skipping empty lines.

    The first non-empty line is the header row. Lines holding only separators
    are kept as rows of empty cells. Cells are coerced so that
    numeric text becomes numbers and blank cells become empty.
    """

    def __init__(self, *, encoding: str = "utf-8-sig") -> None:
        self._encoding = encoding

    def parse_upload(self, upload_file: UploadFile) -> ParsedCSV:
        raw_file = upload_file.file
        raw_file.seek(0)
        table = self.parse_stream(raw_file)
        logger.info(
            "Parsed CSV upload '%s': %d headers, %d rows",
            upload_file.filename,
            len(table.headers),
            table.row_count,
        )
        return ParsedCSV(filename=upload_file.filename, table=table)

    def parse_bytes(self, content: bytes) -> TabularInput:
        return self.parse_stream(io.BytesIO(content))

    def parse_stream(self, raw_file: BinaryIO) -> TabularInput:
        text_stream = io.TextIOWrapper(raw_file, encoding=self._encoding, newline="")
        try:
            rows = [row for row in csv.reader(text_stream) if row]
        except UnicodeDecodeError as exc:
            raise CSVParsingError("CSV file must be UTF-8 encoded text.") from exc
        except csv.Error as exc:
            raise CSVParsingError(f"CSV file could not be parsed: {exc}") from exc
        finally:
            text_stream.detach()

        if not rows:
            return TabularInput(headers=())

        headers, *data_rows = rows
        return TabularInput(
            headers=tuple(headers),
            rows=tuple(tuple(to_cell_value(cell) for cell in row) for row in data_rows),
        )


@lru_cache(maxsize=1)
def get_csv_parsing_service() -> CSVParsingService:
    """
    Build and cache the CSV parsing service.
    """
    return CSVParsingService()
