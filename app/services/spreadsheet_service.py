"""
app/services/spreadsheet_service.py

Purpose: Spreadsheet ingestion

- Parses uploaded .xlsx / .xls / .csv bytes with pandas
- First row is the header row, remaining rows are data
- Produces (headers, rows) with JSON/BSON-safe cell values
- Any parse failure is a single SpreadsheetError (no partial parse)
"""

import io
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, List

import numpy as np
import pandas as pd

from app.core.exceptions import SpreadsheetError, ValidationError
from app.core.logging import get_logger
from app.schemas.contacts import RawRow
from utils.constants import (
    FILE_DUPLICATE_HEADERS_MESSAGE,
    FILE_EMPTY_MESSAGE,
    FILE_TYPE_MESSAGE,
    FILE_UNREADABLE_MESSAGE,
    SUPPORTED_EXTENSIONS,
)

logger = get_logger(__name__)


@dataclass
class ParsedSpreadsheet:
    headers: List[str]
    rows: List[RawRow] = field(default_factory=list)


def check_extension(filename: str) -> str:
    """
    Returns the lower-cased extension of a supported spreadsheet file.
    
    Raises:
        ValidationError: If the extension is not supported
    """
    lowered = (filename or "").lower()
    for extension in SUPPORTED_EXTENSIONS:
        if lowered.endswith(extension):
            return extension
    raise ValidationError(FILE_TYPE_MESSAGE, code="UNSUPPORTED_FILE_TYPE", details={"filename": filename})


def _clean_cell(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if pd.isna(value):
        return None
    if isinstance(value, (pd.Timestamp, datetime, date, time)):
        return value.isoformat()
    if isinstance(value, np.generic):
        return value.item()
    return value


def _read_frame(content: bytes, extension: str) -> pd.DataFrame:
    buffer = io.BytesIO(content)
    if extension == ".csv":
        # Keep cells as text so leading zeros and "+" survive
        return pd.read_csv(buffer, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    engine = "xlrd" if extension == ".xls" else "openpyxl"
    return pd.read_excel(buffer, sheet_name=0, dtype=object, engine=engine)


def parse_spreadsheet(content: bytes, filename: str) -> ParsedSpreadsheet:
    """
    Parses the first sheet of an uploaded spreadsheet.
    
    Args:
        content: Raw file bytes
        filename: Original file name (selects the reader by extension)
    
    Returns:
        ParsedSpreadsheet with trimmed headers and one dict per data row.
        Rows whose cells are all empty are dropped.
    
    Raises:
        ValidationError: Unsupported extension
        SpreadsheetError: Unreadable file, or no header / data rows,
            or two headers that are equal once trimmed
    """
    extension = check_extension(filename)
    
    try:
        df = _read_frame(content, extension)
    except Exception as e:
        logger.error(f"Failed to parse spreadsheet '{filename}': {e}")
        raise SpreadsheetError(FILE_UNREADABLE_MESSAGE, details={"filename": filename}) from e
    
    if df.shape[1] == 0:
        raise SpreadsheetError(FILE_EMPTY_MESSAGE, details={"filename": filename})
    
    headers = [str(column).strip() for column in df.columns]
    duplicates = sorted({header for header in headers if headers.count(header) > 1})
    if duplicates:
        raise SpreadsheetError(
            FILE_DUPLICATE_HEADERS_MESSAGE.format(headers=", ".join(duplicates)),
            details={"filename": filename, "duplicates": duplicates}
        )
    df.columns = headers
    
    if extension == ".csv":
        df = df.replace("", np.nan)
    df = df.dropna(how="all")
    
    rows: List[RawRow] = []
    for record in df.to_dict(orient="records"):
        rows.append({header: _clean_cell(record[header]) for header in headers})
    
    if not rows:
        raise SpreadsheetError(FILE_EMPTY_MESSAGE, details={"filename": filename})
    
    logger.info(f"Parsed '{filename}': {len(headers)} columns, {len(rows)} rows")
    return ParsedSpreadsheet(headers=headers, rows=rows)
