# Upload normalization: every accepted file becomes CSV text with a header row
import io
import json
from pathlib import Path
from typing import List, Tuple

import pandas as pd

from ..models import DataRecord

TEXT_EXTENSIONS = {".csv", ".txt"}
EXCEL_EXTENSIONS = {".xlsx"}
JSON_EXTENSIONS = {".json"}
SUPPORTED_EXTENSIONS = sorted(TEXT_EXTENSIONS | EXCEL_EXTENSIONS | JSON_EXTENSIONS)


class UnsupportedFileError(ValueError):
    pass


class FileParseError(ValueError):
    pass


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def normalize_upload(file_name: str, raw: bytes) -> str:
    """Convert an uploaded CSV, Excel or JSON file into CSV text."""
    ext = Path(file_name or "").suffix.lower()

    if ext in TEXT_EXTENSIONS:
        return _decode(raw)

    if ext in EXCEL_EXTENSIONS:
        try:
            df = pd.read_excel(io.BytesIO(raw), sheet_name=0)
        except Exception as e:
            raise FileParseError(f"Failed to parse file: {e}") from e
        return df.to_csv(index=False)

    if ext in JSON_EXTENSIONS:
        try:
            data = json.loads(_decode(raw))
        except json.JSONDecodeError as e:
            raise FileParseError(f"Failed to parse file: {e}") from e
        if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
            raise FileParseError("JSON file must contain an array of objects.")
        return pd.DataFrame.from_records(data).to_csv(index=False)

    raise UnsupportedFileError(
        "Unsupported file type. Please upload a CSV, Excel, or JSON file."
    )


def preview_rows(raw_csv: str, n: int = 5) -> Tuple[List[str], List[DataRecord]]:
    """Header and the first ``n`` rows, read as strings for display."""
    if not raw_csv.strip():
        return [], []
    df = pd.read_csv(io.StringIO(raw_csv), nrows=n, dtype=str, keep_default_na=False, on_bad_lines="skip")
    return df.columns.tolist(), df.to_dict(orient="records")
