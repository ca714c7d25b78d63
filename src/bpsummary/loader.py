import csv
import io

import pandas as pd

from .errors import EmptySource, SourceUnavailable


def decode_source(raw: bytes) -> str:
    """
    Decode raw source bytes as UTF-8 (a leading BOM is dropped).
    Zero-length or whitespace-only input raises EmptySource.
    """
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise SourceUnavailable(f"source is not valid UTF-8: {e}") from e
    if not text.strip():
        raise EmptySource("source is empty")
    return text


def load_csv_as_table(text: str) -> pd.DataFrame:
    """
    Read comma-separated text into a DataFrame:
      - first row = header, surrounding whitespace stripped from the names
      - every cell kept as a string (no NA inference, no dtype guessing)
      - blank lines kept as rows of empty cells so the mapper can count them
      - short lines padded with empty cells
      - extra cells that are all blank (trailing commas) trimmed
      - lines with non-blank extra cells dropped and counted in
        df.attrs["malformed_rows"]
    Field counts are checked line by line, so no line can shift the columns
    of the others.
    """
    reader = csv.reader(io.StringIO(text, newline=""))
    try:
        header = [name.strip() for name in next(reader)]
    except StopIteration:
        raise EmptySource("source is empty") from None
    width = len(header)

    rows: list[list[str]] = []
    malformed = 0
    for fields in reader:
        if len(fields) > width:
            if any(cell.strip() for cell in fields[width:]):
                malformed += 1
                continue
            fields = fields[:width]
        rows.append(fields + [""] * (width - len(fields)))

    df = pd.DataFrame(rows, columns=header, dtype=str)
    df.attrs["malformed_rows"] = malformed
    return df
