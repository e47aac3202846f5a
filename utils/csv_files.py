from pathlib import Path
from typing import Iterator, Sequence, Type, Union

import pandas as pd

from models.errors import (
    HeaderColumnCountMismatch,
    HeaderNameMismatch,
    HeaderValidationError,
    ParseError,
)
from models.schemas import ImportRecord

PathLike = Union[str, Path]
ENCODING = "utf-8-sig"


def read_header(path: PathLike) -> list:
    """Return the comma-separated fields of the first line of path."""
    # Only the header bytes are decoded; bad bytes further down are the reader's concern.
    with open(path, "rb") as handle:
        first_line = handle.readline()
    try:
        decoded = first_line.decode(ENCODING)
    except UnicodeDecodeError as exc:
        raise HeaderValidationError(f"Header of {path} is not valid UTF-8: {exc}") from exc
    return decoded.rstrip("\r\n").split(",")


def validate_header(path: PathLike, expected_columns: Sequence[str]) -> None:
    """
    Positionally compare the header of path against expected_columns.

    Names are compared case-insensitively after trimming whitespace.
    """
    actual = read_header(path)
    if len(actual) != len(expected_columns):
        raise HeaderColumnCountMismatch(path, expected_columns, actual)
    for position, (expected, found) in enumerate(zip(expected_columns, actual)):
        if found.strip().lower() != expected.strip().lower():
            raise HeaderNameMismatch(path, position, expected, found)


def _is_blank(values: pd.Series) -> pd.Series:
    # Missing trailing fields come back as NaN or "" depending on the chunk.
    return values.isna() | (values.fillna("").str.strip() == "")


def read_records(
    path: PathLike,
    columns: Sequence[str],
    record_type: Type[ImportRecord],
    chunk_size: int = 1000,
) -> Iterator[ImportRecord]:
    """
    Lazily parse the data rows of a validated file into record_type instances.

    The header line is skipped and only the ``name`` field is kept. A row with
    the wrong number of fields, a blank name or bytes that are not UTF-8
    raises ParseError.
    """
    name_index = list(columns).index("name")
    try:
        reader = pd.read_csv(
            path,
            header=None,
            skiprows=1,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding=ENCODING,
            chunksize=chunk_size,
        )
    except pd.errors.EmptyDataError:
        return
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise ParseError(path, str(exc)) from exc

    rows_seen = 0
    with reader:
        while True:
            try:
                frame = next(reader)
            except (StopIteration, pd.errors.EmptyDataError):
                return
            except (pd.errors.ParserError, UnicodeDecodeError) as exc:
                raise ParseError(path, str(exc)) from exc

            if frame.shape[1] != len(columns):
                raise ParseError(
                    path,
                    f"expected {len(columns)} fields, found {frame.shape[1]}",
                    line=rows_seen + 2,
                )
            bad_rows = frame.isna().any(axis=1) | _is_blank(frame.iloc[:, name_index])
            if bad_rows.any():
                row_number = rows_seen + int(bad_rows.to_numpy().argmax())
                raise ParseError(
                    path,
                    f"expected {len(columns)} fields with a non-empty name",
                    line=row_number + 2,
                )

            for value in frame.iloc[:, name_index]:
                yield record_type(name=value.strip())
            rows_seen += len(frame)
