import logging
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

# The ISA segment is fixed width, so its delimiters sit at known offsets.
ISA_LENGTH = 106
FIELD_DELIMITER_OFFSET = 3
RECORD_DELIMITER_OFFSET = 105

# Characters trimmed from rows and fields. 0x1C-0x1F are kept, they are used as separators.
WHITESPACE = " \t\r\n\v\f\0"

EdiData = Union[str, Sequence[str], None]


class Delimiters(NamedTuple):
    field: str
    record: str


def _first_row(data: EdiData) -> str:
    if isinstance(data, str):
        return data
    if data:
        return data[0] or ""
    return ""


def detect_delimiters(data: EdiData) -> Optional[Delimiters]:
    """
    Recovers the field and record delimiters from the ISA header.

    The field delimiter is the 4th character and the record delimiter the 106th
    character of the first row. Returns None when the first row is too short.
    """
    first_row = _first_row(data).lstrip(WHITESPACE)
    if len(first_row) < ISA_LENGTH:
        logger.warning(f"Could not detect delimiters: first row is {len(first_row)} characters, expected at least {ISA_LENGTH}.")
        return None

    field = first_row[FIELD_DELIMITER_OFFSET]
    record = first_row[RECORD_DELIMITER_OFFSET]
    logger.debug(f"Delimiters detected: Field='{field}', Record='{record}'")
    return Delimiters(field=field, record=record)


def _clean_row(row: str) -> str:
    return row.replace("\r", "").replace("\n", "").strip(WHITESPACE)


def data_to_rows(data: EdiData) -> Tuple[List[str], Optional[Delimiters]]:
    """
    Turns an EDI document into a list of trimmed, non-empty rows.

    A string is split on the detected record delimiter; a sequence of strings is
    taken as already split. Returns an empty list when no delimiters are found.
    """
    delimiters = detect_delimiters(data)
    if delimiters is None:
        return [], None

    if isinstance(data, str):
        raw_rows: Sequence[str] = data.split(delimiters.record)
        rows = [clean for clean in (_clean_row(row) for row in raw_rows) if clean]
    else:
        raw_rows = [row for row in data if row is not None]
        rows = []
        for row in raw_rows:
            clean = _clean_row(row)
            # Pre-split rows may still carry their terminator
            if clean.endswith(delimiters.record):
                clean = clean[:-1].rstrip(WHITESPACE)
            if clean:
                rows.append(clean)

    logger.debug(f"Tokenized {len(rows)} rows from {len(raw_rows)} raw records.")
    return rows, delimiters


def split_fields(row: str, field_delimiter: str) -> List[Optional[str]]:
    """Splits a row into trimmed fields; blank fields become None."""
    return [field.strip(WHITESPACE) or None for field in row.strip(WHITESPACE).split(field_delimiter)]
