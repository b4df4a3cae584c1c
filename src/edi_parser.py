import logging
from typing import Callable, Dict, List, Optional

from cdm import CdmDocument, CdmGroupSegment, CdmInterchange, CdmSegment, CdmTransactionSet, CdmValidationError, FieldList, field_at
from edi_errors import EdiParseError, EmptyDocumentError, MalformedSegmentOrderError
from edi_tokenizer import Delimiters, EdiData, data_to_rows, split_fields
from xml_serializer import serialize_document

logger = logging.getLogger(__name__)

SegmentHandler = Callable[[str, FieldList, int], None]


class _BuildCursor:
    """The envelopes currently open while parsing. Discarded once parsing ends."""

    def __init__(self, document: CdmDocument):
        self.document = document
        self.interchange: Optional[CdmInterchange] = None
        self.group: Optional[CdmGroupSegment] = None
        self.transaction: Optional[CdmTransactionSet] = None


class EdiParser:
    """
    Builds a CdmDocument from an EDI document and renders it as XML.

    Typical usage:

        parser = EdiParser(edi_string)
        parser.parse()
        xml_string = parser.serialize()
    """

    def __init__(self, data: EdiData = None):
        self.document = CdmDocument()
        self.rows: List[str] = []
        self.delimiters: Optional[Delimiters] = None
        self._cursor: Optional[_BuildCursor] = None
        self._dispatch: Dict[str, SegmentHandler] = {
            'ISA': self._open_interchange,
            'IEA': self._close_interchange,
            'GS': self._open_group,
            'GE': self._close_group,
            'ST': self._open_transaction,
            'SE': self._close_transaction,
        }
        if data is not None:
            self.load(data)

    # --- Loading ---

    def load(self, data: EdiData) -> None:
        """Loads an EDI document from a string or a list of rows. Parsing happens in parse()."""
        self.document = CdmDocument()
        self.rows, self.delimiters = data_to_rows(data)
        logger.debug(f"Loaded {len(self.rows)} rows.")

    def load_file(self, path: str) -> None:
        with open(path, 'r', encoding='utf-8') as f:
            self.load(f.read())

    # --- Parsing ---

    def parse(self) -> bool:
        """
        Parses the loaded rows into self.document.

        Returns True on success. Raises EmptyDocumentError when there is nothing
        to parse and MalformedSegmentOrderError when a segment shows up outside
        of its envelope; in both cases self.document is left empty and unparsed.
        """
        document = CdmDocument()
        self.document = document
        try:
            if not self.rows:
                raise EmptyDocumentError("No data to parse.")

            self._cursor = _BuildCursor(document)
            for line_number, row in enumerate(self.rows, start=1):
                self._process_row(row, line_number)

            if not document.interchanges:
                raise EmptyDocumentError("No ISA interchange found in document.")
        except EdiParseError as e:
            logger.error(f"EDI parsing failed: {e}")
            self.document = CdmDocument()
            raise
        finally:
            self._cursor = None

        document.warnings.extend(self._collect_unclosed(document))
        self._log_summary(document)
        document.parsed = True
        return True

    def _process_row(self, row: str, line_number: int) -> None:
        fields = split_fields(row, self.delimiters.field)
        name, args = fields[0], fields[1:]
        if name is None:
            raise EdiParseError(f"Row {line_number} has no segment name.", line_number=line_number)

        logger.debug(f"[ROW {line_number}/{len(self.rows)}] '{name}' with {len(args)} fields")
        handler = self._dispatch.get(name, self._add_segment)
        handler(name, args, line_number)

    def _require(self, envelope, missing: str, name: str, line_number: int):
        if envelope is None:
            raise MalformedSegmentOrderError(name, missing=missing, line_number=line_number)
        return envelope

    def _open_interchange(self, name: str, fields: FieldList, line_number: int) -> None:
        cursor = self._cursor
        cursor.interchange = CdmInterchange(fields=fields)
        cursor.group = cursor.transaction = None
        cursor.document.interchanges.append(cursor.interchange)

    def _close_interchange(self, name: str, fields: FieldList, line_number: int) -> None:
        self._require(self._cursor.interchange, 'interchange (ISA)', name, line_number).footer_fields = fields

    def _open_group(self, name: str, fields: FieldList, line_number: int) -> None:
        cursor = self._cursor
        interchange = self._require(cursor.interchange, 'interchange (ISA)', name, line_number)
        cursor.group = CdmGroupSegment(fields=fields)
        cursor.transaction = None
        interchange.group_segments.append(cursor.group)

    def _close_group(self, name: str, fields: FieldList, line_number: int) -> None:
        self._require(self._cursor.group, 'group segment (GS)', name, line_number).footer_fields = fields

    def _open_transaction(self, name: str, fields: FieldList, line_number: int) -> None:
        cursor = self._cursor
        group = self._require(cursor.group, 'group segment (GS)', name, line_number)
        cursor.transaction = CdmTransactionSet(fields=fields)
        group.transaction_sets.append(cursor.transaction)

    def _close_transaction(self, name: str, fields: FieldList, line_number: int) -> None:
        self._require(self._cursor.transaction, 'transaction set (ST)', name, line_number).footer_fields = fields

    def _add_segment(self, name: str, fields: FieldList, line_number: int) -> None:
        cursor = self._cursor
        if cursor.interchange is None:
            logger.warning(f"Ignoring segment '{name}' at row {line_number}: no interchange has been opened.")
            return
        transaction = self._require(cursor.transaction, 'transaction set (ST)', name, line_number)
        transaction.segments.append(CdmSegment(name=name, fields=fields))

    def _collect_unclosed(self, document: CdmDocument) -> List[CdmValidationError]:
        warnings: List[CdmValidationError] = []
        for interchange in document.interchanges:
            if interchange.footer_fields is None:
                warnings.append(CdmValidationError(
                    message=f"Unclosed interchange {field_at(interchange.fields, 12)}: missing IEA.", segment_name='ISA'))
            for group in interchange.group_segments:
                if group.footer_fields is None:
                    warnings.append(CdmValidationError(
                        message=f"Unclosed group segment {field_at(group.fields, 5)}: missing GE.", segment_name='GS'))
                for transaction in group.transaction_sets:
                    if transaction.footer_fields is None:
                        warnings.append(CdmValidationError(
                            message=f"Unclosed transaction set {field_at(transaction.fields, 1)}: missing SE.", segment_name='ST'))
        return warnings

    def _log_summary(self, document: CdmDocument) -> None:
        if document.warnings:
            logger.warning("--- EDI PARSE SUMMARY: WARNINGS FOUND ---")
            for warning in document.warnings:
                logger.warning(f"  - {warning.message}")
            logger.warning("--- END OF SUMMARY ---")
        else:
            groups = sum(len(i.group_segments) for i in document.interchanges)
            logger.info(f"EDI parsed: {len(self.rows)} rows, {len(document.interchanges)} interchange(s), {groups} group(s).")

    # --- Output ---

    def serialize(self, indent: bool = True, include_header: bool = True) -> Optional[str]:
        """Returns the document as an XML string, or None if it has not been parsed."""
        return serialize_document(self.document, indent=indent, include_header=include_header)

    to_xml = serialize

    # --- Query accessors ---

    @property
    def interchange(self) -> Optional[CdmInterchange]:
        return self.document.interchange

    def groups(self) -> List[CdmGroupSegment]:
        interchange = self.interchange
        return interchange.group_segments if interchange else []

    def transactions(self, group_index: int = 0) -> Optional[List[CdmTransactionSet]]:
        """Returns the transaction sets of a group, or None if there is no such group."""
        if group_index < 1:
            group_index = 0
        groups = self.groups()
        if group_index < len(groups):
            return groups[group_index].transaction_sets
        return None

    def find_transaction_by_number(self, control_number) -> Optional[CdmTransactionSet]:
        """
        Finds a transaction set via its control number, e.g. 143719 in ST*810*143719~.

        Any ST field is compared, not just ST02. The first match wins.
        """
        wanted = str(control_number)
        for group in self.groups():
            for transaction in group.transaction_sets:
                if any(f is not None and f == wanted for f in transaction.fields):
                    return transaction
        return None

    def doc_type(self, index: int = 0, group_index: int = 0) -> str:
        """Returns ST01 of the given transaction set, or an empty string."""
        if index < 1:
            index = 0
        transactions = self.transactions(group_index)
        if transactions and index < len(transactions):
            return transactions[index].doc_type or ""
        return ""

    def row_count(self) -> int:
        return len(self.rows)
