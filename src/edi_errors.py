from typing import Optional


class EdiParseError(ValueError):
    """Base class for fatal errors raised while building the document model."""

    def __init__(self, message: str, segment_name: Optional[str] = None, line_number: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.segment_name = segment_name
        self.line_number = line_number


class EmptyDocumentError(EdiParseError):
    """No rows to process, usually because delimiters could not be detected."""


class MalformedSegmentOrderError(EdiParseError):
    """A segment arrived before the envelope it belongs to was opened."""

    def __init__(self, segment_name: Optional[str], missing: str, line_number: Optional[int] = None):
        message = f"Segment '{segment_name}' at row {line_number} has no open {missing}."
        super().__init__(message, segment_name=segment_name, line_number=line_number)
        self.missing = missing
