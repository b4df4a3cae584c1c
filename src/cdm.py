from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

# Canonical Data Model (CDM) for a parsed EDI document.
#
# ISA  Interchange      -> CdmInterchange
#   GS   Group Segment    -> CdmGroupSegment
#     ST   Transaction Set  -> CdmTransactionSet
#       BIG  Segment          -> CdmSegment
#     SE
#   GE
# IEA
#
# Field lists hold the values after the segment name, so fields[0] is XX01.
# A blank field is stored as None.

FieldList = List[Optional[str]]


class CdmValidationError(BaseModel):
    """Represents a non-fatal problem found while building the document."""
    message: str
    line_number: Optional[int] = None
    segment_name: Optional[str] = None


class CdmSegment(BaseModel):
    """A single segment inside a transaction set, e.g. BIG or REF."""
    model_config = ConfigDict(frozen=True)

    name: str
    fields: FieldList = Field(default_factory=list)


class CdmTransactionSet(BaseModel):
    """ST header fields, SE footer fields and the segments in between."""
    fields: FieldList = Field(default_factory=list)
    footer_fields: Optional[FieldList] = None
    segments: List[CdmSegment] = Field(default_factory=list)

    @property
    def doc_type(self) -> Optional[str]:
        """ST01 - Transaction Set Identifier Code."""
        return self.fields[0] if self.fields else None

    def find_segments(self, name: str) -> List[CdmSegment]:
        """Returns the segments with the given name (case insensitive), in document order."""
        wanted = name.lower()
        return [segment for segment in self.segments if segment.name.lower() == wanted]


class CdmGroupSegment(BaseModel):
    fields: FieldList = Field(default_factory=list)
    footer_fields: Optional[FieldList] = None
    transaction_sets: List[CdmTransactionSet] = Field(default_factory=list)


class CdmInterchange(BaseModel):
    """
    ISA header fields, IEA footer fields and the group segments.

    Notable ISA positions: fields[5] sender id, fields[7] receiver id,
    fields[14] test/production indicator.
    """
    fields: FieldList = Field(default_factory=list)
    footer_fields: Optional[FieldList] = None
    group_segments: List[CdmGroupSegment] = Field(default_factory=list)


class CdmDocument(BaseModel):
    interchanges: List[CdmInterchange] = Field(default_factory=list)
    parsed: bool = False
    warnings: List[CdmValidationError] = Field(default_factory=list)

    @property
    def interchange(self) -> Optional[CdmInterchange]:
        """Short cut to the first interchange."""
        return self.interchanges[0] if self.interchanges else None


def field_at(fields: Optional[FieldList], index: int) -> Optional[str]:
    """Returns fields[index], or None when the list is missing or too short."""
    if fields and index < len(fields):
        return fields[index]
    return None
