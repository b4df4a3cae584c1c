import logging
import re
from typing import Optional

from lxml import etree

from cdm import CdmDocument, CdmGroupSegment, CdmInterchange, CdmTransactionSet, FieldList, field_at

logger = logging.getLogger(__name__)

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>'
XML_DECLARATION = re.compile(r'<\?[^?]*\?>\n*')
TEST_INDICATORS = ('T', 't')


def _document_type(interchange: CdmInterchange) -> str:
    if interchange.group_segments and interchange.group_segments[0].transaction_sets:
        return interchange.group_segments[0].transaction_sets[0].doc_type or ""
    return ""


def segment_to_xml(name: str, fields: Optional[FieldList]) -> etree._Element:
    """
    Creates a node for a segment with one child per field, named by position.

        <N1>
          <N101>ST</N101>
          <N102>333 2ND AVE</N102>
          <N103/>
        </N1>

    Absent fields become empty elements; lxml escapes text content.
    """
    node = etree.Element(name)
    for position, value in enumerate(fields or [], start=1):
        child = etree.SubElement(node, f"{name}{position:02d}")
        if value:
            child.text = value
    return node


def _context_fields(root: etree._Element, interchange: CdmInterchange) -> None:
    # Routing data for downstream consumers, ahead of the body.
    env = 'TEST' if field_at(interchange.fields, 14) in TEST_INDICATORS else 'PROD'
    context = (
        ('env', env),
        ('sender_id', field_at(interchange.fields, 5)),
        ('receiver_id', field_at(interchange.fields, 7)),
        ('number_of_groups', field_at(interchange.footer_fields, 0)),
    )
    for tag, value in context:
        etree.SubElement(root, tag).text = value


def _transaction_to_xml(transaction: CdmTransactionSet) -> etree._Element:
    node = segment_to_xml('ST', transaction.fields)
    for segment in transaction.segments:
        node.append(segment_to_xml(segment.name, segment.fields))
    return node


def _group_to_xml(group: CdmGroupSegment) -> etree._Element:
    node = segment_to_xml('GS', group.fields)
    for transaction in group.transaction_sets:
        node.append(_transaction_to_xml(transaction))
        node.append(segment_to_xml('SE', transaction.footer_fields))
    return node


def _body_to_xml(root: etree._Element, interchange: CdmInterchange) -> None:
    isa = segment_to_xml('ISA', interchange.fields)
    for group in interchange.group_segments:
        isa.append(_group_to_xml(group))
        isa.append(segment_to_xml('GE', group.footer_fields))
    root.append(isa)
    root.append(segment_to_xml('IEA', interchange.footer_fields))


def serialize_document(document: CdmDocument, indent: bool = True, include_header: bool = True) -> Optional[str]:
    """
    Renders the first interchange of a parsed document as XML.

        <?xml version="1.0" encoding="UTF-8"?>
        <edi_810>
          <env>PROD</env>
          <sender_id>84863</sender_id>
          <receiver_id>6129330000</receiver_id>
          <number_of_groups>1</number_of_groups>
          <ISA>
            <ISA01>00</ISA01>
            <ISA02/>
            ...

    Returns None if the document has not been parsed or cannot be written as XML.
    """
    if not document.parsed:
        logger.warning("Cannot serialize a document that has not been parsed.")
        return None
    interchange = document.interchange
    if interchange is None:
        logger.warning("Cannot serialize a document without an interchange.")
        return None

    try:
        root = etree.Element(f"edi_{_document_type(interchange)}")
        _context_fields(root, interchange)
        _body_to_xml(root, interchange)
        body = etree.tostring(root, encoding='unicode', pretty_print=indent)
    except ValueError as e:
        # Control characters in field values and invalid segment names cannot be written as XML.
        logger.error(f"Could not serialize document to XML: {e}")
        return None

    xml_text = f"{XML_HEADER}\n{body}"
    if not include_header:
        xml_text = XML_DECLARATION.sub('', xml_text, count=1)
    logger.debug(f"Serialized document to {len(xml_text)} characters of XML.")
    return xml_text
