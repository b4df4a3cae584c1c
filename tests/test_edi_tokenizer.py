import pytest

from edi_tokenizer import Delimiters, data_to_rows, detect_delimiters, split_fields

pytestmark = pytest.mark.unit


def test_detect_delimiters_from_isa_header(isa_test_header: str):
    assert detect_delimiters(isa_test_header) == Delimiters(field="*", record="~")

def test_detect_delimiters_uses_first_row_of_a_list(isa_test_header: str):
    assert detect_delimiters([isa_test_header, "GS*IN~"]) == Delimiters(field="*", record="~")

def test_detect_delimiters_ignores_leading_whitespace(isa_test_header: str):
    assert detect_delimiters("\n  " + isa_test_header) == Delimiters(field="*", record="~")

@pytest.mark.parametrize("data", ["", None, [], "ISA*00*~", ["ISA*00*~", "GS*IN~"]])
def test_detect_delimiters_fails_on_short_input(data):
    assert detect_delimiters(data) is None

def test_data_to_rows_splits_on_record_delimiter(valid_810_edi_string: str):
    rows, delimiters = data_to_rows(valid_810_edi_string)
    assert delimiters == Delimiters(field="*", record="~")
    assert len(rows) == 7
    assert rows[0].startswith("ISA*00*")
    assert rows[3] == "BIG*20091214*28277779**3344"
    assert rows[-1] == "IEA*1*000000001"

def test_data_to_rows_strips_windows_line_endings(valid_810_edi_string: str):
    windows_edi = valid_810_edi_string.replace("~\n", "~\r\n")
    rows, _ = data_to_rows(windows_edi)
    assert len(rows) == 7
    assert all("\r" not in row and "\n" not in row for row in rows)

def test_data_to_rows_drops_blank_records(valid_810_edi_string: str):
    spaced_edi = valid_810_edi_string.replace("~\nGS", "~\n ~ ~\n  GS").replace("~\nST", "  ~  \nST")
    rows, _ = data_to_rows(spaced_edi)
    assert len(rows) == 7
    assert rows[1] == "GS*IN*84863*6129330000*20091214*1200*1*X*004010"

def test_data_to_rows_accepts_pre_split_rows(isa_test_header: str):
    rows, delimiters = data_to_rows([isa_test_header, "  GS*IN*1~\r\n", "", "   ", " ~ ", "ST*810*143~SE*1*143"])
    assert delimiters.record == "~"
    # Trailing terminators are dropped but rows are never re-split
    assert rows == [isa_test_header[:-1], "GS*IN*1", "ST*810*143~SE*1*143"]

def test_data_to_rows_with_newline_record_delimiter(isa_test_header: str):
    isa = isa_test_header.replace("*", "|")[:-1]
    edi = "\n".join([isa, "GS|IN|1", "ST|810|143", "", "SE|1|143", "GE|1|1", "IEA|1|000000001"])
    rows, delimiters = data_to_rows(edi)
    assert delimiters == Delimiters(field="|", record="\n")
    assert len(rows) == 6

def test_data_to_rows_yields_nothing_without_delimiters():
    assert data_to_rows("ST*810*143~SE*1*143~") == ([], None)
    assert data_to_rows(None) == ([], None)

def test_split_fields_keeps_positions_and_marks_blanks_absent():
    assert split_fields("BIG*20091214*28277779**3344", "*") == ["BIG", "20091214", "28277779", None, "3344"]

def test_split_fields_trims_each_field():
    assert split_fields(" N1* ST *   *333 2ND AVE ", "*") == ["N1", "ST", None, "333 2ND AVE"]

def test_split_fields_keeps_trailing_blank_field():
    assert split_fields("REF*IA*", "*") == ["REF", "IA", None]

def test_split_fields_keeps_separator_control_characters():
    assert split_fields("ISA*00*\x1f", "*") == ["ISA", "00", "\x1f"]
    assert split_fields("\x1cN1*\x1d*\x1e", "*") == ["\x1cN1", "\x1d", "\x1e"]

def test_split_fields_trims_whitespace_and_nul():
    assert split_fields("\tN1*\x00ST\x0b*\x0c", "*") == ["N1", "ST", None]

def test_data_to_rows_keeps_unit_separator_at_row_end(isa_test_header: str):
    isa = isa_test_header[:-2] + "\x1f~"
    rows, delimiters = data_to_rows(isa + "GS*IN*1~")

    assert delimiters == Delimiters(field="*", record="~")
    assert rows == [isa[:-1], "GS*IN*1"]
    assert split_fields(rows[0], "*")[16] == "\x1f"
