import pytest

from escopo.extractors.excel import reader as rd
from escopo.extractors.excel.reader import ExcelReader, MalformedWorkbookError


def test_read_workbook_preserves_sheet_order_and_cells(make_workbook):
    data = make_workbook(
        {
            "Índice": [["Sumário"]],
            "Matemática": [[None, "Ano", 7], ["x", None, 2.5]],
            "Ciências": [],
        }
    )
    sheets = ExcelReader().read_workbook(data)

    assert [s.name for s in sheets] == ["Índice", "Matemática", "Ciências"]
    assert sheets[1].rows == [[None, "Ano", 7], ["x", None, 2.5]]
    assert len(sheets[2]) == 0 or all(v is None for row in sheets[2].rows for v in row)


def test_list_sheet_names(make_workbook):
    data = make_workbook({"A": [["1"]], "B": [["2"]]})
    names, backend = ExcelReader().list_sheet_names(data)
    assert names == ["A", "B"]
    assert backend == "openpyxl"


@pytest.mark.parametrize(
    "payload",
    [b"", b"not a workbook at all", b"PK\x03\x04this is not really a zip"],
)
def test_malformed_buffers_raise(payload):
    with pytest.raises(MalformedWorkbookError):
        ExcelReader().read_workbook(payload)


def test_detect_format():
    assert ExcelReader.detect_format(b"PK\x03\x04rest") == "xlsx"
    assert ExcelReader.detect_format(rd.OLE2_MAGIC + b"\x00" * 8) == "xls"


def test_xls_buffer_uses_xlrd(monkeypatch):
    called = {"xlrd": False, "openpyxl": False}

    class DummySheet:
        name = "História"
        nrows = 2

        def row_values(self, ri):
            return [["Ano", "Bimestre"], ["6º ano", "1"]][ri]

    class DummyBook:
        def sheets(self):
            return [DummySheet()]

        def sheet_names(self):
            return ["História"]

    def fake_open_workbook(file_contents=None, **kwargs):
        called["xlrd"] = True
        assert file_contents.startswith(rd.OLE2_MAGIC)
        return DummyBook()

    def fake_load_workbook(*args, **kwargs):
        called["openpyxl"] = True
        raise AssertionError("openpyxl should not be called for .xls")

    import xlrd
    monkeypatch.setattr(xlrd, "open_workbook", fake_open_workbook)
    monkeypatch.setattr(rd, "load_workbook", fake_load_workbook)

    data = rd.OLE2_MAGIC + b"\x00" * 32
    sheets = ExcelReader().read_workbook(data)

    assert [s.name for s in sheets] == ["História"]
    assert sheets[0].rows == [["Ano", "Bimestre"], ["6º ano", "1"]]
    assert called == {"xlrd": True, "openpyxl": False}


def test_xlrd_errors_become_malformed(monkeypatch):
    import xlrd

    def broken(file_contents=None, **kwargs):
        raise xlrd.XLRDError("Unsupported format, or corrupt file")

    monkeypatch.setattr(xlrd, "open_workbook", broken)
    with pytest.raises(MalformedWorkbookError):
        ExcelReader().read_workbook(rd.OLE2_MAGIC + b"\x00" * 32)
