"""Tests for sheetfit.document and sheetfit.sheet — sessions, sheets, dimensions."""
import pytest

from sheetfit.config import LayoutSettings
from sheetfit.document import LayoutDocument
from sheetfit.errors import AppError, CLOSED, SHEET_NOT_FOUND
from sheetfit.icons import icon_keys
from sheetfit.models import FileFormat, FileResource, ImageFormat, ImageResource, Position
from sheetfit.sheet import SheetLayout


# ══════════════════════════════════════════════════════════════════════════════
# DOCUMENT
# ══════════════════════════════════════════════════════════════════════════════

def test_new_document_has_one_active_sheet(doc, model):
    assert isinstance(doc.active_sheet, SheetLayout)
    assert doc.sheet_names() == ["Sheet1"]
    assert model.count("create_sheet") == 1


def test_icons_are_preregistered(doc, model):
    assert len(icon_keys()) == 7
    assert doc.image_keys() == set(icon_keys())
    assert model.count("register_binary_asset") == 7
    assert all(fmt is ImageFormat.PNG for _, _, fmt in model.assets)
    assert doc.file_keys() == set()


@pytest.mark.parametrize("fmt", list(FileFormat))
def test_every_file_format_has_an_icon(doc, fmt):
    assert doc.icon_handle(fmt) is not None


def test_add_and_select_sheets(doc):
    assert doc.add_sheet() is doc
    doc.add_sheet()
    second = doc.select_sheet(1)
    assert doc.active_sheet is second
    assert doc.sheet_index(second) == 1
    assert doc.sheet_names() == ["Sheet1", "Sheet2", "Sheet3"]


def test_select_missing_sheet(doc):
    with pytest.raises(AppError) as ei:
        doc.select_sheet(3)
    assert ei.value.code == SHEET_NOT_FOUND
    assert ei.value.details == {"index": 3, "sheet_count": 1}
    with pytest.raises(AppError):
        doc.select_sheet(-1)


def test_sheet_index_of_foreign_sheet(doc, model_factory, settings):
    other = LayoutDocument(model=model_factory(), settings=settings)
    assert doc.sheet_index(other.active_sheet) == -1


def test_close_is_idempotent_and_blocks_use(doc, model):
    doc.close()
    doc.close()
    assert model.count("close") == 1
    for call in (doc.add_sheet, doc.serialize, lambda: doc.select_sheet(0), lambda: doc.active_sheet):
        with pytest.raises(AppError) as ei:
            call()
        assert ei.value.code == CLOSED


def test_sheets_and_cells_from_before_close_are_blocked(doc, model, make_png):
    sheet = doc.active_sheet
    cell = sheet.select_cell(0, 0).append_text("abc")
    doc.close()
    writes = (model.count("set_cell_text"), model.count("set_row_height"), len(model.drawings))

    image = ImageResource(make_png(10, 10), ImageFormat.PNG, "dot")
    file = FileResource(b"data", FileFormat.TEXT, "a.txt")
    calls = [
        lambda: cell.append_text("after close"),
        lambda: cell.append_image(image),
        lambda: cell.append_file(file),
        lambda: cell.place_image(image, Position(0, 0, 1, 1)),
        lambda: cell.place_file(file, Position(0, 0, 1, 1)),
        lambda: cell.set_bold(),
        lambda: cell.set_cell_style(cell.style),
        lambda: cell.set_width_in_pixels(100),
        lambda: cell.set_height_in_points(30),
        lambda: sheet.select_cell(1, 1),
        lambda: sheet.merge(0, 1, 0, 1),
        lambda: sheet.set_name("Late"),
        lambda: sheet.set_default_column_width(10),
        lambda: sheet.set_default_row_height_in_points(20),
    ]
    for call in calls:
        with pytest.raises(AppError) as ei:
            call()
        assert ei.value.code == CLOSED

    assert cell.text == "abc"
    assert (model.count("set_cell_text"), model.count("set_row_height"), len(model.drawings)) == writes


def test_serialize_and_close(doc, model):
    assert doc.serialize_and_close() == b"recorded"
    assert model.count("close") == 1


def test_context_manager_closes(model, settings):
    with LayoutDocument(model=model, settings=settings) as d:
        d.active_sheet.select_cell(0, 0).append_text("abc")
    assert model.count("close") == 1


def test_icon_dir_override(tmp_path, model, make_png):
    custom = make_png(16, 16, (1, 2, 3))
    (tmp_path / "icon_pdf.png").write_bytes(custom)
    settings = LayoutSettings(icon_dir=str(tmp_path))
    LayoutDocument(model=model, settings=settings)

    payloads = [payload for _, payload, _ in model.assets]
    assert payloads[icon_keys().index("icon_pdf.png")] == custom
    assert payloads.count(custom) == 1


def test_default_model_is_openpyxl(settings):
    from sheetfit.xlsx import OpenpyxlDocument

    with LayoutDocument(settings=settings) as d:
        assert isinstance(d.model, OpenpyxlDocument)


# ══════════════════════════════════════════════════════════════════════════════
# SHEET
# ══════════════════════════════════════════════════════════════════════════════

def test_sheet_name(sheet):
    sheet.set_name("Report")
    assert sheet.name == "Report"


def test_default_dimensions(sheet):
    assert sheet.column_width_native(0) == 2048
    assert sheet.column_width_pixels(0) == 56
    assert sheet.row_height_pixels(0) == 20


def test_set_default_column_width(sheet):
    sheet.set_default_column_width(10)
    assert sheet.handle["default_column"] == 10
    assert sheet.column_width_pixels(4) == 70


def test_set_default_column_width_in_pixels(sheet):
    sheet.set_default_column_width_in_pixels(50)
    assert sheet.handle["default_column"] == 7


def test_set_default_row_height(sheet):
    sheet.set_default_row_height_in_pixels(40)
    assert sheet.handle["default_row"] == 30.0
    assert sheet.row_height_pixels(9) == 40


def test_explicit_dimensions(sheet):
    sheet.set_column_width(2, 8)
    assert sheet.handle["columns"][2] == 2231
    sheet.set_column_width_in_pixels(3, 200)
    assert sheet.column_width_native(3) == 7314
    sheet.set_row_height_in_points(1, 30)
    assert sheet.handle["rows"][1] == 600
    assert sheet.row_height_pixels(1) == 40


def test_grow_row_only_increases(sheet, model):
    assert sheet.grow_row(0, 10) is False
    assert sheet.grow_row(0, 20) is False
    assert sheet.grow_row(0, 36) is True
    assert sheet.grow_row(0, 36) is False
    assert model.count("set_row_height") == 1


def test_grow_row_reads_back_truncated_height(sheet, model):
    # 18px is stored as 13pt and reads back as 17px
    sheet.set_row_height_in_pixels(0, 10)
    sheet.grow_row(0, 18)
    assert sheet.row_height_pixels(0) == 17


def test_merge(sheet):
    sheet.merge(0, 1, 0, 2).merge_refs("D1", "E4")
    assert sheet.handle["merged"] == [(0, 1, 0, 2), (0, 3, 3, 4)]


def test_merge_and_select(sheet):
    cell = sheet.merge_and_select(2, 3, 1, 2)
    assert (cell.row, cell.col) == (2, 1)
    assert sheet.handle["merged"] == [(2, 3, 1, 2)]


def test_sheet_finish_returns_document(doc, sheet):
    assert sheet.finish() is doc
