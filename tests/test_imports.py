"""Smoke tests — verify all sheetfit modules import without error."""


def test_sheetfit_modules_import():
    import sheetfit.cell
    import sheetfit.config
    import sheetfit.document
    import sheetfit.errors
    import sheetfit.fonts
    import sheetfit.icons
    import sheetfit.logging_utils
    import sheetfit.metrics
    import sheetfit.model
    import sheetfit.models
    import sheetfit.parsing
    import sheetfit.registry
    import sheetfit.sheet
    import sheetfit.units
    import sheetfit.xlsx
