from __future__ import annotations

from barcode_db.models.barcode_record import RecordPatch
from barcode_db.services.registry import Registry
from barcode_db.services.selection import SelectionSet


def _registry(make_record) -> Registry:
    reg = Registry()
    reg.commit([make_record(f"ICON000000000000{i}", indent_number="old") for i in range(1, 5)])
    return reg


def test_toggle_and_set_checked():
    sel = SelectionSet()
    assert sel.toggle("A") is True
    assert "A" in sel
    assert sel.toggle("A") is False
    assert len(sel) == 0
    sel.set_checked("B", True)
    sel.set_checked("B", True)
    sel.set_checked("C", False)
    assert sel.barcodes == frozenset({"B"})


def test_select_all_uses_filtered_rows(make_record):
    reg = _registry(make_record)
    sel = SelectionSet({"ICON0000000000004"})
    sel.select_all(reg.search("0000000000001"))
    assert sel.barcodes == frozenset({"ICON0000000000001"})
    sel.select_all(reg.records, checked=False)
    assert len(sel) == 0


def test_apply_bulk_edit_changes_selected_and_clears(make_record):
    reg = _registry(make_record)
    sel = SelectionSet({"ICON0000000000001", "ICON0000000000003"})
    changed = sel.apply_bulk_edit(reg, RecordPatch(indent_number="new"))
    assert changed == 2
    assert [r.indent_number for r in reg] == ["new", "old", "new", "old"]
    assert len(sel) == 0
