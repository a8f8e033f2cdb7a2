from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.upload.models import FileBlob
from src.upload.slots import FileSlotManager


def test_slots_start_empty():
    slots = FileSlotManager()

    assert slots.missing_slots() == ["teacher", "sub"]
    assert not slots.all_slots_filled()


def test_set_and_clear_slot():
    slots = FileSlotManager()
    roster = FileBlob(name="roster.xlsx", content=b"abc")

    slots.set_slot("teacher", roster)
    assert slots.get("teacher") is roster
    assert slots.missing_slots() == ["sub"]

    slots.set_slot("sub", FileBlob(name="notices.xlsx", content=b"12345"))
    assert slots.all_slots_filled()

    slots.clear_slot("teacher")
    assert slots.get("teacher") is None
    assert not slots.all_slots_filled()


def test_set_slot_overwrites_without_validating_extension():
    slots = FileSlotManager()
    slots.set_slot("sub", FileBlob(name="notices.xlsx", content=b"1"))
    replacement = FileBlob(name="notes.csv", content=b"22")

    slots.set_slot("sub", replacement)

    assert slots.get("sub") is replacement
    assert replacement.byte_size == 2


def test_unknown_slot_rejected():
    slots = FileSlotManager()
    with pytest.raises(KeyError):
        slots.set_slot("timetable", None)


def test_multipart_files_use_service_field_names():
    slots = FileSlotManager()
    slots.set_slot("teacher", FileBlob(name="roster.xlsx", content=b"r"))
    slots.set_slot("sub", FileBlob(name="notices.xlsx", content=b"s"))

    files = slots.multipart_files()

    assert set(files) == {"teacher_file", "sub_file"}
    assert files["teacher_file"][0] == "roster.xlsx"
    assert files["sub_file"][1] == b"s"


def test_blob_from_path(tmp_path):
    path = tmp_path / "roster.xlsx"
    path.write_bytes(b"workbook-bytes")

    blob = FileBlob.from_path(path)

    assert blob.name == "roster.xlsx"
    assert blob.byte_size == len(b"workbook-bytes")
    assert blob.extension == ".xlsx"
