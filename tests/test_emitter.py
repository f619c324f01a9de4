"""Go table emission."""
import io
import os
import stat

import pytest

from fbmsggen.backend.constants import LICENSE_HEADER
from fbmsggen.backend.emitter import (
    OutputWriteFailure, emit, format_entry, go_quote, write_table,
)
from fbmsggen.semantics.records import MessageRecord


def _render(records, **kwargs) -> str:
    out = io.StringIO()
    emit(records, out, **kwargs)
    return out.getvalue()


def _entry_lines(text: str):
    return [line for line in text.splitlines() if line.startswith("\t")]


def test_empty_table_is_a_valid_literal():
    text = _render([])
    assert text == (
        LICENSE_HEADER
        + "\npackage firebirdsql\n\nvar errmsgs = map[int]string{\n}\n"
    )


def test_header_is_reproduced_verbatim():
    text = _render([MessageRecord(1, "x")])
    assert text.startswith("/" + "*" * 76 + "\nThe contents of this file are subject to the Interbase Public\n")
    assert "*" * 77 + "/\n\npackage firebirdsql\n" in text


def test_scenario_entry_line():
    text = _render([MessageRecord(999, "Hello")])
    assert '\t999: "Hello\\n",\n' in text


def test_one_line_per_record_in_input_order():
    records = [MessageRecord(335544321 + i, f"message {i}") for i in range(25)]
    lines = _entry_lines(_render(records))
    assert len(lines) == 25
    assert lines[0] == '\t335544321: "message 0\\n",'
    assert lines[-1] == '\t335544345: "message 24\\n",'


def test_emit_returns_entry_count():
    assert emit([MessageRecord(1, "a"), MessageRecord(2, "b")], io.StringIO()) == 2


def test_duplicate_codes_are_all_written():
    lines = _entry_lines(_render([MessageRecord(7, "first"), MessageRecord(7, "second")]))
    assert lines == ['\t7: "first\\n",', '\t7: "second\\n",']


def test_custom_package_and_variable():
    text = _render([], package="firebird", variable="messages")
    assert "\npackage firebird\n" in text
    assert "var messages = map[int]string{\n}" in text


@pytest.mark.parametrize("text, expected", [
    ('say "hi"', '"say \\"hi\\""'),
    ("C:\\path", '"C:\\\\path"'),
    ("a\tb", '"a\\tb"'),
    ("bell\x07", '"bell\\a"'),
    ("nul\x00", '"nul\\x00"'),
    ("esc\x1b", '"esc\\x1b"'),
    ("@1 is not @2", '"@1 is not @2"'),
    ("naïve", '"naïve"'),
    ("raw \udcff", '"raw \\xff"'),
])
def test_go_quote(text, expected):
    assert go_quote(text) == expected


def test_existing_trailing_newline_is_not_doubled():
    assert format_entry(MessageRecord(1, "done\n")) == '\t1: "done\\n",\n'


def test_placeholders_are_opaque():
    assert format_entry(MessageRecord(5, "table @1 column %s")) == '\t5: "table @1 column %s\\n",\n'


def test_write_table_creates_file(tmp_path):
    target = tmp_path / "errmsgs.go"
    count = write_table([MessageRecord(335544321, "arithmetic exception")], target)

    assert count == 1
    content = target.read_text(encoding="utf-8")
    assert content.endswith('var errmsgs = map[int]string{\n\t335544321: "arithmetic exception\\n",\n}\n')
    assert stat.S_IMODE(os.stat(target).st_mode) == 0o644
    assert [p.name for p in tmp_path.iterdir()] == ["errmsgs.go"]


def test_write_table_overwrites(tmp_path):
    target = tmp_path / "errmsgs.go"
    target.write_text("stale", encoding="utf-8")
    write_table([], target)
    assert "stale" not in target.read_text(encoding="utf-8")


def test_write_table_missing_directory(tmp_path):
    target = tmp_path / "missing" / "errmsgs.go"
    with pytest.raises(OutputWriteFailure) as info:
        write_table([MessageRecord(1, "x")], target)
    assert info.value.code == "GE3001"
    assert str(target) in str(info.value)
    assert not target.exists()


def test_failed_write_keeps_previous_file(tmp_path):
    target = tmp_path / "errmsgs.go"
    target.write_text("previous", encoding="utf-8")

    def records():
        yield MessageRecord(1, "one")
        raise OSError(28, "No space left on device")

    with pytest.raises(OutputWriteFailure) as info:
        write_table(records(), target)

    assert info.value.reason == "No space left on device"
    assert target.read_text(encoding="utf-8") == "previous"
    assert [p.name for p in tmp_path.iterdir()] == ["errmsgs.go"]
