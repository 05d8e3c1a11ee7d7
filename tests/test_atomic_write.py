import os

import pytest

from openapi_snapshot import atomic_write
from openapi_snapshot.atomic_write import write_atomic
from openapi_snapshot.errors import IoError


def test_creates_parent_dirs_and_writes(tmp_path):
    dest = tmp_path / "nested" / "dir" / "openapi.json"
    write_atomic(dest, '{"paths": {}}')
    assert dest.read_text(encoding="utf-8") == '{"paths": {}}'
    assert os.listdir(dest.parent) == ["openapi.json"]


def test_replaces_existing_content(tmp_path):
    dest = tmp_path / "openapi.json"
    dest.write_text("old", encoding="utf-8")
    write_atomic(dest, "new")
    assert dest.read_text(encoding="utf-8") == "new"


def test_directory_destination_is_io_error(tmp_path):
    with pytest.raises(IoError):
        write_atomic(tmp_path, "{}")
    leftovers = [p for p in tmp_path.parent.iterdir() if p.name.startswith(f".{tmp_path.name}.")]
    assert leftovers == []


def test_failed_rename_leaves_destination_untouched(tmp_path, monkeypatch):
    dest = tmp_path / "openapi.json"
    dest.write_text("previous", encoding="utf-8")

    def boom(src, dst):
        raise OSError("disk went away")

    monkeypatch.setattr(atomic_write.os, "replace", boom)
    with pytest.raises(IoError) as exc:
        write_atomic(dest, "next")
    assert "move" in str(exc.value)
    assert dest.read_text(encoding="utf-8") == "previous"
    assert os.listdir(tmp_path) == ["openapi.json"]


def test_temp_file_is_never_reused(tmp_path, monkeypatch):
    dest = tmp_path / "openapi.json"
    taken = tmp_path / ".openapi.json.taken.tmp"
    taken.write_text("someone else's", encoding="utf-8")
    monkeypatch.setattr(atomic_write, "_temp_path_for", lambda path: taken)
    with pytest.raises(IoError):
        write_atomic(dest, "{}")
    assert taken.read_text(encoding="utf-8") == "someone else's"
    assert not dest.exists()


def test_write_outputs_routes_payloads(tmp_path, capsys):
    from openapi_snapshot.config import Config
    from openapi_snapshot.output import OutputPayloads, write_output, write_outputs

    out = tmp_path / "openapi.json"
    outline = tmp_path / "openapi.outline.json"
    write_outputs(Config(out=out, outline_out=outline), OutputPayloads(primary="{}", outline='{"paths":{}}'))
    assert out.read_text(encoding="utf-8") == "{}"
    assert outline.read_text(encoding="utf-8") == '{"paths":{}}'

    write_output(Config(out=None, stdout=True), '{"openapi":"3.0.3"}')
    assert capsys.readouterr().out == '{"openapi":"3.0.3"}\n'
