import base64
import json
from unittest.mock import MagicMock

import pytest

from blobbify.blob import Blob
from blobbify.registry import default_registry
from tools import blobassemble


def write_chunk(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(base64.b64encode(data).decode("ascii"), encoding="ascii")
    return str(path)


def test_assemble_appends_in_argument_order(tmp_path):
    first = write_chunk(tmp_path, "a.b64", b"hello ")
    second = write_chunk(tmp_path, "b.b64", b"world")
    out = tmp_path / "out.bin"

    assert blobassemble.main([first, second, "-o", str(out)]) == 0
    assert out.read_bytes() == b"hello world"


def test_assemble_with_positions(tmp_path):
    first = write_chunk(tmp_path, "a.b64", b"second")
    second = write_chunk(tmp_path, "b.b64", b"first-")
    out = tmp_path / "out.bin"

    argv = [first, second, "--position", "2", "--position", "1", "-o", str(out)]
    assert blobassemble.main(argv) == 0
    assert out.read_bytes() == b"first-second"


def test_assemble_duplicate_positions_fail(tmp_path, capsys):
    first = write_chunk(tmp_path, "a.b64", b"x")
    second = write_chunk(tmp_path, "b.b64", b"y")

    argv = [first, second, "--position", "1", "--position", "1", "-o", str(tmp_path / "o")]
    assert blobassemble.main(argv) == 1
    assert "[error]" in capsys.readouterr().err


def test_assemble_invalid_base64(tmp_path, capsys):
    bad = tmp_path / "bad.b64"
    bad.write_text("!!!!", encoding="ascii")

    assert blobassemble.main([str(bad), "-o", str(tmp_path / "o")]) == 1
    assert "not valid Base64" in capsys.readouterr().err


def test_assemble_missing_file(tmp_path, capsys):
    assert blobassemble.main([str(tmp_path / "nope.b64")]) == 1
    assert "[error]" in capsys.readouterr().err


def test_position_count_must_match(tmp_path):
    chunk = write_chunk(tmp_path, "a.b64", b"x")
    with pytest.raises(SystemExit):
        blobassemble.parse_args([chunk, chunk, "--position", "1"])


def test_describe_prints_turtle(tmp_path, capsys):
    chunk = write_chunk(tmp_path, "a.b64", b"{}")
    out = tmp_path / "out.json"

    argv = [chunk, "--mime-type", "application/json", "--describe", "-o", str(out)]
    assert blobassemble.main(argv) == 0
    err = capsys.readouterr().err
    assert 'dcterms:format "application/json"' in err
    assert "schema:contentSize 2" in err


def test_describe_json_names_object_url(tmp_path, capsys):
    chunk = write_chunk(tmp_path, "a.b64", b"abc")

    assert blobassemble.main([chunk, "--describe", "json", "-o", str(tmp_path / "o")]) == 0
    summary = json.loads(capsys.readouterr().err)
    assert summary["uri"].startswith("blob:null/")
    assert summary["size"] == 3
    assert summary["uri"] not in default_registry


def test_unwritable_output_fails_cleanly(tmp_path, capsys):
    chunk = write_chunk(tmp_path, "a.b64", b"x")
    out = tmp_path / "missing-dir" / "out.bin"

    assert blobassemble.main([chunk, "-o", str(out)]) == 1
    assert "[error]" in capsys.readouterr().err


def test_write_blob_streams_in_width_reads():
    stream = MagicMock()
    blobassemble.write_blob(Blob([b"0123456789"]), stream, 4)

    written = [call.args[0] for call in stream.write.call_args_list]
    assert written == [b"0123", b"4567", b"89"]
    stream.flush.assert_called_once()
