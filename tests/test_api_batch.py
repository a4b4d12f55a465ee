"""Batch decoding: per-file outcomes, output mirroring, fail-fast, workers."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import pytest

from srformats import api, registry
from srformats.api import (
    E_INTERNAL,
    E_IO,
    E_OUTPUT,
    DecodeOptions,
    decode_file,
    decode_many,
    inspect_file,
)
from srformats.decoding.errors import (
    E_TAG_MISMATCH,
    E_UNSUPPORTED_VERSION,
    DecodeError,
)
from srformats.formats import texture

from wire import effect_file, effect_node, signature, texture_file


@pytest.fixture()
def tree(tmp_path: Path) -> Path:
    root = tmp_path / "data"
    (root / "sub").mkdir(parents=True)
    (root / "fx.efp").write_bytes(effect_file(effect_node("root")))
    (root / "broken.bms").write_bytes(signature(b"JMXVBMS ", b"0999"))
    (root / "sub" / "tex.ddj").write_bytes(texture_file())
    (root / "sub" / "wrong.bsk").write_bytes(b"garbage-bytes")
    (root / "readme.txt").write_text("not an asset")
    return root


def test_scan_continues_past_failures(tree: Path):
    result = decode_many(DecodeOptions([tree]))
    names = [o.path.name for o in result.outcomes]
    assert names == ["broken.bms", "fx.efp", "tex.ddj", "wrong.bsk"]
    assert not result.ok
    codes = {o.path.name: o.error_code for o in result.outcomes}
    assert codes == {
        "broken.bms": E_UNSUPPORTED_VERSION,
        "fx.efp": None,
        "tex.ddj": None,
        "wrong.bsk": E_TAG_MISMATCH,
    }
    assert {o.format for o in result.decoded} == {"effect", "texture"}
    assert result.total_bytes == sum(o.path.stat().st_size for o in result.outcomes)
    assert result.summary().startswith("Scan summary: files=4 decoded=2 failed=2")


def test_pattern_filters_directory_members(tree: Path):
    result = decode_many(DecodeOptions([tree], pattern="*.ddj"))
    assert [o.path.name for o in result.outcomes] == ["tex.ddj"]
    assert result.ok


def test_explicit_file_is_always_decoded(tree: Path):
    result = decode_many(DecodeOptions([tree / "readme.txt"]))
    assert result.outcomes[0].error_code == E_TAG_MISMATCH


def test_missing_file_is_io_error(tmp_path: Path):
    result = decode_many(DecodeOptions([tmp_path / "nope.bms"]))
    outcome = result.outcomes[0]
    assert outcome.error_code == E_IO
    assert outcome.to_dict()["ok"] is False


def test_output_dir_mirrors_tree(tree: Path, tmp_path: Path):
    out = tmp_path / "out"
    result = decode_many(DecodeOptions([tree], output_dir=out))
    assert (out / "fx.efp.json").is_file()
    assert (out / "sub" / "tex.ddj.json").is_file()
    assert not (out / "broken.bms.json").exists()
    doc = json.loads((out / "fx.efp.json").read_text(encoding="utf-8"))
    assert doc["root"]["name"] == "root"
    assert {o.output for o in result.decoded} == {
        out / "fx.efp.json",
        out / "sub" / "tex.ddj.json",
    }


def test_yaml_output(tree: Path, tmp_path: Path):
    out = tmp_path / "out"
    opts = DecodeOptions(
        [tree], pattern="*.efp", output_dir=out, output_format="yaml"
    )
    decode_many(opts)
    assert "name: root" in (out / "fx.efp.yaml").read_text(encoding="utf-8")


def test_fail_fast_stops_at_first_failure(tree: Path):
    result = decode_many(DecodeOptions([tree], fail_fast=True))
    assert [o.path.name for o in result.outcomes] == ["broken.bms"]


def test_parallel_matches_serial(tree: Path):
    serial = decode_many(DecodeOptions([tree]))
    parallel = decode_many(DecodeOptions([tree], jobs=2))
    assert [o.to_dict() for o in parallel.outcomes] == [
        o.to_dict() for o in serial.outcomes
    ]


def test_decode_file_raises(tree: Path):
    with pytest.raises(DecodeError) as exc:
        decode_file(tree / "broken.bms")
    assert exc.value.code == E_UNSUPPORTED_VERSION
    assert decode_file(tree / "fx.efp").root.name == "root"


def test_inspect_file(tree: Path):
    info = inspect_file(tree / "sub" / "tex.ddj")
    assert info["format"] == "texture"
    assert info["header"] == {"magic": "JMXVDDJ", "version": "1000"}
    assert info["size"] == (tree / "sub" / "tex.ddj").stat().st_size


def test_deep_effect_does_not_abort_scan(tmp_path: Path):
    node = effect_node("n1199")
    for level in range(1198, -1, -1):
        node = effect_node(f"n{level}", children=[node])
    (tmp_path / "deep.efp").write_bytes(effect_file(node))
    (tmp_path / "ok.efp").write_bytes(effect_file(effect_node("ok")))
    result = decode_many(DecodeOptions([tmp_path]))
    assert [o.path.name for o in result.outcomes] == ["deep.efp", "ok.efp"]
    assert result.ok


def test_unexpected_decoder_failure_is_recorded(tree: Path, monkeypatch):
    def boom(data: bytes):
        raise RecursionError("maximum recursion depth exceeded")

    info = registry.FORMATS[texture.MAGIC]
    monkeypatch.setitem(registry.FORMATS, texture.MAGIC, replace(info, decode=boom))
    result = decode_many(DecodeOptions([tree]))
    codes = {o.path.name: o.error_code for o in result.outcomes}
    assert codes["tex.ddj"] == E_INTERNAL
    assert codes["fx.efp"] is None
    failed = next(o for o in result.failed if o.path.name == "tex.ddj")
    assert failed.error["context"] == {"exception": "RecursionError"}


def test_output_failure_is_recorded(tree: Path, tmp_path: Path, monkeypatch):
    def unrenderable(value, fmt="json"):
        raise TypeError("cannot serialize object")

    monkeypatch.setattr(api, "dumps", unrenderable)
    result = decode_many(DecodeOptions([tree], output_dir=tmp_path / "out"))
    codes = {o.path.name: o.error_code for o in result.outcomes}
    assert codes["fx.efp"] == E_OUTPUT
    assert codes["tex.ddj"] == E_OUTPUT
    assert codes["broken.bms"] == E_UNSUPPORTED_VERSION
