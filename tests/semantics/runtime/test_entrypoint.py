"""
Semantic test: command-line exit codes and outputs.

Invariant:
Usage and configuration problems exit with code 2 before any decoding.
A structural decode failure exits with code 1. A successful run returns
normally and writes the requested trace file.
"""

from __future__ import annotations

import json

import pytest

from bond_trace.runtime.entrypoint import build_parser, main


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


def test_successful_parse_writes_output(tmp_path) -> None:
    source = tmp_path / "ok.bin"
    source.write_bytes(b"\x30\x54\x00")
    output = tmp_path / "out.txt"

    main(["parse", "--input", str(source), "--output", str(output)])

    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Skipping bytes: 0"
    assert lines[2].endswith("\t42")


def test_decode_failure_exits_with_one(tmp_path) -> None:
    source = tmp_path / "broken.bin"
    source.write_bytes(b"\x29\x09")

    assert _run(["parse", "--input", str(source)]) == 1


def test_missing_input_exits_with_two(tmp_path) -> None:
    assert _run(["parse", "--input", str(tmp_path / "missing.bin")]) == 2


def test_negative_skip_exits_with_two(tmp_path) -> None:
    source = tmp_path / "ok.bin"
    source.write_bytes(b"\x00")

    assert _run(["parse", "--input", str(source), "--skip", "-1"]) == 2


def test_invalid_config_exits_with_two(tmp_path) -> None:
    source = tmp_path / "ok.bin"
    source.write_bytes(b"\x00")
    config = tmp_path / "decoder.json"
    config.write_text(json.dumps({"container_ceiling": 0}), encoding="utf-8")

    assert _run(["parse", "--input", str(source), "--config", str(config)]) == 2


def test_missing_config_exits_with_two(tmp_path) -> None:
    source = tmp_path / "ok.bin"
    source.write_bytes(b"\x00")

    assert _run(["parse", "--input", str(source), "--config", str(tmp_path / "none.json")]) == 2


def test_container_ceiling_flag_is_applied(tmp_path) -> None:
    # LIST id1 of INT32 declaring three items; the first zero then reads as STOP.
    source = tmp_path / "list.bin"
    source.write_bytes(b"\x2b\x10\x03\x00\x00\x00")
    output = tmp_path / "out.jsonl"

    main([
        "parse",
        "--input", str(source),
        "--output", str(output),
        "--format", "jsonl",
        "--container-ceiling", "3",
    ])

    kinds = [json.loads(line)["kind"] for line in output.read_text(encoding="utf-8").splitlines()]
    assert "implausible" in kinds
    assert "element" not in kinds


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["parse", "--input", "payload.bin"])

    assert args.version == 2
    assert args.skip == 0
    assert args.output is None
    assert args.output_format == "text"
    assert not args.iterative_discovery
    assert args.struct_length_prefix is None


def test_parser_rejects_unknown_version() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["parse", "--input", "payload.bin", "--version", "3"])


def test_struct_length_prefix_flag_decodes_prefixed_payload(tmp_path) -> None:
    # Struct byte length 3, then INT32 id1 = 42, STOP.
    source = tmp_path / "prefixed.bin"
    source.write_bytes(b"\x03\x30\x54\x00")
    output = tmp_path / "out.jsonl"

    main([
        "parse",
        "--input", str(source),
        "--output", str(output),
        "--format", "jsonl",
        "--struct-length-prefix",
    ])

    records = [json.loads(line) for line in output.read_text(encoding="utf-8").splitlines()]
    begin = next(r for r in records if r["kind"] == "struct_begin")
    fields = [r for r in records if r["kind"] == "field"]
    assert begin["detail"] == "length: 3"
    assert [(f["data_type"], f["field_id"], f["value"]) for f in fields] == [("INT32", 1, "42")]
    assert not any(r["kind"] == "skipped" for r in records)


def test_no_struct_length_prefix_overrides_config(tmp_path) -> None:
    source = tmp_path / "plain.bin"
    source.write_bytes(b"\x30\x54\x00")
    config = tmp_path / "decoder.json"
    config.write_text(json.dumps({"struct_length_prefix": True}), encoding="utf-8")
    output = tmp_path / "out.jsonl"

    main([
        "parse",
        "--input", str(source),
        "--output", str(output),
        "--format", "jsonl",
        "--config", str(config),
        "--no-struct-length-prefix",
    ])

    records = [json.loads(line) for line in output.read_text(encoding="utf-8").splitlines()]
    assert [r["value"] for r in records if r["kind"] == "field"] == ["42"]


def test_struct_length_prefix_with_v1_exits_with_two(tmp_path) -> None:
    source = tmp_path / "ok.bin"
    source.write_bytes(b"\x00")

    assert _run(["parse", "--input", str(source), "--version", "1", "--struct-length-prefix"]) == 2
