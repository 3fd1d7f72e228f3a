from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from bond_trace.core.config.decoder_config import DecoderConfig
from bond_trace.core.domain.errors import DecodeError
from bond_trace.runtime.context import ParseContext
from bond_trace.runtime.processor import PayloadProcessor

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_config(args: argparse.Namespace) -> DecoderConfig:
    """
    Base config from --config (if any), with CLI flags taking precedence.
    """
    raw: dict[str, object] = {}
    if args.config is not None:
        if not args.config.exists():
            raise FileNotFoundError(args.config)
        raw = json.loads(args.config.read_text(encoding="utf-8"))

    raw["version"] = args.version
    if args.container_ceiling is not None:
        raw["container_ceiling"] = args.container_ceiling
    if args.struct_length_prefix is not None:
        raw["struct_length_prefix"] = args.struct_length_prefix

    return DecoderConfig.from_json_obj(raw)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bond-trace",
        description="Structural decoder for Compact Binary payloads",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse = subparsers.add_parser(
        "parse",
        help="Parses a Compact Binary file and outputs its structure.",
    )

    parse.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Compact Binary file to process.",
    )

    parse.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output file to write the trace to.",
    )

    parse.add_argument(
        "--version",
        type=int,
        choices=(1, 2),
        default=2,
        help="Compact Binary protocol version.",
    )

    parse.add_argument(
        "--iterative-discovery",
        action="store_true",
        help="Try a decode at every byte offset to locate the struct start.",
    )

    parse.add_argument(
        "--skip",
        type=int,
        default=0,
        help="Skips a predefined number of bytes when reading the file.",
    )

    parse.add_argument(
        "--format",
        dest="output_format",
        choices=("text", "jsonl"),
        default="text",
        help="Output file format.",
    )

    parse.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a decoder config JSON file.",
    )

    parse.add_argument(
        "--container-ceiling",
        type=int,
        default=None,
        help="Item count from which a container is reported as implausible.",
    )

    parse.add_argument(
        "--struct-length-prefix",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Read the varint byte length Bond writes before every v2 struct.",
    )

    return parser


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stdout)

    if args.skip < 0:
        print("Error: --skip must be >= 0.", file=sys.stderr)
        sys.exit(2)

    try:
        config = _load_config(args)
    except (FileNotFoundError, json.JSONDecodeError, ValidationError) as exc:
        print(f"Error: invalid decoder config: {exc}", file=sys.stderr)
        sys.exit(2)

    ctx = ParseContext(
        input_path=args.input,
        output_path=args.output,
        version=args.version,
        iterative_discovery=args.iterative_discovery,
        skip=args.skip,
        output_format=args.output_format,
    )

    if not ctx.input_path.exists():
        print(f"Error: input file '{ctx.input_path}' not found.", file=sys.stderr)
        sys.exit(2)

    processor = PayloadProcessor(config=config)

    try:
        result = processor.process(ctx)
    except DecodeError as exc:
        LOGGER.error("Decode failed: %s", exc, extra={"offset": exc.offset})
        sys.exit(1)

    if result.output_written is False:
        LOGGER.warning("Trace was decoded but not persisted to %s", result.output_path)


if __name__ == "__main__":
    main()
