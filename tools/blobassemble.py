# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import BinaryIO

from blobbify.assembler import Blobbify
from blobbify.blob import LINE_ENDING_MODES, TRANSPARENT, Blob
from blobbify.caps import caps_to_turtle, summarize_caps
from blobbify.codec import DEFAULT_DECODE_CHUNK_WIDTH, BlobbifyError


def build_assembler(args: argparse.Namespace) -> Blobbify:
    assembler = Blobbify(
        decode_chunk_width=args.width,
        mime_type=args.mime_type,
        line_ending_mode=args.endings,
    )
    texts = [Path(chunk).read_text(encoding="ascii") for chunk in args.chunks]
    if args.positions:
        for position, text in zip(args.positions, texts):
            assembler.add_base64(position, text)
    else:
        for text in texts:
            assembler.append_base64(text)
    return assembler


def write_blob(blob: Blob, stream: BinaryIO, width: int) -> None:
    for chunk in blob.open().iter_chunks(width):
        stream.write(chunk)
    stream.flush()


def describe(assembler: Blobbify, style: str) -> str:
    url = assembler.create_object_url()
    try:
        caps = assembler.describe_object_url(url)
    finally:
        assembler.revoke_object_url(url)
    return summarize_caps(caps) if style == "json" else caps_to_turtle(caps)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Assemble Base64 chunk files into a single binary file."
    )
    parser.add_argument("chunks", nargs="+", help="Text files holding Base64 chunks.")
    parser.add_argument("-o", "--output", help="Write assembled bytes here (default: stdout).")
    parser.add_argument(
        "--position",
        dest="positions",
        type=int,
        action="append",
        help="Explicit position for each chunk, in argument order. Repeat once per chunk.",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=DEFAULT_DECODE_CHUNK_WIDTH,
        help=f"Bytes per decoded sub-segment (default: {DEFAULT_DECODE_CHUNK_WIDTH}).",
    )
    parser.add_argument("--mime-type", default="", help="MIME type of the assembled blob.")
    parser.add_argument(
        "--endings",
        choices=LINE_ENDING_MODES,
        default=TRANSPARENT,
        help="Line-ending handling (default: transparent).",
    )
    parser.add_argument(
        "--describe",
        nargs="?",
        const="turtle",
        choices=("turtle", "json"),
        help="Print a description of the blob to stderr (default style: turtle).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)
    if args.positions and len(args.positions) != len(args.chunks):
        parser.error("--position must be given once per chunk")
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        assembler = build_assembler(args)
        blob = assembler.get_blob()
        if args.output:
            with open(args.output, "wb") as stream:
                write_blob(blob, stream, args.width)
        else:
            write_blob(blob, sys.stdout.buffer, args.width)
    except (BlobbifyError, ValueError) as error:
        print(f"[error] {error}", file=sys.stderr)
        return 1
    except OSError as error:
        print(f"[error] {error}", file=sys.stderr)
        return 1

    if args.describe:
        print(describe(assembler, args.describe), file=sys.stderr)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
