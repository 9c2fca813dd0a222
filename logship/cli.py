# ==============================================
# CLI — Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Run the normalize → package (→ send) path over a file of
#   JSON lines, one agent record per line.
#
# INPUT FORMAT:
# -------------
#   {"record": {...}, "timestamp": 1700000000000000000}
#   {"record": {...}, "timestamp": {"seconds": 1700000000, "nanoseconds": 5}}
#   {...}                      (bare record, no timestamp)
#
# COMMANDS:
# ---------
# 1. Write gzip payloads to a directory:
#    python -m logship.cli package records.jsonl --out-dir out/
#
# 2. Deliver payloads to the configured endpoint:
#    python -m logship.cli send records.jsonl
#
# Use "-" as INPUT to read stdin.
#
# ==============================================

import argparse
import json
import sys
from pathlib import Path
from typing import Iterator, Optional, TextIO

from loguru import logger

from logship.config import get_config
from logship.errors import LogshipError
from logship.forwarder import LogForwarder
from logship.logging_setup import configure_logging
from logship.normalization import EventTime, RecordNormalizer
from logship.packaging import package_records


def _parse_timestamp(value, line_number: int):
    if not (isinstance(value, dict) and "seconds" in value):
        return value
    try:
        return EventTime(int(value["seconds"]), int(value.get("nanoseconds", 0)))
    except (TypeError, ValueError):
        raise LogshipError(f"Line {line_number} has an invalid timestamp") from None


def read_records(stream: TextIO) -> Iterator[tuple]:
    """Yield (raw_record, timestamp) pairs from a JSON-lines stream."""
    for line_number, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            item = json.loads(line)
        except json.JSONDecodeError as exc:
            raise LogshipError(f"Line {line_number} is not valid JSON: {exc}") from exc
        if not isinstance(item, dict):
            raise LogshipError(f"Line {line_number} must be a JSON object")
        if isinstance(item.get("record"), dict):
            yield item["record"], _parse_timestamp(item.get("timestamp"), line_number)
        else:
            yield item, None


def _open_input(path: str) -> TextIO:
    if path == "-":
        return sys.stdin
    return open(path, "r", encoding="utf-8")


def cmd_package(args) -> int:
    config = get_config()
    normalizer = RecordNormalizer(config.plugin.version, source=config.plugin.source)
    stream = _open_input(args.input)
    try:
        records = normalizer.normalize_batch(read_records(stream))
    finally:
        if stream is not sys.stdin:
            stream.close()

    payloads = package_records(records)
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    for index, payload in enumerate(payloads):
        (out_dir / f"batch-{index:04d}.json.gz").write_bytes(payload)

    print(f"Packaged {len(records)} records into {len(payloads)} payloads in {out_dir}")
    return 0


def cmd_send(args) -> int:
    forwarder = LogForwarder(get_config())
    results = []
    stream = _open_input(args.input)
    try:
        for raw_record, timestamp in read_records(stream):
            flushed = forwarder.ingest(raw_record, timestamp)
            if flushed is not None:
                results.append(flushed)
    finally:
        if stream is not sys.stdin:
            stream.close()
    results.append(forwarder.flush())

    sent = sum(result.payloads_sent for result in results)
    failed = sum(result.payloads_failed for result in results)
    sent_bytes = sum(result.bytes_sent for result in results)
    print(f"Sent {sent} payloads ({sent_bytes} bytes), {failed} failed")
    return 1 if failed else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logship",
        description="Normalize agent log records and package them for the logs API."
    )
    parser.add_argument("--log-level", default="INFO", help="loguru level (default: INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    package_parser = subparsers.add_parser("package", help="write gzip payloads to a directory")
    package_parser.add_argument("input", help="JSON-lines file, or - for stdin")
    package_parser.add_argument("--out-dir", required=True, help="directory for batch-NNNN.json.gz")
    package_parser.set_defaults(handler=cmd_package)

    send_parser = subparsers.add_parser("send", help="deliver payloads to the configured endpoint")
    send_parser.add_argument("input", help="JSON-lines file, or - for stdin")
    send_parser.set_defaults(handler=cmd_send)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return args.handler(args)
    except LogshipError as exc:
        logger.error("{}", exc.detail)
        if exc.hint:
            logger.error("hint: {}", exc.hint)
        return 1
    except OSError as exc:
        logger.error("{}", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
