# ==============================================
# RecordPackager
# ==============================================
#
# PURPOSE:
#   Takes a batch of canonical records and turns it into gzip
#   compressed JSON arrays ("transport units"), each strictly
#   smaller than the ingestion API's 1 MiB packet limit.
#
# ALGORITHM:
# ----------
#   1. Encode the whole batch as one compact JSON array, gzip it.
#   2. Compressed length < limit  → one unit.
#   3. Over the limit, 1 record   → record is dropped and logged
#      (repr cut to LOG_PREVIEW_CHARS).
#   4. Over the limit, N records  → split at N // 2, package each
#      half, concatenate the results in order.
#
#   Each level halves the batch, so depth is at most ceil(log2 N).
#
# FUNCTIONS:
# ----------
#   - package_records(records, max_packet_size) -> list[bytes]
#   - as_gzipped_json(records) -> bytes
#
# ERRORS:
# -------
#   - EncodingError     → a value cannot be serialized to JSON
#   - CompressionError  → the gzip stream failed
#   Both abort the whole call; nothing is returned.
#
# ==============================================

import gzip
import io
import json
import zlib
from collections.abc import Sequence

from loguru import logger

from logship.errors import CompressionError, EncodingError

MAX_PACKET_SIZE = 1 << 20  # 1 MiB
LOG_PREVIEW_CHARS = 1024


def encode_records(records: Sequence[dict]) -> bytes:
    try:
        encoded = json.dumps(
            list(records),
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError, RecursionError) as exc:
        raise EncodingError(f"Could not encode records as JSON: {exc}") from exc
    return encoded.encode("utf-8")


def as_gzipped_json(records: Sequence[dict]) -> bytes:
    """
    Encode records as a JSON array and gzip the result.

    Args:
        records: Canonical records

    Returns:
        The complete gzip member, header and trailer included
    """
    data = encode_records(records)
    buffer = io.BytesIO()
    try:
        with gzip.GzipFile(fileobj=buffer, mode="wb") as stream:
            stream.write(data)
            stream.flush()
    except (OSError, zlib.error) as exc:
        raise CompressionError(f"Could not gzip {len(data)} bytes of JSON: {exc}") from exc
    return buffer.getvalue()


def package_records(records: Sequence[dict], max_packet_size: int = MAX_PACKET_SIZE) -> list[bytes]:
    """
    Split records into gzip payloads that each stay below max_packet_size.

    A single record that does not fit on its own is discarded with an
    ERROR log line rather than failing the batch.

    Args:
        records: Canonical records, in send order
        max_packet_size: Exclusive upper bound on a payload's byte length

    Returns:
        Payloads in input order; empty for an empty batch

    Raises:
        EncodingError: If any record cannot be serialized
        CompressionError: If the gzip stream fails
    """
    if len(records) == 0:
        return []

    compressed = as_gzipped_json(records)
    compressed_size = len(compressed)
    if compressed_size < max_packet_size:
        return [compressed]

    if len(records) == 1:
        logger.error(
            "Can't compress record below required maximum packet size and it will be discarded. "
            "Compressed size: {} bytes. Record (first {} chars): {}",
            compressed_size,
            LOG_PREVIEW_CHARS,
            repr(records[0])[:LOG_PREVIEW_CHARS],
        )
        return []

    logger.debug(
        "Records were too big ({} records, {} bytes compressed), splitting in half and retrying compression",
        len(records),
        compressed_size,
    )
    middle = len(records) // 2
    first_half = package_records(records[:middle], max_packet_size)
    second_half = package_records(records[middle:], max_packet_size)
    return first_half + second_half
