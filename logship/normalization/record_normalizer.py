import os
from collections.abc import Mapping
from typing import Any, Optional

from .timestamps import TimestampValue, timestamp_millis

PLUGIN_TYPE = "fluent-bit"
DEFAULT_SOURCE = "BARE-METAL"
SOURCE_ENV_VAR = "SOURCE"


def _to_text(value: Any) -> str:
    return bytes(value).decode("utf-8", errors="replace")


def _normalize_key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, (bytes, bytearray)):
        return _to_text(key)
    return str(key)


def _normalize_value(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return _to_text(value)
    if isinstance(value, Mapping):
        return parse_record(value)
    if isinstance(value, list):
        return [_normalize_value(item) for item in value]
    return value


def parse_record(raw_record: Mapping) -> dict:
    """
    Copy an agent record into a dict with string keys.

    Byte strings become text and nested mappings are parsed recursively.
    Every other value is copied as-is.

    When several keys normalize to the same name (b"a" and "a", 1 and "1"),
    the str key wins; among non-str keys the first one seen wins.
    """
    parsed = {}
    for key, value in raw_record.items():
        name = _normalize_key(key)
        if name in parsed and not isinstance(key, str):
            continue
        parsed[name] = _normalize_value(value)
    return parsed


def resolve_source(source: Optional[str] = None) -> str:
    if source is not None:
        return source
    return os.environ.get(SOURCE_ENV_VAR, DEFAULT_SOURCE)


def remap_record(
    raw_record: Mapping,
    timestamp: TimestampValue,
    plugin_version: str,
    source: Optional[str] = None,
) -> dict:
    """
    Turn one agent record into a canonical record.

    Args:
        raw_record: Record as emitted by the log-collection agent
        timestamp: EventTime, integer nanoseconds, or anything else (ignored)
        plugin_version: Version reported in the plugin descriptor
        source: Descriptor source. Read from $SOURCE when None.

    Returns:
        The canonical record; raw_record is left untouched.
    """
    record = parse_record(raw_record)

    millis = timestamp_millis(timestamp)
    if millis is not None:
        record["timestamp"] = millis

    if "log" in record:
        record["message"] = record.pop("log")

    record["plugin"] = {
        "type": PLUGIN_TYPE,
        "version": plugin_version,
        "source": resolve_source(source),
    }
    return record


class RecordNormalizer:
    def __init__(self, plugin_version: str, source: Optional[str] = None):
        self.plugin_version = plugin_version
        self.source = source

    def normalize(self, raw_record: Mapping, timestamp: TimestampValue = None) -> dict:
        return remap_record(raw_record, timestamp, self.plugin_version, self.source)

    def normalize_batch(self, items) -> list[dict]:
        return [self.normalize(raw_record, timestamp) for raw_record, timestamp in items]
