# ==============================================
# TOPIC 1: NORMALIZATION
# ==============================================
#
# This package converts loosely-typed records emitted by the
# log-collection agent into canonical records BEFORE they are
# buffered and packaged.
#
# Modules:
# --------
# - timestamps.py        → EventTime and nanosecond → millisecond conversion
# - record_normalizer.py → Decode bytes, recurse into maps, rename log,
#                          inject the plugin descriptor
#
# ==============================================

from .timestamps import EventTime, timestamp_millis
from .record_normalizer import RecordNormalizer, parse_record, remap_record

__all__ = ["EventTime", "timestamp_millis", "RecordNormalizer", "parse_record", "remap_record"]
