# ==============================================
# LogForwarder — Buffering Orchestrator
# ==============================================
#
# PURPOSE:
#   Ties normalization, packaging and delivery together.
#   Callers hand it raw agent records; it decides when to flush.
#
#   raw record ──► RecordNormalizer ──► [ BUFFER ]
#                                          │ on flush
#                                          ▼
#                                  package_records()
#                                          │ payloads (< 1 MiB each)
#                                          ▼
#                                  LogsClient.send()
#
# CLASS: LogForwarder
# -------------------
#   Public Methods:
#   ---------------
#   - ingest(raw_record, timestamp) -> Optional[FlushResult]
#       Normalize, buffer, flush if the buffer is full or stale.
#       A record that cannot be JSON-encoded is logged at ERROR
#       and dropped before it reaches the buffer.
#
#   - ingest_batch(items) -> Optional[FlushResult]
#       Same for (raw_record, timestamp) pairs.
#
#   - flush() -> FlushResult
#       Package the buffer and send every payload once.
#       Compression errors propagate and keep the buffer.
#       Delivery errors are counted, logged, not retried.
#
#   - get_status() -> dict
#
#   Not thread-safe: use one forwarder per flushing thread.
#
# ==============================================

import time
from dataclasses import dataclass, field
from typing import Iterable, Optional

from loguru import logger

from logship.client import LogsClient
from logship.config import AppConfig, get_config
from logship.errors import DeliveryError, EncodingError
from logship.normalization import RecordNormalizer
from logship.normalization.timestamps import TimestampValue
from logship.packaging import package_records
from logship.packaging.record_packager import encode_records


@dataclass
class FlushResult:
    records_flushed: int = 0
    payloads_sent: int = 0
    payloads_failed: int = 0
    bytes_sent: int = 0
    errors: list[str] = field(default_factory=list)


class LogForwarder:
    """
    Buffer canonical records and ship them in size-bounded gzip payloads.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        client=None,
        normalizer: Optional[RecordNormalizer] = None,
    ):
        """
        Args:
            config: Application configuration. If None, loads from environment.
            client: Object with send(payload: bytes). Defaults to a LogsClient
                built from config.
            normalizer: Defaults to a RecordNormalizer using config.plugin.
        """
        self._config = config or get_config()
        self._normalizer = normalizer or RecordNormalizer(
            self._config.plugin.version,
            source=self._config.plugin.source
        )
        if client is None:
            client = LogsClient(self._config.endpoint, self._config.proxy)
        self._client = client

        self._buffer: list[dict] = []
        self._buffer_size = self._config.buffer.buffer_size
        self._buffer_timeout = self._config.buffer.buffer_timeout_seconds
        self._last_flush_time = time.monotonic()
        self._total_records = 0
        self._total_payloads = 0
        self._total_rejected = 0

    def ingest(self, raw_record, timestamp: TimestampValue = None) -> Optional[FlushResult]:
        self._buffer_record(self._normalizer.normalize(raw_record, timestamp))
        if self._should_flush():
            return self.flush()
        return None

    def ingest_batch(self, items: Iterable) -> Optional[FlushResult]:
        for record in self._normalizer.normalize_batch(items):
            self._buffer_record(record)
        if self._should_flush():
            return self.flush()
        return None

    def flush(self) -> FlushResult:
        """
        Package the buffered records and send each payload once.

        Returns:
            FlushResult with counts; records dropped as oversized are
            included in records_flushed.

        Raises:
            CompressionError: If the buffer cannot be compressed.
                The buffer is kept so the caller can inspect it.
        """
        result = FlushResult()
        if not self._buffer:
            self._last_flush_time = time.monotonic()
            return result

        payloads = package_records(self._buffer)
        result.records_flushed = len(self._buffer)

        for payload in payloads:
            try:
                self._client.send(payload)
            except DeliveryError as exc:
                result.payloads_failed += 1
                result.errors.append(exc.detail)
                logger.warning("Payload of {} bytes was not delivered: {}", len(payload), exc.detail)
                continue
            result.payloads_sent += 1
            result.bytes_sent += len(payload)

        self._buffer.clear()
        self._last_flush_time = time.monotonic()
        self._total_records += result.records_flushed
        self._total_payloads += result.payloads_sent

        logger.info(
            "Flushed {} records in {} payloads ({} bytes, {} failed)",
            result.records_flushed,
            result.payloads_sent,
            result.bytes_sent,
            result.payloads_failed,
        )
        return result

    def get_status(self) -> dict:
        return {
            "buffer_size": len(self._buffer),
            "buffer_capacity": self._buffer_size,
            "total_records_flushed": self._total_records,
            "total_payloads_sent": self._total_payloads,
            "total_records_rejected": self._total_rejected,
            "seconds_since_last_flush": round(time.monotonic() - self._last_flush_time, 2),
            "buffer_timeout": self._buffer_timeout,
            "will_auto_flush": self._should_flush(),
        }

    def _buffer_record(self, record: dict) -> None:
        try:
            encode_records([record])
        except EncodingError as exc:
            self._total_rejected += 1
            logger.error("Record cannot be encoded and will be discarded: {}", exc.detail)
            return
        self._buffer.append(record)

    def _should_flush(self) -> bool:
        if not self._buffer:
            return False
        if len(self._buffer) >= self._buffer_size:
            return True
        return time.monotonic() - self._last_flush_time >= self._buffer_timeout
