# ==============================================
# TOPIC 2: PACKAGING
# ==============================================
#
# Batches canonical records into gzip-compressed JSON arrays
# that the ingestion API accepts (each below 1 MiB).
#
# Modules:
# --------
# - record_packager.py → Encode, compress, split oversized batches
#
# ==============================================

from .record_packager import MAX_PACKET_SIZE, as_gzipped_json, package_records

__all__ = ["MAX_PACKET_SIZE", "as_gzipped_json", "package_records"]
