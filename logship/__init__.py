# ==============================================
# logship — Log Record Forwarder
# ==============================================
#
# Package Structure (2 Core Topics + Transport):
#
# logship/
# ├── normalization/    # Topic 1: Raw agent record -> canonical record
# ├── packaging/        # Topic 2: Canonical records -> gzip payloads < 1 MiB
# ├── client/           # Transport: proxy, CA bundle, HTTP delivery
# ├── config.py         # Configuration management
# ├── errors.py         # Domain exceptions
# ├── logging_setup.py  # loguru sink configuration
# ├── forwarder.py      # Buffering orchestrator class
# └── cli.py            # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
