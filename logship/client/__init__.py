# ==============================================
# TRANSPORT CLIENT
# ==============================================
#
# Everything between a finished transport unit and the
# ingestion endpoint.
#
# Modules:
# --------
# - proxy.py       → Pick user / environment / no proxy per request
# - certs.py       → System trust store + extra CA bundle file and dir,
#                    unverified context for HTTPS proxies
# - http_client.py → LogsClient: POST gzip payloads with credentials
#
# ==============================================

from .certs import get_cert_pool
from .http_client import LogsClient
from .proxy import get_proxy_resolver

__all__ = ["get_cert_pool", "LogsClient", "get_proxy_resolver"]
