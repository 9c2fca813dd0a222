# ==============================================
# LogsClient
# ==============================================
#
# PURPOSE:
#   Deliver transport units (gzip JSON arrays) to the log
#   ingestion endpoint over HTTPS.
#
# CLASS: LogsClient
# -----------------
#   Constructor:
#   ------------
#   - __init__(endpoint_config, proxy_config, session=None)
#       Picks the credential header, builds the proxy resolver
#       and mounts a TLS adapter when extra CA bundles are set
#       or HTTPS proxy certificates are not validated.
#
#   Methods:
#   --------
#   - send(payload: bytes) -> int
#       POST one payload. Returns the HTTP status code.
#       Raises DeliveryError on transport failure or non-2xx.
#       Never retries.
#
#   - close() -> None
#
# ==============================================

from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from logship import __version__
from logship.config import EndpointConfig, ProxyConfig
from logship.errors import ConfigError, DeliveryError
from .certs import get_cert_pool, insecure_proxy_context
from .proxy import get_proxy_resolver

LICENSE_KEY_HEADER = "X-License-Key"
INSERT_KEY_HEADER = "X-Insert-Key"


class SSLContextAdapter(HTTPAdapter):
    """
    HTTPAdapter with its own TLS contexts.

    ssl_context verifies the endpoint (None keeps urllib3 defaults).
    proxy_ssl_context is used for the TLS session with an HTTPS proxy.
    """

    def __init__(self, ssl_context=None, proxy_ssl_context=None, **kwargs):
        self._ssl_context = ssl_context
        self._proxy_ssl_context = proxy_ssl_context
        super().__init__(**kwargs)

    def init_poolmanager(self, *args, **kwargs):
        if self._ssl_context is not None:
            kwargs["ssl_context"] = self._ssl_context
        return super().init_poolmanager(*args, **kwargs)

    def proxy_manager_for(self, proxy, **proxy_kwargs):
        if self._ssl_context is not None:
            proxy_kwargs["ssl_context"] = self._ssl_context
        # SOCKS managers take no proxy TLS settings.
        if self._proxy_ssl_context is not None and not proxy.lower().startswith("socks"):
            proxy_kwargs["proxy_ssl_context"] = self._proxy_ssl_context
        return super().proxy_manager_for(proxy, **proxy_kwargs)


def credential_header(endpoint_config: EndpointConfig) -> tuple[str, str]:
    if endpoint_config.license_key:
        return LICENSE_KEY_HEADER, endpoint_config.license_key
    if endpoint_config.api_key:
        return INSERT_KEY_HEADER, endpoint_config.api_key
    raise ConfigError(
        "No credentials configured for the ingestion endpoint",
        hint="set LOGSHIP_LICENSE_KEY or LOGSHIP_API_KEY",
    )


class LogsClient:
    def __init__(
        self,
        endpoint_config: EndpointConfig,
        proxy_config: Optional[ProxyConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        proxy_config = proxy_config or ProxyConfig()
        self.endpoint = endpoint_config.endpoint
        self.timeout = endpoint_config.timeout_seconds
        self._header_name, self._header_value = credential_header(endpoint_config)
        self._resolve_proxy = get_proxy_resolver(
            proxy_config.ignore_system_proxy, proxy_config.proxy
        )

        self._session = session or requests.Session()
        # Proxies come only from the resolver.
        self._session.trust_env = False
        if session is None:
            self._mount_tls_adapter(proxy_config)

    def _mount_tls_adapter(self, proxy_config: ProxyConfig) -> None:
        context = None
        if proxy_config.ca_bundle_file or proxy_config.ca_bundle_dir:
            context = get_cert_pool(proxy_config.ca_bundle_file, proxy_config.ca_bundle_dir)
        proxy_context = None if proxy_config.validate_proxy_certs else insecure_proxy_context()
        if context is None and proxy_context is None:
            return
        adapter = SSLContextAdapter(context, proxy_context)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Content-Encoding": "gzip",
            "User-Agent": f"logship/{__version__}",
            self._header_name: self._header_value,
        }

    def send(self, payload: bytes) -> int:
        proxy = self._resolve_proxy(self.endpoint)
        proxies = {"http": proxy, "https": proxy} if proxy else {}
        try:
            response = self._session.post(
                self.endpoint,
                data=payload,
                headers=self.headers(),
                proxies=proxies,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise DeliveryError(f"Could not reach {self.endpoint}: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise DeliveryError(
                f"{self.endpoint} rejected payload of {len(payload)} bytes "
                f"with HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response.status_code

    def close(self) -> None:
        self._session.close()
