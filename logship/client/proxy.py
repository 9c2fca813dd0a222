from typing import Callable, Optional
from urllib.parse import urlsplit

from requests.utils import get_environ_proxies, select_proxy

from logship.errors import ConfigError

ProxyResolver = Callable[[str], Optional[str]]

SUPPORTED_PROXY_SCHEMES = {"http", "https", "socks5", "socks5h"}


def validate_proxy_url(proxy: str) -> str:
    parts = urlsplit(proxy)
    if parts.scheme.lower() not in SUPPORTED_PROXY_SCHEMES or not parts.hostname:
        raise ConfigError(
            f"Invalid proxy URL {proxy!r}",
            hint="expected scheme://[user:password@]host:port",
        )
    return proxy


def get_proxy_resolver(ignore_system_proxy: bool, proxy: Optional[str] = None) -> ProxyResolver:
    """
    Build the function that picks a proxy URL for each outgoing request.

    Precedence:
        1. The user-configured proxy, for every request
        2. Nothing, when ignore_system_proxy is set
        3. HTTPS_PROXY / HTTP_PROXY matching the request scheme (NO_PROXY honored)

    Args:
        ignore_system_proxy: Skip the proxy environment variables
        proxy: User-configured proxy URL, empty or None when unset

    Returns:
        Callable taking the request URL and returning a proxy URL or None

    Raises:
        ConfigError: If the user-configured proxy is not a usable URL
    """
    if proxy:
        configured = validate_proxy_url(proxy)
        return lambda url: configured

    if ignore_system_proxy:
        return lambda url: None

    def from_environment(url: str) -> Optional[str]:
        return select_proxy(url, get_environ_proxies(url))

    return from_environment
