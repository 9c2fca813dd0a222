import os
import ssl
from typing import Optional

from loguru import logger

from logship.errors import ConfigError


def system_cert_pool() -> ssl.SSLContext:
    return ssl.create_default_context(ssl.Purpose.SERVER_AUTH)


def get_cert_pool(ca_file: Optional[str] = None, ca_dir: Optional[str] = None) -> ssl.SSLContext:
    """
    Build a TLS context trusting the system store plus extra CA bundles.

    Args:
        ca_file: PEM bundle to add. Skipped when empty.
        ca_dir: Directory whose regular files are each added as PEM bundles.
            Files that do not parse are logged and skipped.

    Returns:
        An ssl.SSLContext for server authentication

    Raises:
        ConfigError: If ca_file cannot be loaded or ca_dir is not a directory
    """
    context = system_cert_pool()

    if ca_file:
        try:
            context.load_verify_locations(cafile=ca_file)
        except (OSError, ssl.SSLError) as exc:
            raise ConfigError(f"Could not load CA bundle file {ca_file!r}: {exc}") from exc

    if ca_dir:
        if not os.path.isdir(ca_dir):
            raise ConfigError(f"CA bundle directory {ca_dir!r} does not exist")
        for name in sorted(os.listdir(ca_dir)):
            path = os.path.join(ca_dir, name)
            if not os.path.isfile(path):
                continue
            try:
                context.load_verify_locations(cafile=path)
            except (OSError, ssl.SSLError) as exc:
                logger.warning("Skipping CA bundle {}: {}", path, exc)

    return context


def insecure_proxy_context() -> ssl.SSLContext:
    """TLS context for an HTTPS proxy whose certificate is not checked."""
    context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context
