"""src/reqhop/transport/tls.py

TLS context configuration for Reqhop.
"""

import ssl

__all__ = ["create_ssl_context"]


def create_ssl_context(reject_unauthorized: bool = True) -> ssl.SSLContext:
    """
    Creates a client SSL context with TLS 1.2 minimum.

    Args:
        reject_unauthorized: When False, certificate and hostname checks
            are disabled (self-signed test servers and the like).
    """
    context = ssl.create_default_context()
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    if not reject_unauthorized:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context
