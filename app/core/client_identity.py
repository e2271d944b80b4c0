"""Best-effort client identity for throttling.

The returned address is spoofable by any client that controls its own
headers; it is a throttling signal, not an authentication mechanism.
"""

from __future__ import annotations

import logging

from fastapi import Request

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"
FORWARDED_FOR_HEADER = "X-Forwarded-For"


def get_client_ip(forwarded_for: str | None, peer_host: str | None) -> str:
    """Derive the client address from a proxy chain and the transport peer.

    The first entry of the forwarded chain wins, then the peer address.
    Callers with neither share the ``"unknown"`` identity (and therefore a
    bucket per scope).

    Examples:
        >>> get_client_ip("1.2.3.4, 5.6.7.8", "10.0.0.1")
        '1.2.3.4'
        >>> get_client_ip(None, " 10.0.0.1 ")
        '10.0.0.1'
        >>> get_client_ip(None, None)
        'unknown'
    """
    try:
        first_hop = (forwarded_for or "").split(",")[0].strip()
        if first_hop:
            return first_hop
        peer = (peer_host or "").strip()
        return peer or UNKNOWN_CLIENT
    except (AttributeError, TypeError):
        # Malformed header values degrade to the shared sentinel.
        logger.warning("client_identity.malformed_header")
        return UNKNOWN_CLIENT


def client_ip_from_request(request: Request) -> str:
    """Resolve the client address for a FastAPI request."""
    peer_host = request.client.host if request.client else None
    return get_client_ip(request.headers.get(FORWARDED_FOR_HEADER), peer_host)
