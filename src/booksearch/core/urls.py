"""Parse and render page URLs carrying search state.

Query parameter values are kept exactly as they appear in the address
(still percent/plus encoded) so that untouched parameters survive a
parse/render cycle unchanged. Use decode_param()/encode_param() at the edges.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict
from urllib.parse import quote_plus, unquote, urlsplit

logger = logging.getLogger(__name__)


@dataclass
class UrlState:
    """Building blocks of a URL.

    Attributes:
        protocol: Scheme without the trailing ':' (e.g. 'https')
        host: Host name, lowercased, without port or brackets
        port: Port as text, empty when absent
        path: Path, always starting with '/'
        params: Query parameters, raw (encoded) values, last duplicate wins
        hash: Fragment without the leading '#'
    """
    protocol: str = ""
    host: str = ""
    port: str = ""
    path: str = "/"
    params: Dict[str, str] = field(default_factory=dict)
    hash: str = ""


def _parse_params(query: str) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for segment in query.split("&"):
        if not segment:
            continue
        key, _, value = segment.partition("=")
        if not key:
            # "=value" has nothing to key it by
            continue
        params[key] = value
    return params


def parse_url(url: str) -> UrlState:
    """Split a URL into a UrlState.

    Never raises: malformed parts (bad port, unparseable netloc) are dropped.
    """
    try:
        parts = urlsplit(url or "")
    except ValueError as e:
        logger.debug(f"Unparseable URL {url!r}: {e}")
        return UrlState()

    try:
        port = "" if parts.port is None else str(parts.port)
    except ValueError:
        port = ""

    path = parts.path
    if not path.startswith("/"):
        path = "/" + path

    return UrlState(
        protocol=parts.scheme,
        host=parts.hostname or "",
        port=port,
        path=path,
        params=_parse_params(parts.query),
        hash=parts.fragment,
    )


def render_url(state: UrlState) -> str:
    """Recreate a URL string from a UrlState.

    parse_url(render_url(s)) == s for every s returned by parse_url.
    """
    host = f"[{state.host}]" if ":" in state.host else state.host

    if state.protocol:
        url = f"{state.protocol}://{host}"
    elif host or state.port or state.path.startswith("//"):
        url = f"//{host}"
    else:
        url = ""

    if state.port != "":
        url += ":" + state.port
    url += state.path

    joiner = "?"
    for key, value in state.params.items():
        url += f"{joiner}{key}={value}"
        joiner = "&"

    if state.hash != "":
        url += "#" + state.hash
    return url


def decode_param(value: str) -> str:
    """Decode a raw parameter value ('+' is a space).

    Falls back to the raw value when it is not valid percent-encoded UTF-8.
    """
    try:
        return unquote(value.replace("+", "%20"), errors="strict")
    except UnicodeDecodeError:
        logger.debug(f"Could not decode URL parameter {value!r}, keeping raw value")
        return value


def encode_param(value: str) -> str:
    """Encode a parameter value for the query string (spaces become '+')."""
    return quote_plus(value)


__all__ = ["UrlState", "parse_url", "render_url", "decode_param", "encode_param"]
