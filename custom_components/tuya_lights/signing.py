"""Request signing for the Tuya cloud API.

Every Tuya OpenAPI request carries an HMAC-SHA256 signature computed over a
string-to-sign built from the HTTP method, a SHA-256 hash of the body, an
always-empty header field and the canonical URL (path plus sorted query).
The functions in this module are pure and perform no I/O.
"""

import hashlib
import hmac
import json
import time
from typing import Any
from urllib.parse import parse_qsl, quote, unquote

from .const import SIGN_METHOD, TOKEN_PATH
from .models import CanonicalRequest

EMPTY_CONTENT_HASH = hashlib.sha256(b"").hexdigest()


def current_timestamp() -> str:
    """Return the current time in epoch milliseconds as a string."""
    return str(int(time.time() * 1000))


def sign(message: str, secret: str) -> str:
    """Sign a message with HMAC-SHA256.

    Args:
        message: Message to sign.
        secret: Signing key (the project secret key).

    Returns:
        Uppercase hexadecimal digest.

    """
    digest = hmac.new(
        secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
    ).hexdigest()
    return digest.upper()


def serialize_body(body: dict[str, Any] | None) -> str:
    """Serialize a request body the way the platform hashes it."""
    return json.dumps(
        body if body is not None else {}, separators=(",", ":"), ensure_ascii=False
    )


def content_hash(method: str, body: dict[str, Any] | None = None) -> str:
    """Return the SHA-256 hex digest of the request body.

    GET requests always hash the empty string, whatever body is passed.
    """
    if method.upper() == "GET":
        return EMPTY_CONTENT_HASH
    return hashlib.sha256(serialize_body(body).encode("utf-8")).hexdigest()


def string_to_sign(method: str, body_hash: str, url: str) -> str:
    """Join the signature fields; the third (headers) field is always empty."""
    return "\n".join([method.upper(), body_hash, "", url])


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flatten(key: str, value: Any) -> list[tuple[str, str]]:
    """Flatten a query value into pairs using bracket notation for nesting."""
    if value is None:
        return []
    if isinstance(value, dict):
        pairs: list[tuple[str, str]] = []
        for sub_key, sub_value in value.items():
            pairs.extend(_flatten(f"{key}[{sub_key}]", sub_value))
        return pairs
    if isinstance(value, (list, tuple)):
        pairs = []
        for index, item in enumerate(value):
            pairs.extend(_flatten(f"{key}[{index}]", item))
        return pairs
    return [(key, _render_value(value))]


def canonicalize(path: str, query: dict[str, Any] | None = None) -> CanonicalRequest:
    """Build the canonical form of a request path.

    Query parameters embedded in ``path`` are merged over ``query``; on a key
    collision the value from the path wins. Keys are sorted and the query
    string is rebuilt, then URL-decoded once.

    Args:
        path: Endpoint path, optionally carrying its own query string.
        query: Explicit query parameters.

    Returns:
        CanonicalRequest with the bare path, the sorted query string and the
        sorted parameter pairs to send.

    """
    uri, _, path_query = path.partition("?")

    merged: dict[str, Any] = dict(query or {})
    merged.update(parse_qsl(path_query, keep_blank_values=True))

    params: list[tuple[str, str]] = []
    for key in sorted(merged):
        params.extend(_flatten(key, merged[key]))

    encoded = "&".join(
        f"{quote(name, safe='')}={quote(value, safe='')}" for name, value in params
    )
    return CanonicalRequest(
        uri=uri, query_string=unquote(encoded), params=tuple(params)
    )


def token_headers(access_key: str, secret_key: str, timestamp: str) -> dict[str, str]:
    """Create signed headers for the token endpoint.

    Args:
        access_key: Project access key (client id).
        secret_key: Project secret key.
        timestamp: Epoch milliseconds as a string.

    Returns:
        Headers for the unsigned-body token request.

    """
    payload = string_to_sign("GET", EMPTY_CONTENT_HASH, TOKEN_PATH)
    return {
        "t": timestamp,
        "sign_method": SIGN_METHOD,
        "client_id": access_key,
        "sign": sign(access_key + timestamp + payload, secret_key),
    }


def request_headers(
    access_key: str,
    secret_key: str,
    access_token: str,
    timestamp: str,
    method: str,
    canonical: CanonicalRequest,
    body: dict[str, Any] | None = None,
) -> dict[str, str]:
    """Create signed headers for a business request.

    Args:
        access_key: Project access key (client id).
        secret_key: Project secret key.
        access_token: Token returned by the token endpoint.
        timestamp: Epoch milliseconds as a string.
        method: HTTP method.
        canonical: Canonical form of the request path.
        body: Request body, ignored for GET.

    Returns:
        Headers carrying the signature and access token.

    """
    payload = string_to_sign(method, content_hash(method, body), canonical.url)
    return {
        "t": timestamp,
        "path": canonical.url,
        "client_id": access_key,
        "sign": sign(access_key + access_token + timestamp + payload, secret_key),
        "sign_method": SIGN_METHOD,
        "access_token": access_token,
    }
