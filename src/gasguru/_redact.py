"""Redaction for DEBUG logging.

Document store and Places requests carry an API key in the query string
and sometimes a bearer token in the headers. Both are masked here before a
payload, header set or URL reaches the logs.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

_MASK = "<redacted>"
_MAX_DEPTH = 20

_SECRET_KEYS: frozenset[str] = frozenset(
    {
        "key",
        "apikey",
        "api_key",
        "idtoken",
        "id_token",
        "token",
        "authorization",
        "cookie",
        "password",
    }
)

# ``key=...`` / ``access_token=...`` inside a URL or query string.
_QUERY_SECRET_RE = re.compile(r"(?i)([?&](?:key|access_token|token)=)[^&#\s]+")


def _is_secret(key: object) -> bool:
    return str(key).lower() in _SECRET_KEYS


def redact_url(url: str) -> str:
    """Mask secret query parameters in *url*."""
    return _QUERY_SECRET_RE.sub(rf"\1{_MASK}", url)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of *value* safe to log.

    Mappings lose the values of secret keys, strings are truncated to
    *max_string* characters and have secret query parameters masked.
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        text = redact_url(value)
        return f"{text[:max_string]}…<truncated>" if len(text) > max_string else text
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, Mapping):
        return {
            str(k): _MASK if _is_secret(k) else redact_for_log(v, max_string=max_string, _depth=_depth + 1)
            for k, v in value.items()
        }
    if isinstance(value, Sequence):
        if value and all(isinstance(item, tuple) and len(item) == 2 for item in value):
            # aiohttp-style ``[(name, value), ...]`` query parameters.
            return [(name, _MASK if _is_secret(name) else item) for name, item in value]
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
    return repr(value)
