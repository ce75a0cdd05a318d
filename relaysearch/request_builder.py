"""Assembly of URLs and request descriptors."""

import dataclasses
import json
from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel

from relaysearch.options import RequestOptions
from relaysearch.types import HttpMethod, RequestDescriptor


def build_url(host: str, path: str, extra_query: str = "") -> str:
    """Build the fully-qualified URL for one host.

    ``path`` may already carry a query string, in which case the extra
    parameters are appended with ``&``.

    Args:
        host: Host name, without scheme
        path: Path, optionally with its own query string
        extra_query: Already-encoded extra query parameters

    Returns:
        HTTPS URL
    """
    if not extra_query:
        return f"https://{host}{path}"
    separator = "&" if "?" in path else "?"
    return f"https://{host}{path}{separator}{extra_query}"


def _json_default(value: Any) -> Any:
    # Enums go over the wire by member name, not by value
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, BaseModel):
        return _names_for_enums(value.model_dump())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _names_for_enums(dataclasses.asdict(value))
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _names_for_enums(value: Any) -> Any:
    # json.dumps encodes str/int Enum subclasses natively, so walk them first
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, dict):
        return {
            (k.name if isinstance(k, Enum) else k): _names_for_enums(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_names_for_enums(v) for v in value]
    return value


def serialize_content(content: Any) -> str:
    """Serialize request content to JSON text.

    Enum members are written as their name.

    Raises:
        TypeError: If the content contains unserializable objects
    """
    if isinstance(content, BaseModel):
        content = content.model_dump()
    elif dataclasses.is_dataclass(content) and not isinstance(content, type):
        content = dataclasses.asdict(content)
    return json.dumps(_names_for_enums(content), default=_json_default)


def _merge_headers(
    defaults: Mapping[str, str],
    extras: list[tuple[str, str]],
) -> dict[str, str]:
    headers = dict(defaults)
    for name, value in extras:
        for existing in [k for k in headers if k.lower() == name.lower()]:
            del headers[existing]
        headers[name] = value
    return headers


def build_request(
    method: Union[HttpMethod, str],
    path: str,
    content: Any = None,
    *,
    default_headers: Optional[Mapping[str, str]] = None,
    request_options: Optional[RequestOptions] = None,
) -> RequestDescriptor:
    """Build the transport-neutral descriptor for a call.

    Args:
        method: HTTP method
        path: Path, optionally with its own query string
        content: Body for POST/PUT requests; ignored for GET/DELETE
        default_headers: Headers applied before request option headers
        request_options: Per-call extra query parameters and headers

    Returns:
        Request descriptor
    """
    try:
        method = HttpMethod(method.upper() if isinstance(method, str) else method)
    except ValueError:
        raise ValueError(
            f"Unsupported method '{method}', expected one of {HttpMethod.values()}"
        ) from None

    body = None
    if method.has_body and content is not None:
        body = serialize_content(content)

    extra_query = ""
    extra_headers: list[tuple[str, str]] = []
    if request_options is not None:
        extra_query = request_options.build_extra_query_string()
        extra_headers = request_options.generate_extra_headers()

    return RequestDescriptor(
        method=method,
        path=path,
        extra_query=extra_query,
        body=body,
        headers=_merge_headers(default_headers or {}, extra_headers),
    )
