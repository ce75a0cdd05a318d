"""Per-call request options."""

from typing import Optional
from urllib.parse import quote


class RequestOptions:
    """Extra query parameters and headers contributed to a single call.

    Examples:
        ```python
        options = RequestOptions().set_forwarded_for("203.0.113.7")
        options.add_extra_query_param("clickAnalytics", "true")
        await client.search("products", "shoes", request_options=options)
        ```
    """

    def __init__(
        self,
        extra_headers: Optional[dict[str, str]] = None,
        extra_query_params: Optional[dict[str, str]] = None,
    ) -> None:
        self._headers: dict[str, str] = dict(extra_headers or {})
        self._query_params: dict[str, str] = dict(extra_query_params or {})

    def set_forwarded_for(self, ip: str) -> "RequestOptions":
        """Forward the end user's IP address to the service."""
        return self.set_extra_header("X-Forwarded-For", ip)

    def set_extra_header(self, name: str, value: str) -> "RequestOptions":
        self._headers[name] = value
        return self

    def add_extra_query_param(self, name: str, value: str) -> "RequestOptions":
        self._query_params[name] = value
        return self

    def generate_extra_headers(self) -> list[tuple[str, str]]:
        return list(self._headers.items())

    def generate_extra_query_params(self) -> list[tuple[str, str]]:
        return list(self._query_params.items())

    def build_extra_query_string(self) -> str:
        """URL-encode the extra query parameters, joined with ``&``."""
        return "&".join(
            f"{quote(str(key), safe='')}={quote(str(value), safe='')}"
            for key, value in self.generate_extra_query_params()
        )

    def __repr__(self) -> str:
        return (
            f"RequestOptions(headers={self._headers!r}, "
            f"query_params={self._query_params!r})"
        )
