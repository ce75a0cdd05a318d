"""Request type definitions."""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .common import HttpMethod


class RequestDescriptor(BaseModel):
    """Transport-neutral description of one call.

    Built once per call. Only the host changes between attempts; the
    path, query string, body and headers stay fixed.
    """

    method: HttpMethod
    path: str
    extra_query: str = ""
    body: Optional[str] = None
    headers: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_body(self) -> "RequestDescriptor":
        """GET and DELETE requests never carry a body."""
        if self.body is not None and not self.method.has_body:
            raise ValueError(f"{self.method.value} requests cannot carry a body")
        return self
