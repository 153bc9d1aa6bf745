"""
Request and response models for the HTTP API.
"""

from pydantic import BaseModel, Field
from typing import List


class InfoCreateRequest(BaseModel):
    id: str
    category: str
    content: str
    timestamp: str
    submitter: str
    group: str

    def as_args(self) -> List[str]:
        """Positional argument order used by the record store."""
        return [self.id, self.category, self.content, self.timestamp, self.submitter, self.group]


class InfoCreateResponse(BaseModel):
    success: bool
    id: str


class InvokeRequest(BaseModel):
    function: str
    args: List[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error_type: str
    message: str


class HealthResponse(BaseModel):
    status: str
    version: str
    backend: str
    record_count: int
