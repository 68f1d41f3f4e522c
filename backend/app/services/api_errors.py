"""Errors that map directly onto an HTTP error response."""
from __future__ import annotations

from typing import Any, Dict, List, Optional


class ApiError(Exception):
    def __init__(self, status_code: int, error: str, details: Optional[List[str]] = None):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.details:
            body["details"] = self.details
        return body
