"""Pydantic models for API I/O."""

from .field import ErrorDetail, ErrorResponse, ExportRequest
from .tactic import TacticResponse

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "ExportRequest",
    "TacticResponse",
]
