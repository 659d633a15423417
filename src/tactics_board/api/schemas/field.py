"""Request/response bodies for the export endpoint."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel

from tactics_board.models import FieldSnapshot


class ExportRequest(FieldSnapshot):
    format: Literal["png", "jpg", "jpeg"] = "png"

    @property
    def image_format(self) -> Literal["png", "jpeg"]:
        return "png" if self.format == "png" else "jpeg"

    @property
    def extension(self) -> str:
        return "png" if self.format == "png" else "jpg"

    def snapshot(self) -> FieldSnapshot:
        return FieldSnapshot.model_validate(self.model_dump(exclude={"format"}))


class ErrorDetail(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str | None = None
    details: List[ErrorDetail] | None = None
