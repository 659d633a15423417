"""REST API for exporting and storing tactics boards."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import ValidationError

from tactics_board.api.schemas import ErrorDetail, ErrorResponse, ExportRequest, TacticResponse
from tactics_board.export import ScreenshotService
from tactics_board.models import FieldSnapshot, TacticPlayer, TacticSubmission
from tactics_board.persistence import TacticRecord, TacticStore
from tactics_board.render import render_field_page


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

INVALID_FIELD_STATE = "Invalid field state provided"
EXPORT_FAILED = "Failed to export field image"
VALIDATION_FAILED = "Validation failed"

_MEDIA_TYPES = {"png": "image/png", "jpeg": "image/jpeg"}


def _error_details(exc: ValidationError) -> list[ErrorDetail]:
    return [
        ErrorDetail(field=".".join(str(part) for part in error["loc"]) or "body", message=error["msg"])
        for error in exc.errors()
    ]


def _error_response(status_code: int, error: str, *, message: str | None = None, details: list[ErrorDetail] | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _record_to_response(record: TacticRecord) -> TacticResponse:
    return TacticResponse(
        id=record.tactic_id,
        created_at=record.created_at.isoformat(),
        title=record.title,
        formation=record.formation,
        tags=record.tags,
        description=record.description,
        players=[TacticPlayer.model_validate(player) for player in record.players],
    )


def create_app(
    *,
    screenshot_service: ScreenshotService | None = None,
    store: TacticStore | None = None,
) -> FastAPI:
    service = screenshot_service or ScreenshotService()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await service.close()

    app = FastAPI(title="tactics board", lifespan=lifespan)
    app.state.screenshot_service = service
    app.state.tactic_store = store or TacticStore(Path(__file__).resolve().parent.parent / "tactics.sqlite")

    async def parse_snapshot(request: Request, model: type[FieldSnapshot]) -> FieldSnapshot | JSONResponse:
        try:
            return model.model_validate(await request.json())
        except ValidationError as exc:
            return _error_response(400, INVALID_FIELD_STATE, details=_error_details(exc))
        except ValueError as exc:
            return _error_response(400, INVALID_FIELD_STATE, details=[ErrorDetail(field="body", message=str(exc))])

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/export/field")
    async def export_field(request: Request) -> Response:
        parsed = await parse_snapshot(request, ExportRequest)
        if isinstance(parsed, JSONResponse):
            return parsed
        payload: ExportRequest = parsed
        logger.info(
            "Export request: rotation=%s tilt=%s zoom=%s players=%d marker=%s labels=%s format=%s",
            payload.rotation_angle,
            payload.tilt_angle,
            payload.zoom_level,
            len(payload.players),
            payload.marker_type,
            payload.show_player_labels,
            payload.image_format,
        )
        try:
            image = await service.capture_field(payload.snapshot(), payload.image_format)
        except Exception as exc:
            logger.exception("Field export failed")
            return _error_response(500, EXPORT_FAILED, message=str(exc))
        return Response(
            content=image,
            media_type=_MEDIA_TYPES[payload.image_format],
            headers={
                "Content-Disposition": f'attachment; filename="lineup-field.{payload.extension}"',
                "Content-Length": str(len(image)),
            },
        )

    @app.post("/field/preview", response_class=HTMLResponse)
    async def field_preview(request: Request) -> Response:
        parsed = await parse_snapshot(request, FieldSnapshot)
        if isinstance(parsed, JSONResponse):
            return parsed
        return HTMLResponse(render_field_page(parsed))

    @app.post("/tactics", status_code=201)
    async def create_tactic(request: Request) -> JSONResponse:
        try:
            submission = TacticSubmission.model_validate(await request.json())
        except ValidationError as exc:
            return _error_response(400, VALIDATION_FAILED, details=_error_details(exc))
        except ValueError as exc:
            return _error_response(400, VALIDATION_FAILED, details=[ErrorDetail(field="body", message=str(exc))])
        record = app.state.tactic_store.save_tactic(submission)
        logger.info("Stored tactic %s (%s)", record.tactic_id, record.formation)
        return JSONResponse(status_code=201, content={"success": True, "data": {"id": record.tactic_id}})

    @app.get("/tactics/{tactic_id}", response_model=TacticResponse)
    async def get_tactic(tactic_id: str) -> TacticResponse:
        record = app.state.tactic_store.get_tactic(tactic_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Tactic not found")
        return _record_to_response(record)

    return app
