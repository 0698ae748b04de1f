"""FastAPI application over one in-process workbook"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from chat.orchestrator import ChatOrchestrator
from config import settings
from core.enums import MessageRole
from core.exceptions import CognisheetError, MalformedAddress, SheetNotFound
from core.models import CellPatch, ChatMessage, Sheet
from grid.address import format_address, parse_address
from grid.evaluator import resolve_cell
from grid.store import Workbook, ensure_capacity, set_cell

logger = logging.getLogger(__name__)


class SheetCreateRequest(BaseModel):
    name: Optional[str] = None


class SheetRenameRequest(BaseModel):
    name: str


class SelectionRequest(BaseModel):
    range: Optional[str] = None  # "A1:B3"; null clears
    sheet_id: Optional[str] = None


class ChatRequest(BaseModel):
    message: str


class ApplyRequest(BaseModel):
    index: Optional[int] = None  # Transcript index; latest formula when omitted


def sheet_payload(sheet: Sheet) -> Dict[str, Any]:
    """Sheet with every stored cell's raw input and resolved value"""
    return {
        "id": sheet.id,
        "name": sheet.name,
        "row_count": sheet.row_count,
        "column_count": sheet.column_count,
        "cells": {
            key: {**cell.model_dump(mode="json"), "value": resolve_cell(sheet, key)}
            for key, cell in sheet.cells.items()
        },
    }


def message_payload(message: Optional[ChatMessage]) -> Optional[Dict[str, Any]]:
    return message.model_dump(mode="json") if message is not None else None


def create_app(orchestrator: Optional[ChatOrchestrator] = None) -> FastAPI:
    """Build the API around an orchestrator (a fresh workbook by default)"""
    orchestrator = orchestrator or ChatOrchestrator(Workbook())

    app = FastAPI(
        title="Cognisheet API",
        description="Spreadsheet with an AI chat assistant",
        version="1.0.0"
    )
    app.state.orchestrator = orchestrator

    cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in cors_origins_str.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SheetNotFound)
    async def sheet_not_found(request: Request, exc: SheetNotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(MalformedAddress)
    async def malformed_address(request: Request, exc: MalformedAddress):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(CognisheetError)
    async def cognisheet_error(request: Request, exc: CognisheetError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    # Sheets

    @app.get("/sheets")
    async def list_sheets():
        workbook = orchestrator.workbook
        return {
            "active_sheet_id": workbook.active_sheet_id,
            "sheets": [{"id": sheet.id, "name": sheet.name} for sheet in workbook.sheets],
        }

    @app.post("/sheets", status_code=201)
    async def create_sheet(request: SheetCreateRequest):
        sheet = orchestrator.workbook.add_sheet(request.name)
        orchestrator.clear_selection()
        return sheet_payload(sheet)

    @app.get("/sheets/{sheet_id}")
    async def get_sheet(sheet_id: str):
        return sheet_payload(orchestrator.workbook.get_sheet(sheet_id))

    @app.patch("/sheets/{sheet_id}")
    async def rename_sheet(sheet_id: str, request: SheetRenameRequest):
        sheet = orchestrator.workbook.rename_sheet(sheet_id, request.name)
        return {"id": sheet.id, "name": sheet.name}

    @app.delete("/sheets/{sheet_id}")
    async def delete_sheet(sheet_id: str):
        if not orchestrator.workbook.remove_sheet(sheet_id):
            raise HTTPException(status_code=409, detail="Cannot remove the last sheet")
        orchestrator.clear_selection()
        return {"removed": sheet_id}

    @app.post("/sheets/{sheet_id}/activate")
    async def activate_sheet(sheet_id: str):
        sheet = orchestrator.switch_sheet(sheet_id)
        return {"active_sheet_id": sheet.id}

    @app.put("/sheets/{sheet_id}/cells/{address}")
    async def write_cell(sheet_id: str, address: str, patch: CellPatch):
        sheet = orchestrator.workbook.get_sheet(sheet_id)
        key = format_address(parse_address(address))
        cell = set_cell(sheet, key, patch)
        ensure_capacity(sheet, key)
        return {
            "address": key,
            **cell.model_dump(mode="json"),
            "value": resolve_cell(sheet, key),
            "row_count": sheet.row_count,
            "column_count": sheet.column_count,
        }

    # Selection

    @app.post("/selection")
    async def set_selection(request: SelectionRequest):
        if request.sheet_id and request.sheet_id != orchestrator.workbook.active_sheet_id:
            orchestrator.switch_sheet(request.sheet_id)
        if request.range:
            orchestrator.select_range(request.range)
        else:
            orchestrator.clear_selection()
        reference = str(orchestrator.selection) if orchestrator.selection is not None else None
        return {"sheet_id": orchestrator.workbook.active_sheet_id, "range": reference}

    # Chat

    @app.get("/chat")
    async def get_transcript():
        return {
            "is_processing": orchestrator.is_processing,
            "messages": [message_payload(message) for message in orchestrator.transcript],
        }

    @app.post("/chat")
    async def chat(request: ChatRequest):
        reply = await orchestrator.send_message(request.message)
        return {"reply": message_payload(reply)}

    @app.post("/chat/stop")
    async def stop():
        return {"stopped": orchestrator.stop()}

    @app.delete("/chat")
    async def clear_chat():
        orchestrator.clear()
        return {"cleared": True}

    @app.post("/chat/apply")
    async def apply_formula(request: ApplyRequest):
        messages: List[ChatMessage] = orchestrator.transcript
        if request.index is not None:
            if not 0 <= request.index < len(messages):
                raise HTTPException(status_code=404, detail="Message not found")
            message = messages[request.index]
        else:
            message = next(
                (
                    m for m in reversed(messages)
                    if m.attachments is not None and m.attachments.formula
                ),
                None,
            )
            if message is None:
                raise HTTPException(status_code=404, detail="No formula suggestion to apply")

        address = orchestrator.apply_formula(message)
        sheet_id = message.attachments.formula_target.sheet_id
        sheet = orchestrator.workbook.get_sheet(sheet_id)
        return {"sheet_id": sheet_id, "address": address, "value": resolve_cell(sheet, address)}

    # Import

    @app.post("/upload")
    async def upload_file(file: UploadFile = File(...)):
        suffix = Path(file.filename or "").suffix
        content = await file.read()
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / f"{Path(file.filename or 'upload').stem}{suffix}"
            path.write_bytes(content)
            message = orchestrator.import_file(str(path))

        if message.role == MessageRole.ERROR:
            raise HTTPException(status_code=400, detail=message.content)
        workbook = orchestrator.workbook
        return {
            "message": message_payload(message),
            "active_sheet_id": workbook.active_sheet_id,
            "sheets": [{"id": sheet.id, "name": sheet.name} for sheet in workbook.sheets],
        }

    logger.info("API ready (LLM providers: %s)", settings.LLM_PROVIDER_PRIORITY)
    return app


app = create_app()
