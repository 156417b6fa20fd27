from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from clinic_booking.api.v1.form_view import build_form_view
from clinic_booking.api.v1.schemas import (
    CreateFormRequestSchema,
    FormViewSchema,
    SetFieldRequestSchema,
    SubmitResponseSchema,
)
from clinic_booking.application.exceptions import UnknownFieldError
from clinic_booking.application.ports.form_session_store import FormSessionStorePort
from clinic_booking.domain.entities.form_session import FormSession
from clinic_booking.wiring.dependencies import build_controller, get_form_store

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_session(session_id: str, store: FormSessionStorePort) -> FormSession:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Form session not found")
    return session


def _render(session_id: str, session: FormSession) -> FormViewSchema:
    view = build_form_view(
        session_id,
        session.controller.snapshot(),
        flash_success=session.flash_success,
        flash_error=session.flash_error,
    )
    session.flash_success = None
    return view


@router.post("/forms", response_model=FormViewSchema, status_code=201)
async def create_form(
    req: CreateFormRequestSchema,
    store: FormSessionStorePort = Depends(get_form_store),
):
    try:
        controller = build_controller(req.kind.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    session = FormSession(controller=controller, flash_success=req.flash_success, flash_error=req.flash_error)
    await controller.wait_idle()
    session_id = store.create(session)
    logger.info("Form session created", extra={"form": req.kind.value, "session_id": session_id})
    return _render(session_id, session)


@router.get("/forms/{session_id}", response_model=FormViewSchema)
def get_form(session_id: str, store: FormSessionStorePort = Depends(get_form_store)):
    return _render(session_id, _get_session(session_id, store))


@router.put("/forms/{session_id}/fields/{name}", response_model=FormViewSchema)
async def set_field(
    session_id: str,
    name: str,
    req: SetFieldRequestSchema,
    store: FormSessionStorePort = Depends(get_form_store),
):
    session = _get_session(session_id, store)
    try:
        accepted = session.controller.set_field(name, req.value)
    except UnknownFieldError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if not accepted:
        raise HTTPException(status_code=409, detail=f"Field '{name}' is locked until earlier steps are filled")

    session.flash_error = None
    await session.controller.wait_idle()
    return _render(session_id, session)


@router.post("/forms/{session_id}/submit", response_model=SubmitResponseSchema)
async def submit_form(session_id: str, store: FormSessionStorePort = Depends(get_form_store)):
    session = _get_session(session_id, store)
    await session.controller.wait_idle()
    outcome = await session.controller.submit()
    return SubmitResponseSchema(
        status=outcome.status,
        view=_render(session_id, session),
        missing_fields=list(outcome.missing_fields),
    )


@router.delete("/forms/{session_id}", status_code=204)
def delete_form(session_id: str, store: FormSessionStorePort = Depends(get_form_store)) -> Response:
    if not store.delete(session_id):
        raise HTTPException(status_code=404, detail="Form session not found")
    return Response(status_code=204)
