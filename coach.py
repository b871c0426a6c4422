#!/usr/bin/env python3
"""
Coach API endpoints for the topical authority funnel
One session walks topic → 30 pillars → 10 lesson variations → 25 audience questions
Sessions are kept in memory only
"""

import logging
from functools import lru_cache
from typing import Any, Dict, List
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from pydantic import BaseModel, Field

from topical_authority.backends import create_backend
from topical_authority.config import load_settings
from topical_authority.errors import (
    CoachError,
    EmptyReplyError,
    InvalidSelectionError,
    InvalidTransitionError,
    MissingTopicError,
    SessionBusyError,
    SessionNotFoundError,
)
from topical_authority.export import export_filename, render_strategy
from topical_authority.gateway import GenerationGateway
from topical_authority.i18n import labels
from topical_authority.models import Language, Message, PillarSort, sort_pillars
from topical_authority.orchestrator import FunnelOrchestrator
from topical_authority.state import Session, SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/coach", tags=["coach"])

_store = SessionStore()


def get_store() -> SessionStore:
    return _store


@lru_cache()
def get_gateway() -> GenerationGateway:
    """Gateway for the configured provider, built once per process."""
    settings = load_settings()
    logger.info(f"Coach gateway using provider={settings.provider} model={settings.model_name}")
    return GenerationGateway(create_backend(settings), mentor_temperature=settings.mentor_temperature)


# --- Models ---

class CreateSessionRequest(BaseModel):
    language: Language = "en"


class ReplyRequest(BaseModel):
    text: str = Field(min_length=1)


class SelectPillarRequest(BaseModel):
    pillar_id: str


class SelectVariationRequest(BaseModel):
    variation_id: str


class LanguageRequest(BaseModel):
    language: Language


class ActionResponse(BaseModel):
    """Messages appended by the action plus the resulting session snapshot"""
    messages: List[Message] = Field(default_factory=list)
    session: Dict[str, Any]


# --- Helpers ---

ERROR_STATUS = {
    SessionNotFoundError: 404,
    SessionBusyError: 409,
    InvalidSelectionError: 422,
    InvalidTransitionError: 422,
    MissingTopicError: 422,
    EmptyReplyError: 422,
}


def _http_error(e: CoachError) -> HTTPException:
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(e, error_type):
            return HTTPException(status_code=status_code, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


def _session(session_id: str, store: SessionStore) -> Session:
    try:
        return store.get(session_id)
    except SessionNotFoundError as e:
        raise _http_error(e)


def _orchestrator(session_id: str, store: SessionStore, gateway: GenerationGateway) -> FunnelOrchestrator:
    return FunnelOrchestrator(_session(session_id, store), gateway)


def _action_response(orchestrator: FunnelOrchestrator, messages: List[Message]) -> ActionResponse:
    return ActionResponse(messages=messages, session=orchestrator.session.snapshot())


# --- Endpoints ---

@router.get("/labels")
async def get_labels(language: Language = "en"):
    """Localized UI labels for the language toggle"""
    return {"language": language, "labels": labels(language)}


@router.post("/sessions", status_code=201)
async def create_session(body: CreateSessionRequest, store: SessionStore = Depends(get_store)):
    """Start a new session in ORIENTATION with the mentor greeting"""
    session = store.create(body.language)
    logger.info(f"Created coach session {session.id} ({body.language})")
    return session.snapshot()


@router.get("/sessions/{session_id}")
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_store),
):
    return _session(session_id, store).snapshot()


@router.post("/sessions/{session_id}/reply", response_model=ActionResponse)
async def submit_reply(
    session_id: str,
    body: ReplyRequest,
    store: SessionStore = Depends(get_store),
    gateway: GenerationGateway = Depends(get_gateway),
):
    """
    Free-text reply: sets the topic, confirms it, or talks to the mentor
    depending on the current stage
    """
    orchestrator = _orchestrator(session_id, store, gateway)
    try:
        messages = await orchestrator.submit_reply(body.text)
        return _action_response(orchestrator, messages)
    except CoachError as e:
        raise _http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/sessions/{session_id}/confirm", response_model=ActionResponse)
async def confirm_topic(
    session_id: str,
    store: SessionStore = Depends(get_store),
    gateway: GenerationGateway = Depends(get_gateway),
):
    """Explicitly confirm the topic and generate pillars"""
    orchestrator = _orchestrator(session_id, store, gateway)
    try:
        messages = await orchestrator.confirm_topic()
        return _action_response(orchestrator, messages)
    except CoachError as e:
        raise _http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/sessions/{session_id}/pillars/regenerate", response_model=ActionResponse)
async def regenerate_pillars(
    session_id: str,
    store: SessionStore = Depends(get_store),
    gateway: GenerationGateway = Depends(get_gateway),
):
    orchestrator = _orchestrator(session_id, store, gateway)
    try:
        messages = await orchestrator.regenerate_pillars()
        return _action_response(orchestrator, messages)
    except CoachError as e:
        raise _http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/sessions/{session_id}/pillars")
async def list_pillars(
    session_id: str,
    sort: PillarSort = Query("category"),
    store: SessionStore = Depends(get_store),
):
    """Pillars sorted by category (then title) or by title"""
    session = _session(session_id, store)
    pillars = sort_pillars(session.pillars or [], sort)
    return {"sort": sort, "pillars": [p.model_dump() for p in pillars]}


@router.post("/sessions/{session_id}/pillars/select", response_model=ActionResponse)
async def select_pillar(
    session_id: str,
    body: SelectPillarRequest,
    store: SessionStore = Depends(get_store),
    gateway: GenerationGateway = Depends(get_gateway),
):
    """Select a pillar and generate its lesson variations"""
    orchestrator = _orchestrator(session_id, store, gateway)
    try:
        messages = await orchestrator.select_pillar(body.pillar_id)
        return _action_response(orchestrator, messages)
    except CoachError as e:
        raise _http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/sessions/{session_id}/variations/select", response_model=ActionResponse)
async def select_variation(
    session_id: str,
    body: SelectVariationRequest,
    store: SessionStore = Depends(get_store),
    gateway: GenerationGateway = Depends(get_gateway),
):
    """Select a lesson variation and generate its audience questions"""
    orchestrator = _orchestrator(session_id, store, gateway)
    try:
        messages = await orchestrator.select_variation(body.variation_id)
        return _action_response(orchestrator, messages)
    except CoachError as e:
        raise _http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/sessions/{session_id}/language")
async def set_language(
    session_id: str,
    body: LanguageRequest,
    store: SessionStore = Depends(get_store),
):
    """Switch the language used for every later mentor and generation call"""
    session = _session(session_id, store)
    session.language = body.language
    return session.snapshot()


@router.get("/sessions/{session_id}/export")
async def export_strategy(
    session_id: str,
    store: SessionStore = Depends(get_store),
):
    """Download the strategy as markdown"""
    session = _session(session_id, store)
    if session.is_loading:
        raise _http_error(SessionBusyError(session.id))
    document = render_strategy(session)

    filename = quote(export_filename(session))
    return Response(
        content=document.encode("utf-8"),
        media_type="text/markdown; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{filename}"},
    )
