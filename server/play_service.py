"""REST service to play Klondike solitaire."""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from klondike.collaborators import InMemoryPersistence
from klondike.config import AssetConfig, EngineConfig
from klondike.game import KlondikeEngine
from klondike.service import ActionView, TableService

logger = logging.getLogger(__name__)


class StartRequest(BaseModel):
    theme: Optional[str] = None
    seed: Optional[int] = None
    player: Optional[str] = None
    asset_listing: Optional[Dict[str, List[str]]] = None
    asset_base_url: str = ""


class MoveRequest(BaseModel):
    card_id: Optional[str] = None
    card_ids: Optional[List[str]] = None
    destination: str


class ThemeRequest(BaseModel):
    theme: str


# Completion times per player, shared by every session of that player.
completions: Dict[str, InMemoryPersistence] = {}
sessions: Dict[str, TableService] = {}


app = FastAPI(title="Klondike Play Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def ensure_session(session_id: str) -> TableService:
    service = sessions.get(session_id)
    if service is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return service


def action_payload(view: ActionView) -> Dict[str, object]:
    if not view.accepted:
        raise HTTPException(status_code=400, detail=view.reason)
    return {"state": asdict(view.table)}


def best_time(player: Optional[str]) -> Optional[float]:
    if player is None or player not in completions:
        return None
    return completions[player].best_time


@app.post("/session/start")
def start_session(request: StartRequest) -> Dict[str, object]:
    assets = AssetConfig(listing=request.asset_listing or {}, base_url=request.asset_base_url)
    if request.theme:
        assets.theme = request.theme
    config = EngineConfig(seed=request.seed, assets=assets)
    persistence = None
    if request.player is not None:
        persistence = completions.setdefault(request.player, InMemoryPersistence())
    engine = KlondikeEngine(config, persistence=persistence)
    if request.player is not None:
        engine.attach_session(request.player)
    service = TableService(engine)
    view = service.start_game()
    session_id = uuid.uuid4().hex
    sessions[session_id] = service
    logger.info("Started session %s", session_id)
    return {
        "session_id": session_id,
        "state": asdict(view),
        "best_time": best_time(request.player),
    }


@app.get("/session/{session_id}")
def get_state(session_id: str) -> Dict[str, object]:
    service = ensure_session(session_id)
    return {"state": asdict(service.get_table_view())}


@app.post("/session/{session_id}/move")
def move(session_id: str, request: MoveRequest) -> Dict[str, object]:
    service = ensure_session(session_id)
    if request.card_ids:
        view = service.move_run(request.card_ids, request.destination)
    elif request.card_id is not None:
        view = service.move_card(request.card_id, request.destination)
    else:
        raise HTTPException(status_code=422, detail="card_id or card_ids is required")
    return action_payload(view)


@app.post("/session/{session_id}/draw")
def draw(session_id: str) -> Dict[str, object]:
    service = ensure_session(session_id)
    return action_payload(service.draw())


@app.post("/session/{session_id}/restart")
def restart(session_id: str) -> Dict[str, object]:
    service = ensure_session(session_id)
    return {"state": asdict(service.restart_game())}


@app.post("/session/{session_id}/theme")
def change_theme(session_id: str, request: ThemeRequest) -> Dict[str, object]:
    service = ensure_session(session_id)
    return {"state": asdict(service.change_theme(request.theme))}


@app.post("/session/{session_id}/pause")
def pause(session_id: str) -> Dict[str, object]:
    service = ensure_session(session_id)
    return {"state": asdict(service.pause())}


@app.post("/session/{session_id}/resume")
def resume(session_id: str) -> Dict[str, object]:
    service = ensure_session(session_id)
    return {"state": asdict(service.resume())}
