"""FastAPI server for the Latin Quest drill game."""

import logging
import os

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import Optional

from core.config import DIFFICULTY, MODES, SERVICE_NAME, UNLOCK_THRESHOLD
from core.interfaces import Storage
from core.lexicon import DEFAULT_LEXICON, resolve_noun_form
from core.progression import field_guide, next_reward, progress_to_next
from core.rewards import Reward
from core.rounds import RoundSummary
from core.session import GameSession

from server.clock import LoopClock, QueueSpeaker
from server.file_storage import FileStorage
from server.postgres_storage import PostgresStorage

logger = logging.getLogger(__name__)


# Pydantic models for API
class UserRequest(BaseModel):
    user_id: str = "default"


class StartRoundRequest(BaseModel):
    mode: str
    difficulty: Optional[str] = None
    user_id: str = "default"


class LatinRequest(BaseModel):
    item_id: str
    user_id: str = "default"


class SelectionRequest(BaseModel):
    tile_id: Optional[str] = None      # Sighting Log
    latin_id: Optional[str] = None     # Match; falls back to the chosen Latin word
    meaning_id: Optional[str] = None   # Match
    user_id: str = "default"


class SettingsRequest(BaseModel):
    name: Optional[str] = None
    difficulty: Optional[str] = None
    sound: Optional[bool] = None
    user_id: str = "default"


class RoundResponse(BaseModel):
    round: Optional[dict]
    feedback: Optional[dict] = None
    speak: list[str] = []
    summary: Optional[dict] = None
    new_unlock: Optional[dict] = None


class ProgressResponse(BaseModel):
    player: dict
    best: dict
    collection: dict
    settings: dict
    progress_to_next: dict
    next_reward: Optional[dict]
    last_round: Optional[dict]


# Global state (one session per player)
storage: Storage = None
clock_factory = LoopClock
sessions: dict[str, GameSession] = {}
speakers: dict[str, QueueSpeaker] = {}


def log_event(event: str, user_id: str, **data) -> None:
    """Log an event to the storage backend when it keeps an event log."""
    if storage and hasattr(storage, 'log_event'):
        storage.log_event(event, user_id, **data)


def get_session(user_id: str = "default") -> GameSession:
    """Get or create the game session for a user."""
    if user_id not in sessions:
        speakers[user_id] = QueueSpeaker()

        def on_round_end(summary: RoundSummary, reward: Reward | None) -> None:
            log_event('round_end', user_id, **summary.to_dict())
            if reward:
                log_event('unlock', user_id, reward=reward.id)

        sessions[user_id] = GameSession(
            storage, user_id,
            clock=clock_factory(),
            speaker=speakers[user_id],
            on_round_end=on_round_end
        )
    return sessions[user_id]


def round_response(session: GameSession, feedback=None) -> RoundResponse:
    """Current round plus anything the client must show or pronounce."""
    speaker = speakers.get(session.user_id)
    view = session.round_view()
    ended = view is not None and view['phase'] == 'ended'
    return RoundResponse(
        round=view,
        feedback=feedback.to_dict() if feedback else None,
        speak=speaker.drain() if speaker else [],
        summary=session.last_summary.to_dict() if ended and session.last_summary else None,
        new_unlock=session.new_unlock.to_dict() if ended and session.new_unlock else None
    )


def progress_response(session: GameSession) -> ProgressResponse:
    data = session.progress.to_dict()
    upcoming = next_reward(session.progress.unlocked)
    return ProgressResponse(
        player=data['player'],
        best=data['best'],
        collection=data['collection'],
        settings=data['settings'],
        progress_to_next=progress_to_next(session.progress.total_xp),
        next_reward=upcoming.to_dict() if upcoming else None,
        last_round=session.last_summary.to_dict() if session.last_summary else None
    )


def require_round(session: GameSession) -> None:
    if session.round_view() is None:
        raise HTTPException(status_code=404, detail="No round started")


app = FastAPI(title="Latin Quest API", description="Timed Latin grammar drills")


@app.on_event("startup")
async def startup():
    """Initialize storage on startup."""
    global storage

    # Use file storage by default, set QUEST_STORAGE=postgres to use PostgreSQL
    storage_type = os.environ.get('QUEST_STORAGE', 'file')
    if storage_type == 'postgres':
        storage = PostgresStorage()
        logger.info("Using PostgreSQL storage")
    else:
        storage = FileStorage()
        logger.info(f"Using file storage in {storage.state_dir}")


@app.on_event("shutdown")
async def shutdown():
    """Release the database connection, if any."""
    if storage and hasattr(storage, 'close'):
        storage.close()


@app.get("/")
async def root():
    """Service info, used by clients as a health check."""
    return {"service": SERVICE_NAME, "status": "ok"}


@app.get("/api/users")
async def list_users():
    """List all players with saved progress."""
    return {"users": storage.list_users()}


@app.get("/api/progress", response_model=ProgressResponse)
async def get_progress(user_id: str = "default"):
    """Lifetime progress for a player."""
    return progress_response(get_session(user_id))


@app.post("/api/settings", response_model=ProgressResponse)
async def update_settings(request: SettingsRequest):
    """Change player name, difficulty or sound."""
    session = get_session(request.user_id)
    if request.difficulty is not None:
        if request.difficulty not in DIFFICULTY:
            raise HTTPException(status_code=400, detail=f"Unknown difficulty: {request.difficulty}")
        session.change_difficulty(request.difficulty)
    if request.name is not None:
        session.rename(request.name)
    if request.sound is not None and request.sound != session.progress.sound:
        session.toggle_sound()
    return progress_response(session)


@app.post("/api/progress/reset", response_model=ProgressResponse)
async def reset_progress(request: UserRequest):
    """Wipe a player's progress and collection."""
    session = get_session(request.user_id)
    session.reset_progress()
    log_event('reset', request.user_id)
    return progress_response(session)


@app.post("/api/round/start", response_model=RoundResponse)
async def start_round(request: StartRoundRequest):
    """Start a new round in the requested mode."""
    if request.mode not in MODES:
        raise HTTPException(status_code=400, detail=f"Unknown mode: {request.mode}")
    if request.difficulty is not None and request.difficulty not in DIFFICULTY:
        raise HTTPException(status_code=400, detail=f"Unknown difficulty: {request.difficulty}")
    session = get_session(request.user_id)
    session.start_round(request.mode, request.difficulty)
    log_event('round_start', request.user_id, mode=request.mode,
              difficulty=session.engine.difficulty)
    return round_response(session)


@app.get("/api/round", response_model=RoundResponse)
async def get_round(user_id: str = "default"):
    """Current round state (timer, score, board)."""
    session = get_session(user_id)
    require_round(session)
    return round_response(session)


@app.post("/api/round/latin", response_model=RoundResponse)
async def choose_latin(request: LatinRequest):
    """Pick the Latin side of a match pair."""
    session = get_session(request.user_id)
    require_round(session)
    feedback = session.choose_latin(request.item_id)
    return round_response(session, feedback)


@app.post("/api/round/select", response_model=RoundResponse)
async def submit_selection(request: SelectionRequest):
    """Place a tile (Sighting Log) or submit a meaning for the chosen Latin word (Match)."""
    session = get_session(request.user_id)
    require_round(session)
    if request.tile_id is not None:
        selection = request.tile_id
    elif request.meaning_id is not None:
        selection = (request.latin_id, request.meaning_id) if request.latin_id else request.meaning_id
    else:
        raise HTTPException(status_code=400, detail="Provide tile_id or meaning_id")
    feedback = session.submit_selection(selection)
    return round_response(session, feedback)


@app.get("/api/round/hint")
async def get_hint(user_id: str = "default"):
    """Hint for the chosen Latin word or the sentence grammar tip."""
    session = get_session(user_id)
    require_round(session)
    return {"hint": session.engine.hint()}


@app.post("/api/round/advance", response_model=RoundResponse)
async def advance_round(request: UserRequest):
    """Next round after the current one ended. Ignored while a round is running."""
    session = get_session(request.user_id)
    require_round(session)
    session.advance_round()
    return round_response(session)


@app.post("/api/round/restart", response_model=RoundResponse)
async def restart_round(request: UserRequest):
    """Throw away the current round and start a fresh one."""
    session = get_session(request.user_id)
    require_round(session)
    session.restart_round()
    return round_response(session)


@app.get("/api/field-guide")
async def get_field_guide(user_id: str = "default"):
    """Unlocked and locked bird cards."""
    session = get_session(user_id)
    guide = field_guide(session.progress.unlocked)
    guide['threshold'] = UNLOCK_THRESHOLD
    return guide


@app.get("/api/lexicon")
async def get_lexicon():
    """Reference tables for the Learn screen."""
    return {
        "nouns": [
            {
                "id": n.id,
                "nom_sg": resolve_noun_form(n, 'nom_sg'),
                "acc_sg": resolve_noun_form(n, 'acc_sg'),
                "gender": n.gender,
                "declension": n.declension,
                "meaning": n.meaning
            }
            for n in DEFAULT_LEXICON.nouns
        ],
        "verbs": [
            {"id": v.id, "pres_1s": v.pres_1s, "pres_3s": v.pres_3s,
             "meaning": v.meaning, "pattern": v.pattern}
            for v in DEFAULT_LEXICON.verbs
        ],
        "adjectives": [
            {"id": a.id, "lemma": a.lemma, "meaning": a.meaning, "forms": a.forms}
            for a in DEFAULT_LEXICON.adjectives
        ]
    }


@app.get("/api/events")
async def get_events(user_id: str = "default", limit: int = 50):
    """Recent round and unlock events for a player."""
    if not hasattr(storage, 'get_recent_events'):
        return {"events": [], "available": False}
    events = storage.get_recent_events(user_id, limit)
    for event in events:
        if hasattr(event.get('timestamp'), 'isoformat'):
            event['timestamp'] = event['timestamp'].isoformat()
    return {"events": events, "available": True}


def create_app():
    """Factory function for creating the app (useful for testing)."""
    return app
