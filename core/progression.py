"""Progression: fold round results into lifetime progress and unlock rewards."""

import logging

from .config import DEFAULT_PLAYER_NAME, DIFFICULTY, UNLOCK_THRESHOLD
from .models import PersistedProgress
from .rewards import REWARD_CATALOG, Reward
from .rounds import RoundSummary

logger = logging.getLogger(__name__)


def next_unlock(total_xp: int, unlocked: list[str], catalog=REWARD_CATALOG) -> Reward | None:
    """The single reward earned at this XP total, if any.

    At most one card per call, even when several thresholds were crossed.
    """
    target = max(0, min(total_xp // UNLOCK_THRESHOLD, len(catalog)))
    owned = sum(1 for r in catalog if r.id in unlocked)
    if owned >= target:
        return None
    return next((r for r in catalog if r.id not in unlocked), None)


def apply_round(progress: PersistedProgress, summary: RoundSummary,
                catalog=REWARD_CATALOG) -> Reward | None:
    """Add a finished round to lifetime totals. Returns a newly unlocked reward."""
    progress.total_xp += max(0, summary.score)
    progress.best_streak = max(progress.best_streak, summary.max_combo)
    progress.high_score = max(progress.high_score, summary.score)

    reward = next_unlock(progress.total_xp, progress.unlocked, catalog)
    if reward is not None:
        progress.unlocked.append(reward.id)
        logger.info(f"Unlocked {reward.id} at {progress.total_xp} XP")
    return reward


def next_reward(unlocked: list[str], catalog=REWARD_CATALOG) -> Reward | None:
    return next((r for r in catalog if r.id not in unlocked), None)


def progress_to_next(total_xp: int) -> dict:
    """XP gathered toward the next card threshold."""
    current = total_xp % UNLOCK_THRESHOLD
    return {
        'current': current,
        'threshold': UNLOCK_THRESHOLD,
        'percent': current / UNLOCK_THRESHOLD * 100
    }


def field_guide(unlocked: list[str], catalog=REWARD_CATALOG) -> dict:
    """Catalog split into unlocked cards and the ones still hidden."""
    return {
        'unlocked': [r.to_dict() for r in catalog if r.id in unlocked],
        'locked': [r.to_dict() for r in catalog if r.id not in unlocked],
        'total': len(catalog)
    }


def rename_player(progress: PersistedProgress, name: str) -> None:
    progress.name = name.strip() if name and name.strip() else DEFAULT_PLAYER_NAME


def set_difficulty(progress: PersistedProgress, difficulty: str) -> None:
    if difficulty not in DIFFICULTY:
        raise ValueError(f"Unknown difficulty: {difficulty!r}")
    progress.difficulty = difficulty


def toggle_sound(progress: PersistedProgress) -> bool:
    progress.sound = not progress.sound
    return progress.sound
