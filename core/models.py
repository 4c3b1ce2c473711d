"""Persisted player progress and its versioned schema."""

import logging
import math

from .config import DEFAULT_DIFFICULTY, DEFAULT_PLAYER_NAME, DIFFICULTY, PROGRESS_SCHEMA_VERSION

logger = logging.getLogger(__name__)


def _count(value, default: int = 0) -> int:
    """Non-negative integer field, default on anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return int(value)


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


class PersistedProgress:
    """Lifetime progress that survives restarts.

    Serialized shape:
        {version, player: {name, difficulty},
         best: {highScore, bestStreak, totalXP},
         collection: {unlocked: [...]}, settings: {sound}}
    """

    def __init__(self):
        self.name = DEFAULT_PLAYER_NAME
        self.difficulty = DEFAULT_DIFFICULTY
        self.high_score = 0
        self.best_streak = 0
        self.total_xp = 0
        self.unlocked = []
        self.sound = True

    def to_dict(self) -> dict:
        return {
            'version': PROGRESS_SCHEMA_VERSION,
            'player': {'name': self.name, 'difficulty': self.difficulty},
            'best': {
                'highScore': self.high_score,
                'bestStreak': self.best_streak,
                'totalXP': self.total_xp
            },
            'collection': {'unlocked': list(self.unlocked)},
            'settings': {'sound': self.sound}
        }

    @classmethod
    def from_dict(cls, data) -> 'PersistedProgress':
        """Build progress from a saved blob, defaulting each bad field on its own."""
        progress = cls()
        if not isinstance(data, dict):
            if data is not None:
                logger.warning(f"Ignoring malformed progress of type {type(data).__name__}")
            return progress

        version = data.get('version')
        if not isinstance(version, int) or version < 2:
            data = cls._migrate_v1(data)

        player = _section(data, 'player')
        name = player.get('name')
        if isinstance(name, str) and name.strip():
            progress.name = name
        difficulty = player.get('difficulty')
        if difficulty in DIFFICULTY:
            progress.difficulty = difficulty

        best = _section(data, 'best')
        progress.high_score = _count(best.get('highScore'))
        progress.best_streak = _count(best.get('bestStreak'))
        progress.total_xp = _count(best.get('totalXP'))

        unlocked = _section(data, 'collection').get('unlocked')
        if isinstance(unlocked, list):
            seen = set()
            for reward_id in unlocked:
                if isinstance(reward_id, str) and reward_id not in seen:
                    seen.add(reward_id)
                    progress.unlocked.append(reward_id)

        sound = _section(data, 'settings').get('sound')
        if isinstance(sound, bool):
            progress.sound = sound
        return progress

    @staticmethod
    def _migrate_v1(data: dict) -> dict:
        """Lift flat legacy keys into their sections when the section lacks them."""
        migrated = dict(data)
        legacy = {
            'player': {'name': 'name', 'difficulty': 'difficulty'},
            'best': {'highScore': 'highScore', 'bestStreak': 'bestStreak', 'totalXP': 'totalXP'},
            'collection': {'unlocked': 'unlocked'},
            'settings': {'sound': 'sound'}
        }
        for section, fields in legacy.items():
            merged = dict(_section(data, section))
            for field, old_key in fields.items():
                if field not in merged and old_key in data:
                    merged[field] = data[old_key]
            migrated[section] = merged
        migrated['version'] = PROGRESS_SCHEMA_VERSION
        return migrated
