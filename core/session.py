"""Game session: one player's progress, round engine and storage wired together."""

import logging
import random

from .generator import ChallengeGenerator
from .interfaces import Clock, ManualClock, Speaker, Storage
from .lexicon import DEFAULT_LEXICON, Lexicon
from .models import PersistedProgress
from .progression import apply_round, rename_player, set_difficulty, toggle_sound
from .rounds import RoundEngine, RoundSummary
from .validator import Feedback

logger = logging.getLogger(__name__)


class GameSession:
    """Loads progress on start and saves it after every progression or settings change."""

    def __init__(self, storage: Storage, user_id: str = "default", clock: Clock = None,
                 speaker: Speaker = None, rng: random.Random = None,
                 lexicon: Lexicon = DEFAULT_LEXICON, on_round_end=None):
        self.storage = storage
        self.on_round_end = on_round_end
        self.user_id = user_id
        self.progress = PersistedProgress.from_dict(storage.load_state(user_id))
        self.last_summary = None
        self.new_unlock = None
        self.engine = RoundEngine(
            ChallengeGenerator(lexicon, rng),
            clock or ManualClock(),
            speaker=speaker,
            sound_on=self.progress.sound,
            on_round_end=self._on_round_end
        )

    def save(self) -> None:
        self.storage.save_state(self.progress.to_dict(), self.user_id)

    def _on_round_end(self, summary: RoundSummary) -> None:
        self.last_summary = summary
        self.new_unlock = apply_round(self.progress, summary)
        self.save()
        if self.on_round_end:
            self.on_round_end(summary, self.new_unlock)

    # Round API

    def start_round(self, mode: str, difficulty: str | None = None) -> dict:
        """Start a round; difficulty defaults to the player's saved tier."""
        self.new_unlock = None
        return self.engine.start_round(difficulty or self.progress.difficulty, mode)

    def choose_latin(self, item_id: str) -> Feedback:
        return self.engine.choose_latin(item_id)

    def submit_selection(self, selection) -> Feedback:
        return self.engine.submit_selection(selection)

    def advance_round(self) -> dict | None:
        self.new_unlock = None
        return self.engine.advance_round()

    def restart_round(self) -> dict | None:
        self.new_unlock = None
        return self.engine.restart_round()

    def tick(self) -> bool:
        return self.engine.tick()

    def round_view(self) -> dict | None:
        return self.engine.view()

    # Settings

    def rename(self, name: str) -> None:
        rename_player(self.progress, name)
        self.save()

    def change_difficulty(self, difficulty: str) -> None:
        """Takes effect from the next started round."""
        set_difficulty(self.progress, difficulty)
        self.save()

    def toggle_sound(self) -> bool:
        sound = toggle_sound(self.progress)
        self.engine.sound_on = sound
        self.save()
        return sound

    def reset_progress(self) -> None:
        """Wipe lifetime progress back to defaults."""
        self.engine.abandon()
        self.progress = PersistedProgress()
        self.engine.sound_on = self.progress.sound
        self.last_summary = None
        self.new_unlock = None
        self.save()
        logger.info(f"Progress reset for {self.user_id}")
