"""Round state machine: timer, combo, score and the round lifecycle.

A round is ACTIVE from start until the clock runs out or the player solves
it, then ENDED until advanced or restarted. Every round gets a new
generation number; ticks carry the generation they were scheduled for so a
tick from a superseded round never touches the current one.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable

from .config import (
    BASE_XP, COMBO_BONUS_CAP, COMBO_STEP, MODE_NAMES, MODES,
    SPEED_BONUS_CAP, SPEED_FACTOR, difficulty_conf
)
from .generator import ChallengeGenerator
from .interfaces import Clock, NullSpeaker, Speaker
from .utils import clamp
from .validator import Feedback, check_match, check_sentence, pop_last

logger = logging.getLogger(__name__)

ACTIVE = 'active'
ENDED = 'ended'

REASON_TIME = "Time!"
REASON_MATCH_DONE = "Round complete!"
REASON_SENTENCE_DONE = "Correct! Round complete."


def xp_for(seconds_left: int, combo: int, multiplier: float = 1.0) -> int:
    """XP for one correct action, given the combo length including this action."""
    speed = clamp(math.floor(seconds_left * SPEED_FACTOR), 0, SPEED_BONUS_CAP)
    combo_bonus = clamp(combo * COMBO_STEP, 0, COMBO_BONUS_CAP)
    # Half-up rounding
    return int(math.floor((BASE_XP + speed + combo_bonus) * multiplier + 0.5))


@dataclass(frozen=True, slots=True)
class RoundSummary:
    mode: str
    score: int
    max_combo: int

    def to_dict(self) -> dict:
        return {'mode': self.mode, 'score': self.score, 'maxCombo': self.max_combo}


class RoundState:
    """Mutable state of a single round."""

    def __init__(self, mode: str, difficulty: str, generation: int, total_seconds: int):
        self.mode = mode
        self.difficulty = difficulty
        self.generation = generation
        self.phase = ACTIVE
        self.total_seconds = total_seconds
        self.seconds_left = total_seconds
        self.score = 0
        self.combo = 0
        self.max_combo = 0
        self.end_reason = None
        self.summary = None
        # Match mode
        self.match = None
        self.selected_latin = None
        self.done_ids = []
        # Sighting Log mode
        self.challenge = None
        self.tiles = []
        self.answer = []

    @property
    def active(self) -> bool:
        return self.phase == ACTIVE

    def to_view(self) -> dict:
        """Display-ready snapshot. Tile correctness stays hidden."""
        view = {
            'mode': self.mode,
            'difficulty': self.difficulty,
            'generation': self.generation,
            'phase': self.phase,
            'seconds_left': self.seconds_left,
            'total_seconds': self.total_seconds,
            'score': self.score,
            'combo': self.combo,
            'max_combo': self.max_combo,
            'end_reason': self.end_reason
        }
        if self.match is not None:
            view['items'] = [
                {'id': x.id, 'latin': x.latin, 'meaning': x.meaning, 'tag': x.tag, 'kind': x.kind}
                for x in self.match.items
            ]
            view['latin_order'] = list(self.match.latin_order)
            view['meaning_order'] = list(self.match.meaning_order)
            view['selected_latin'] = self.selected_latin
            view['done_ids'] = list(self.done_ids)
            view['pairs_left'] = len(self.match.items) - len(self.done_ids)
        if self.challenge is not None:
            view['english'] = self.challenge.english
            view['slots'] = self.challenge.length
            view['tiles'] = [{'id': t.id, 'text': t.text} for t in self.tiles]
            view['answer'] = [t.text for t in self.answer]
            view['solution'] = list(self.challenge.latin) if self.phase == ENDED else None
        return view


class RoundEngine:
    """Owns the current round and applies ticks and player actions to it."""

    def __init__(self, generator: ChallengeGenerator, clock: Clock, speaker: Speaker = None,
                 sound_on: bool = True,
                 on_round_end: Callable[[RoundSummary], None] | None = None):
        self.generator = generator
        self.clock = clock
        self.speaker = speaker or NullSpeaker()
        self.sound_on = sound_on
        self.on_round_end = on_round_end
        self.state = None
        self.mode = None
        self.difficulty = None
        self._generation = 0

    def start_round(self, difficulty: str, mode: str) -> dict:
        """Start a fresh round in the given mode."""
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode!r}")
        self.mode = mode
        self.difficulty = difficulty
        return self._begin()

    def advance_round(self) -> dict | None:
        """Move from an ended round to a new one. Ignored while a round is active."""
        if self.state is None or self.state.active:
            return None
        return self._begin()

    def restart_round(self) -> dict | None:
        """Discard the current round, active or not, and start over."""
        if self.state is None:
            return None
        return self._begin()

    def abandon(self) -> None:
        """Drop the current round without ending it."""
        self.clock.stop()
        self.state = None

    def view(self) -> dict | None:
        return self.state.to_view() if self.state else None

    def _begin(self) -> dict:
        self.clock.stop()
        self._generation += 1
        conf = difficulty_conf(self.difficulty)
        state = RoundState(self.mode, self.difficulty, self._generation, conf['time'])
        if self.mode == 'match':
            state.match = self.generator.sample_match(conf['round_size'])
        else:
            state.challenge = self.generator.make_challenge(self.difficulty)
            state.tiles = self.generator.make_tiles(state.challenge)
        self.state = state

        generation = self._generation
        self.clock.start(lambda: self.tick(generation))
        logger.info(f"Round {generation} started: mode={self.mode}, difficulty={self.difficulty}")
        return state.to_view()

    def tick(self, generation: int | None = None) -> bool:
        """One elapsed second. Returns False when the tick was stale or ignored."""
        state = self.state
        if state is None or not state.active:
            return False
        if generation is not None and generation != state.generation:
            logger.debug(f"Dropping stale tick for round {generation}")
            return False
        state.seconds_left -= 1
        if state.seconds_left <= 0:
            state.seconds_left = 0
            self._finish(REASON_TIME)
        return True

    def _finish(self, reason: str) -> None:
        state = self.state
        state.phase = ENDED
        state.end_reason = reason
        self.clock.stop()
        state.summary = RoundSummary(MODE_NAMES[state.mode], state.score, state.max_combo)
        logger.info(f"Round {state.generation} ended ({reason}): score={state.score}, "
                    f"max_combo={state.max_combo}")
        if self.on_round_end:
            self.on_round_end(state.summary)

    def _speak(self, text: str) -> None:
        if self.sound_on and text:
            self.speaker.speak(text)

    def _award(self) -> int:
        state = self.state
        state.combo += 1
        state.max_combo = max(state.max_combo, state.combo)
        gained = xp_for(state.seconds_left, state.combo, difficulty_conf(state.difficulty)['xp_mult'])
        state.score += gained
        return gained

    def hint(self) -> str | None:
        """Hint for the selected Latin word (match) or the grammar tip (sighting)."""
        state = self.state
        if state is None:
            return None
        if state.challenge is not None:
            return state.challenge.grammar_tip
        if state.selected_latin:
            return state.match.item(state.selected_latin).hint
        return None

    def choose_latin(self, item_id: str) -> Feedback:
        """Select the Latin side of a pair in match mode."""
        state = self.state
        if state is None or not state.active or state.match is None:
            return Feedback('ignored')
        item = state.match.item(item_id)
        if item is None or item_id in state.done_ids:
            return Feedback('ignored')
        state.selected_latin = item_id
        self._speak(item.latin)
        return Feedback('selected', combo=state.combo)

    def submit_selection(self, selection) -> Feedback:
        """Submit a tile id (sighting) or a meaning id / (latin, meaning) pair (match)."""
        state = self.state
        if state is None or not state.active:
            return Feedback('ignored')
        if state.match is not None:
            if isinstance(selection, (tuple, list)):
                if len(selection) != 2:
                    return Feedback('ignored')
                latin_id, meaning_id = selection
            else:
                latin_id, meaning_id = state.selected_latin, selection
            return self._submit_pair(latin_id, meaning_id)
        return self._place_tile(selection)

    def _submit_pair(self, latin_id: str | None, meaning_id: str) -> Feedback:
        state = self.state
        latin_item = state.match.item(latin_id) if latin_id else None
        meaning_item = state.match.item(meaning_id)
        if latin_item is None or meaning_item is None:
            return Feedback('ignored')
        if latin_id in state.done_ids or meaning_id in state.done_ids:
            return Feedback('ignored')

        state.selected_latin = None
        if not check_match(latin_id, meaning_id):
            state.combo = 0
            return Feedback('try', combo=0, title="Almost!",
                            description=f"Try again. Hint: {latin_item.hint}")

        gained = self._award()
        state.done_ids.append(meaning_id)
        feedback = Feedback('good', correct=True, gained=gained, combo=state.combo,
                            title=f"+{gained} XP",
                            description=f"{latin_item.latin} → {latin_item.meaning}. Combo x{state.combo}!")
        if len(state.done_ids) >= len(state.match.items):
            self._finish(REASON_MATCH_DONE)
            feedback.round_ended = True
        return feedback

    def _place_tile(self, tile_id: str) -> Feedback:
        state = self.state
        challenge = state.challenge
        if len(state.answer) >= challenge.length:
            return Feedback('ignored')
        if any(t.id == tile_id for t in state.answer):
            return Feedback('ignored')
        tile = next((t for t in state.tiles if t.id == tile_id), None)
        if tile is None:
            return Feedback('ignored')

        state.answer.append(tile)
        self._speak(tile.text)
        if len(state.answer) < challenge.length:
            return Feedback('selected', combo=state.combo)

        if not check_sentence(state.answer, challenge.latin):
            state.combo = 0
            state.answer = pop_last(state.answer)
            return Feedback('try', combo=0, title="Nope - check cases",
                            description=f"Try again. Hint: {challenge.grammar_tip}")

        gained = self._award()
        feedback = Feedback('good', correct=True, gained=gained, combo=state.combo,
                            title=f"{challenge.log_line} +{gained} XP",
                            description=f"✅ {' '.join(challenge.latin)}  (Tip: {challenge.grammar_tip})",
                            round_ended=True)
        self._finish(REASON_SENTENCE_DONE)
        return feedback
