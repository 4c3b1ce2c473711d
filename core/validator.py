"""Answer checking for match pairs and built sentences."""

from dataclasses import dataclass
from typing import Literal


@dataclass(slots=True)
class Feedback:
    """Outcome of one user action, ready to show as a toast."""
    kind: Literal['good', 'try', 'selected', 'ignored']
    correct: bool = False
    gained: int = 0
    combo: int = 0
    title: str = ''
    description: str = ''
    round_ended: bool = False

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'correct': self.correct,
            'gained': self.gained,
            'combo': self.combo,
            'title': self.title,
            'description': self.description,
            'round_ended': self.round_ended
        }


def check_match(latin_id: str, meaning_id: str) -> bool:
    """A pair matches when both sides point at the same pool item."""
    return latin_id == meaning_id


def check_sentence(tiles: list, expected) -> bool:
    """Order-sensitive comparison of the placed tiles against the expected tokens."""
    return ' '.join(t.text for t in tiles) == ' '.join(expected)


def pop_last(answer: list) -> list:
    """Drop only the most recently placed tile."""
    return answer[:max(0, len(answer) - 1)]
