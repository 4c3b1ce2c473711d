"""Abstract base classes for dependency injection."""

from abc import ABC, abstractmethod
from typing import Callable


class Storage(ABC):
    """Abstract base class for persisted player progress."""

    @abstractmethod
    def load_state(self, user_id: str = "default") -> dict | None:
        """Load progress for a user. Returns the raw dict or None if not found."""
        pass

    @abstractmethod
    def save_state(self, state: dict, user_id: str = "default") -> None:
        """Save progress for a user."""
        pass

    @abstractmethod
    def list_users(self) -> list[str]:
        """List all user IDs with saved progress."""
        pass

    @abstractmethod
    def delete_user(self, user_id: str) -> bool:
        """Delete a user's saved progress. Returns True if something was removed."""
        pass


class Speaker(ABC):
    """Pronounces Latin tokens. Has no effect on game state."""

    @abstractmethod
    def speak(self, text: str) -> None:
        pass


class NullSpeaker(Speaker):
    """Speaker that stays silent."""

    def speak(self, text: str) -> None:
        pass


class Clock(ABC):
    """Source of one-second ticks for the active round."""

    @abstractmethod
    def start(self, callback: Callable[[], None]) -> None:
        """Begin calling callback once per second, replacing any previous callback."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop ticking. Safe to call when not running."""
        pass

    @property
    @abstractmethod
    def running(self) -> bool:
        pass


class ManualClock(Clock):
    """Clock driven by hand, one advance() per elapsed second."""

    def __init__(self):
        self._callback = None

    def start(self, callback: Callable[[], None]) -> None:
        self._callback = callback

    def stop(self) -> None:
        self._callback = None

    @property
    def running(self) -> bool:
        return self._callback is not None

    def advance(self, ticks: int = 1) -> None:
        for _ in range(ticks):
            if self._callback is None:
                return
            self._callback()
