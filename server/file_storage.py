"""File-based storage implementation."""

import json
import logging
import os

from core.interfaces import Storage

logger = logging.getLogger(__name__)


class FileStorage(Storage):
    """Stores each player's progress as a JSON file."""

    def __init__(self, state_dir: str = None):
        self.state_dir = state_dir or os.environ.get(
            'QUEST_STATE_DIR', os.path.expanduser('~/.local/share/latin-quest')
        )

    def _get_state_file(self, user_id: str) -> str:
        """Get state file path for a user."""
        if user_id == "default":
            return os.path.join(self.state_dir, 'quest_state.json')
        return os.path.join(self.state_dir, f'quest_state_{user_id}.json')

    def load_state(self, user_id: str = "default") -> dict | None:
        state_file = self._get_state_file(user_id)
        if os.path.exists(state_file):
            try:
                with open(state_file, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Error loading state for {user_id}: {e}")
                return None
        return None

    def save_state(self, state: dict, user_id: str = "default") -> None:
        os.makedirs(self.state_dir, exist_ok=True)
        state_file = self._get_state_file(user_id)
        tmp_file = state_file + '.tmp'
        try:
            with open(tmp_file, 'w', encoding='utf-8') as f:
                json.dump(state, f, indent=2, ensure_ascii=False)
            os.replace(tmp_file, state_file)
        except OSError as e:
            logger.error(f"Error saving state for {user_id}: {e}")
            raise

    def list_users(self) -> list[str]:
        """List all existing user IDs."""
        users = []
        if os.path.exists(self.state_dir):
            for filename in os.listdir(self.state_dir):
                if filename == 'quest_state.json':
                    users.append('default')
                elif filename.startswith('quest_state_') and filename.endswith('.json'):
                    users.append(filename[len('quest_state_'):-len('.json')])
        return sorted(users)

    def delete_user(self, user_id: str) -> bool:
        """Delete a user's state file."""
        state_file = self._get_state_file(user_id)
        if os.path.exists(state_file):
            os.remove(state_file)
            return True
        return False
