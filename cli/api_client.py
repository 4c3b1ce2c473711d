"""REST API client for the Latin Quest server."""

import requests


class QuestAPIClient:
    """Client for communicating with the Latin Quest REST API."""

    def __init__(self, base_url: str = "http://localhost:8000", user_id: str = "default"):
        self.base_url = base_url.rstrip('/')
        self.user_id = user_id
        self.session = requests.Session()

    def _get(self, endpoint: str, params: dict = None) -> dict:
        """Make a GET request."""
        if params is None:
            params = {}
        params['user_id'] = self.user_id
        response = self.session.get(f"{self.base_url}{endpoint}", params=params)
        response.raise_for_status()
        return response.json()

    def _post(self, endpoint: str, data: dict = None) -> dict:
        """Make a POST request."""
        if data is None:
            data = {}
        data['user_id'] = self.user_id
        response = self.session.post(f"{self.base_url}{endpoint}", json=data)
        response.raise_for_status()
        return response.json()

    def health_check(self) -> dict:
        """Check if the server is running."""
        response = self.session.get(f"{self.base_url}/")
        response.raise_for_status()
        return response.json()

    def get_progress(self) -> dict:
        """Get lifetime progress."""
        return self._get("/api/progress")

    def update_settings(self, name: str = None, difficulty: str = None, sound: bool = None) -> dict:
        data = {k: v for k, v in (('name', name), ('difficulty', difficulty), ('sound', sound))
                if v is not None}
        return self._post("/api/settings", data)

    def reset_progress(self) -> dict:
        return self._post("/api/progress/reset")

    def start_round(self, mode: str, difficulty: str = None) -> dict:
        """Start a new round."""
        data = {'mode': mode}
        if difficulty:
            data['difficulty'] = difficulty
        return self._post("/api/round/start", data)

    def get_round(self) -> dict:
        return self._get("/api/round")

    def choose_latin(self, item_id: str) -> dict:
        """Pick the Latin side of a pair."""
        return self._post("/api/round/latin", {'item_id': item_id})

    def choose_meaning(self, meaning_id: str) -> dict:
        """Match the chosen Latin word with a meaning."""
        return self._post("/api/round/select", {'meaning_id': meaning_id})

    def place_tile(self, tile_id: str) -> dict:
        """Add a tile to the sentence being built."""
        return self._post("/api/round/select", {'tile_id': tile_id})

    def get_hint(self) -> dict:
        return self._get("/api/round/hint")

    def advance_round(self) -> dict:
        return self._post("/api/round/advance")

    def restart_round(self) -> dict:
        return self._post("/api/round/restart")

    def get_field_guide(self) -> dict:
        return self._get("/api/field-guide")

    def get_events(self, limit: int = 20) -> dict:
        """Recent rounds and unlocks (PostgreSQL storage only)."""
        return self._get("/api/events", {'limit': limit})
