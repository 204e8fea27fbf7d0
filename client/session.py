import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_PATH = os.path.join("~", ".memories", "profile.json")


class ProfileStore:
    """
    Locally persisted session profile, a JSON document of the form
    {"result": {...user...}, "token": "..."}
    """

    def __init__(self, path: Optional[str] = None):
        self.path = os.path.expanduser(path or os.getenv("MEMORIES_PROFILE", DEFAULT_PROFILE_PATH))

    def load(self) -> Optional[Dict[str, Any]]:
        """Read the profile, None when it was never saved or cannot be parsed"""
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read profile %s: %s", self.path, e)
            return None

    def save(self, profile: Dict[str, Any]) -> None:
        """Persist the profile returned by sign-in, so later requests carry its token"""
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(profile, f)

    @property
    def token(self) -> Optional[str]:
        profile = self.load()
        if not isinstance(profile, dict):
            return None
        return profile.get("token") or None
