"""
Pending Confirmations
Holds actions that need an explicit confirm/cancel round trip (resolve case, delete admin)
"""
import logging
import time
import uuid
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger('confirmations')


class ConfirmationManager:
    """
    Keeps pending actions until the requesting user confirms or cancels them.
    Unconfirmed actions expire after the configured timeout.
    """

    def __init__(self, timeout_minutes: int = 10):
        # {token: {owner_id, title, message, action, expires_at}}
        self.pending: Dict[str, Dict[str, Any]] = {}
        self.timeout_seconds = timeout_minutes * 60

    def request(self, owner_id: str, title: str, message: str, action: Callable[[], Dict]) -> Dict[str, str]:
        """
        Register a pending action.

        Returns:
            Prompt dict with token, title and message for the confirm dialog
        """
        self._clean_expired()
        token = uuid.uuid4().hex
        self.pending[token] = {
            "owner_id": owner_id,
            "title": title,
            "message": message,
            "action": action,
            "expires_at": time.time() + self.timeout_seconds,
        }
        logger.info(f"CONFIRM_REQUESTED | {owner_id} | {title}")
        return {"token": token, "title": title, "message": message}

    def _take(self, token: str, owner_id: str) -> Optional[Dict[str, Any]]:
        self._clean_expired()
        entry = self.pending.get(token)
        if entry is None or entry["owner_id"] != owner_id:
            logger.warning(f"CONFIRM_NOT_FOUND | {owner_id} | {token[:8]}")
            return None
        del self.pending[token]
        return entry

    def confirm(self, token: str, owner_id: str) -> Dict:
        """Run a pending action exactly once"""
        entry = self._take(token, owner_id)
        if entry is None:
            return {"success": False, "error": "No pending action to confirm"}

        logger.info(f"CONFIRMED | {owner_id} | {entry['title']}")
        return entry["action"]()

    def cancel(self, token: str, owner_id: str) -> Dict:
        """Drop a pending action without running it"""
        entry = self._take(token, owner_id)
        if entry is None:
            return {"success": False, "error": "No pending action to cancel"}

        logger.info(f"CANCELLED | {owner_id} | {entry['title']}")
        return {"success": True, "message": "Action cancelled"}

    def has_pending(self, token: str) -> bool:
        self._clean_expired()
        return token in self.pending

    def _clean_expired(self):
        now = time.time()
        expired = [t for t, entry in self.pending.items() if now >= entry["expires_at"]]
        for token in expired:
            del self.pending[token]
        if expired:
            logger.debug(f"CONFIRM_EXPIRED | {len(expired)}")
