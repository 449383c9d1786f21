# catalog_console/session/token_store.py
# Durable client-side session: the admin access + refresh tokens, kept in one JSON file.
from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from catalog_console.config import settings

logger = logging.getLogger("uvicorn.error")

ACCESS_TOKEN_KEY = "admin_token"
REFRESH_TOKEN_KEY = "admin_refresh_token"

DEFAULT_PATH = Path(settings.TOKEN_STORE_PATH)


def _atomic_write(path: Path, text: str) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(text, encoding="utf-8")
    tmp.replace(path)


def _now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


class TokenStore:
    """
    Two string values, nothing else. A missing or unreadable file reads as
    logged out; clearing removes both keys but leaves the file in place.
    """

    def __init__(self, path: Path | str = DEFAULT_PATH):
        self.path = Path(path)

    def _load_raw(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("[SESSION] unreadable token file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save_raw(self, obj: Dict[str, Any]) -> None:
        obj = dict(obj)
        obj["updated"] = _now_iso()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        _atomic_write(self.path, json.dumps(obj, ensure_ascii=False, indent=2))

    @property
    def access_token(self) -> str:
        return str(self._load_raw().get(ACCESS_TOKEN_KEY) or "")

    @property
    def refresh_token(self) -> str:
        return str(self._load_raw().get(REFRESH_TOKEN_KEY) or "")

    @property
    def is_logged_in(self) -> bool:
        return bool(self.access_token)

    def set_tokens(self, access_token: str, refresh_token: str) -> None:
        self._save_raw({ACCESS_TOKEN_KEY: access_token, REFRESH_TOKEN_KEY: refresh_token})

    def clear(self) -> None:
        raw = self._load_raw()
        if ACCESS_TOKEN_KEY not in raw and REFRESH_TOKEN_KEY not in raw:
            return
        raw.pop(ACCESS_TOKEN_KEY, None)
        raw.pop(REFRESH_TOKEN_KEY, None)
        self._save_raw(raw)
        logger.info("[SESSION] tokens cleared")


_store: Optional[TokenStore] = None


def get_token_store() -> TokenStore:
    """Process-wide store at settings.TOKEN_STORE_PATH."""
    global _store
    if _store is None:
        _store = TokenStore(DEFAULT_PATH)
    return _store
