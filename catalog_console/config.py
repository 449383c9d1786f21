# ----------------------------------------------------------------
# Import configuration variables to be used throughout the console
# ----------------------------------------------------------------
import os
from dotenv import load_dotenv

# Load .env (allow container env to override file values)
load_dotenv(override=True)


def _rstrip_slash(s: str) -> str:
    return (s or "").rstrip("/")


def _get_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "on", "y"}


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    if not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    if not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class Settings:
    # ── Admin backend (REST, {code, desc, data} envelope) ────────────────────
    ADMIN_API_BASE: str = _rstrip_slash(os.getenv("ADMIN_API_BASE", "http://localhost:48080/admin-api"))
    ADMIN_API_TIMEOUT: float = _get_float("ADMIN_API_TIMEOUT", 15.0)
    # Prefix put in front of the stored access token ("" sends the raw token)
    ADMIN_TOKEN_PREFIX: str = os.getenv("ADMIN_TOKEN_PREFIX", "Bearer")
    ADMIN_VERIFY_TLS: bool = _get_bool("ADMIN_VERIFY_TLS", True)

    # ── Object storage uploads (direct PUT to presigned URL) ────────────────
    UPLOAD_TIMEOUT: float = _get_float("UPLOAD_TIMEOUT", 60.0)

    # ── Client-side session (admin_token / admin_refresh_token) ─────────────
    TOKEN_STORE_PATH: str = os.getenv("TOKEN_STORE_PATH", "data/admin_session.json")

    # ── Screens ──────────────────────────────────────────────────────────────
    DEFAULT_PAGE_SIZE: int = _get_int("DEFAULT_PAGE_SIZE", 10)

    # ── CORS ─────────────────────────────────────────────────────────────────
    # Comma-separated list in .env, e.g. "http://localhost:5173, https://admin.example.com"
    CORS_ORIGINS: list[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
