# --- Global log sanitizer: HTML error pages and access tokens --------------------
import logging, re

_HTML_SIG_RE = re.compile(r'(?is)<!DOCTYPE html|<html[^>]*>')
_TITLE_RE    = re.compile(r'(?is)<title[^>]*>(.*?)</title>')
_TAG_RE      = re.compile(r'(?is)<[^>]+>')
_SCRIPT_RE   = re.compile(r'(?is)<(script|style)[^>]*>.*?</\1>')
_TOKEN_RE    = re.compile(r'(?i)(authorization["\']?\s*[:=]\s*["\']?)(bearer\s+)?([A-Za-z0-9._\-]{8,})')


def _strip_tags(s: str) -> str:
    s = _SCRIPT_RE.sub('', s)
    s = _TAG_RE.sub(' ', s)
    return re.sub(r'\s+', ' ', s).strip()


def summarize_html(s: str, limit: int = 200) -> str:
    title = None
    m = _TITLE_RE.search(s)
    if m:
        title = _strip_tags(m.group(1))
    preview = title or _strip_tags(s)[:limit]
    return f"{preview} [HTML {len(s)} chars trimmed]"


def redact_tokens(s: str) -> str:
    return _TOKEN_RE.sub(lambda m: f"{m.group(1)}{m.group(2) or ''}<redacted>", s)


class ConsoleLogFilter(logging.Filter):
    """
    Replaces gateway HTML error pages with a one-line summary and masks
    Authorization header values before a record is emitted.
    """
    def filter(self, record: logging.LogRecord) -> bool:
        try:
            msg = record.getMessage()
        except Exception:
            return True
        if not isinstance(msg, str):
            return True
        changed = msg
        if len(changed) > 200 and _HTML_SIG_RE.search(changed):
            changed = summarize_html(changed)
        changed = redact_tokens(changed)
        if changed != msg:
            record.msg = changed
            record.args = ()
        return True


def install_log_filters() -> None:
    # install once on common loggers (root + uvicorn family)
    for name in ("", "uvicorn", "uvicorn.error"):
        lg = logging.getLogger(name)
        if not any(isinstance(f, ConsoleLogFilter) for f in lg.filters):
            lg.addFilter(ConsoleLogFilter())
