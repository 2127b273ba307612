"""Credential masking for child output and log records."""

import logging
import re
from collections.abc import Callable, Iterable

from cyboot.constants import MASK

# scheme://user:pass@  ->  scheme://***:***@  (scheme and host survive)
CREDENTIAL_URL_RE = re.compile(rb"([A-Za-z][A-Za-z0-9+.-]*://)[^/\s:@]+:[^/\s@]+@")
_MASKED_USERINFO = rb"\1" + MASK.encode() + b":" + MASK.encode() + b"@"


def _literal_secrets(secrets: Iterable[str]) -> list[bytes]:
    unique = {secret.encode() for secret in secrets if secret}
    # Longest first so a secret containing another is masked whole.
    return sorted(unique, key=len, reverse=True)


def make_redactor(secrets: Iterable[str] = ()) -> Callable[[bytes], bytes]:
    """Return a pure function masking credential URLs and every registered secret.

    Works chunk by chunk; a secret split across two chunks is not masked.
    """
    literals = _literal_secrets(secrets)
    mask = MASK.encode()

    def redact(chunk: bytes) -> bytes:
        out = CREDENTIAL_URL_RE.sub(_MASKED_USERINFO, chunk)
        for literal in literals:
            out = out.replace(literal, mask)
        return out

    return redact


def redact_text(text: str, secrets: Iterable[str] = ()) -> str:
    return make_redactor(secrets)(text.encode()).decode(errors="replace")


class RedactionFilter(logging.Filter):
    """Mask secrets in log records before any handler formats them."""

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        self._secrets = tuple(secrets)

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        record.msg = redact_text(message, self._secrets)
        record.args = None
        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = redact_text(record.exc_text, self._secrets)
        if record.stack_info:
            record.stack_info = redact_text(record.stack_info, self._secrets)
        return True


def install_log_redaction(secrets: Iterable[str]) -> RedactionFilter:
    """Attach a RedactionFilter to every handler of the root logger."""
    log_filter = RedactionFilter(secrets)
    for handler in logging.getLogger().handlers:
        handler.addFilter(log_filter)
    return log_filter
