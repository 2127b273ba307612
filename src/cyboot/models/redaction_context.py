"""Secrets captured while building a launch plan."""

from collections.abc import Callable
from dataclasses import dataclass

from cyboot.redaction import make_redactor


@dataclass(frozen=True)
class RedactionContext:
    secrets: tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"RedactionContext(secrets=<{len(self.secrets)} hidden>)"

    def redactor(self) -> Callable[[bytes], bytes]:
        return make_redactor(self.secrets)
