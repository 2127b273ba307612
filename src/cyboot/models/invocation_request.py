"""Caller input, parsed once at startup."""

from dataclasses import dataclass
from typing import Literal

from cyboot.models.package_manager import PackageManager

InjectionMode = Literal["inject-credentials", "clean"]
INJECT_CREDENTIALS: InjectionMode = "inject-credentials"
CLEAN: InjectionMode = "clean"


@dataclass(frozen=True)
class InvocationRequest:
    """What the caller asked for. `manager` is None until detection resolves it."""

    manager: PackageManager | None = None
    debug: bool = False
    injection_mode: InjectionMode = INJECT_CREDENTIALS
    raw_args: tuple[str, ...] = ()

    @property
    def clean(self) -> bool:
        return self.injection_mode == CLEAN
