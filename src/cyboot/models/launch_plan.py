"""Ready-to-execute launch description."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from cyboot.models.invocation_request import INJECT_CREDENTIALS, InjectionMode
from cyboot.models.package_manager import PackageManager
from cyboot.models.redaction_context import RedactionContext


@dataclass(frozen=True)
class LaunchPlan:
    """Everything needed to spawn `<runtime> <entrypoint> <args...>`.

    Only built once every planning step succeeded, so holding one means the
    run is allowed to spawn.
    """

    manager: PackageManager
    runtime: str
    entrypoint: str
    args: tuple[str, ...]
    env: Mapping[str, str] = field(repr=False)
    redaction: RedactionContext = field(default_factory=RedactionContext)
    debug: bool = False
    injection_mode: InjectionMode = INJECT_CREDENTIALS

    def __post_init__(self) -> None:
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))

    @property
    def argv(self) -> list[str]:
        return [self.runtime, self.entrypoint, *self.args]
