"""Model package for cyboot."""

from cyboot.models.invocation_request import (
    CLEAN,
    INJECT_CREDENTIALS,
    InjectionMode,
    InvocationRequest,
)
from cyboot.models.launch_plan import LaunchPlan
from cyboot.models.launcher_config import LauncherConfig
from cyboot.models.package_manager import DEFAULT_MANAGER, SUPPORTED_MANAGERS, PackageManager
from cyboot.models.process_outcome import ProcessOutcome
from cyboot.models.redaction_context import RedactionContext

__all__ = [
    "CLEAN",
    "DEFAULT_MANAGER",
    "INJECT_CREDENTIALS",
    "InjectionMode",
    "InvocationRequest",
    "LaunchPlan",
    "LauncherConfig",
    "PackageManager",
    "ProcessOutcome",
    "RedactionContext",
    "SUPPORTED_MANAGERS",
]
