"""Infer which package manager invoked us."""

import logging
from collections.abc import Mapping

from cyboot.constants import EXECPATH_VAR, USER_AGENT_VAR
from cyboot.errors import ConfigurationError
from cyboot.models import DEFAULT_MANAGER, SUPPORTED_MANAGERS, InvocationRequest, PackageManager

log = logging.getLogger(__name__)


def match_manager(signal: str) -> PackageManager | None:
    """Return the first supported manager named anywhere in `signal`."""
    lowered = signal.lower()
    for manager in SUPPORTED_MANAGERS:
        if manager in lowered:
            return manager
    return None


def parse_manager(value: str) -> PackageManager:
    """Validate an explicitly requested manager name."""
    candidate = value.strip().lower()
    for manager in SUPPORTED_MANAGERS:
        if candidate == manager:
            return manager
    valid = ", ".join(sorted(SUPPORTED_MANAGERS))
    raise ConfigurationError(f"Invalid package manager: {value}\nValid options: {valid}")


def detect_manager(request: InvocationRequest, environ: Mapping[str, str]) -> PackageManager:
    """Pick the manager by precedence: explicit, user agent, exec path, default."""
    if request.manager is not None:
        log.debug("manager from arguments: %s", request.manager)
        return request.manager

    for var in (USER_AGENT_VAR, EXECPATH_VAR):
        manager = match_manager(environ.get(var) or "")
        if manager is not None:
            log.debug("manager from %s: %s", var, manager)
            return manager

    log.debug("no manager hint found, defaulting to %s", DEFAULT_MANAGER)
    return DEFAULT_MANAGER
