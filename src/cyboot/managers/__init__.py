"""Package-manager detection, install arguments and CLI entrypoint resolution."""

from cyboot.managers.arguments import install_args, install_hint
from cyboot.managers.detection import detect_manager, match_manager, parse_manager
from cyboot.managers.resolution import resolve_entrypoint, resolve_runtime

__all__ = [
    "detect_manager",
    "install_args",
    "install_hint",
    "match_manager",
    "parse_manager",
    "resolve_entrypoint",
    "resolve_runtime",
]
