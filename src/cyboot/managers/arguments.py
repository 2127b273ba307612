"""Install arguments and remediation hints per package manager."""

from cyboot.models import PackageManager

# (quiet, debug)
INSTALL_ARGS: dict[PackageManager, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "npm": (("install", "--silent", "--no-fund"), ("install", "--verbose", "--no-fund")),
    "pnpm": (("install", "--reporter", "silent"), ("install", "--reporter", "default")),
    "yarn": (("install", "--silent"), ("install", "--verbose")),
}


def install_args(manager: PackageManager, debug: bool) -> tuple[str, ...]:
    quiet, verbose = INSTALL_ARGS[manager]
    return verbose if debug else quiet


def install_hint(manager: PackageManager) -> str:
    if manager in ("pnpm", "yarn"):
        return 'Try: "corepack enable" (Node 16+) or install it globally if Corepack is unavailable.'
    return f"Install {manager} alongside Node and make sure it is resolvable (no shell is used)."
