"""Supported package managers."""

from typing import Literal

PackageManager = Literal["npm", "pnpm", "yarn"]

# Also the substring-matching order: "pnpm/9 npm/? node/v20" must match pnpm.
SUPPORTED_MANAGERS: tuple[PackageManager, ...] = ("pnpm", "yarn", "npm")
DEFAULT_MANAGER: PackageManager = "npm"
