"""Locate a package manager's JavaScript CLI and the Node runtime, without a shell.

Resolution is an ordered list of probes. Each probe may fail (missing file,
unreadable directory); a failure moves on to the next probe and the first
existing script file wins. Only script files are ever returned: platform
shims such as `npm.cmd` need a shell to run and are skipped.
"""

import logging
import os
import shutil
from collections.abc import Callable, Mapping
from functools import partial
from pathlib import Path

from cyboot.constants import EXECPATH_VAR, NODE_EXECPATH_VAR, NODE_PATH_VAR, PATH_CASINGS
from cyboot.managers.detection import match_manager
from cyboot.models import PackageManager

log = logging.getLogger(__name__)

SCRIPT_SUFFIXES = (".js", ".cjs", ".mjs")
SHIM_SUFFIXES = (".cmd", ".bat", ".ps1")

PACKAGE_SCRIPTS: dict[PackageManager, tuple[str, ...]] = {
    "npm": ("npm/bin/npm-cli.js",),
    "pnpm": ("pnpm/bin/pnpm.cjs",),
    # yarn classic ships either name; berry pins releases in the repository.
    "yarn": ("yarn/bin/yarn.js", "yarn/bin/yarn.cjs"),
}
YARN_RELEASES = Path(".yarn", "releases")

Probe = Callable[[], Path | str | None]


def _is_script(candidate: Path | str) -> bool:
    return Path(candidate).suffix.lower() in SCRIPT_SUFFIXES


def _node_modules_dirs(cwd: Path, environ: Mapping[str, str]) -> list[Path]:
    """Return node_modules lookup dirs in Node's require order."""
    dirs: list[Path] = []
    for directory in (cwd, *cwd.parents):
        if directory.name == "node_modules":
            continue
        dirs.append(directory / "node_modules")
    for raw_dir in (environ.get(NODE_PATH_VAR) or "").split(os.pathsep):
        if raw_dir.strip():
            dirs.append(Path(raw_dir.strip()))
    return dirs


def _require_resolve(request: str, cwd: Path, environ: Mapping[str, str]) -> Path:
    """Resolve a package-relative file the way `require.resolve` would."""
    for directory in _node_modules_dirs(cwd, environ):
        candidate = directory / request
        if candidate.is_file():
            return candidate
    raise FileNotFoundError(f"cannot resolve {request}")


def _latest_yarn_release(cwd: Path) -> Path:
    releases = cwd / YARN_RELEASES
    if not releases.is_dir():
        raise FileNotFoundError(f"no {YARN_RELEASES.as_posix()}")
    with os.scandir(releases) as entries:
        names = sorted(
            entry.name
            for entry in entries
            if entry.name.startswith("yarn-") and entry.name.endswith(".cjs")
        )
    if not names:
        raise FileNotFoundError(f"no yarn-*.cjs in {YARN_RELEASES.as_posix()}")
    return releases / names[-1]


def _entrypoint_probes(
    manager: PackageManager,
    environ: Mapping[str, str],
    runtime: Path | None,
    cwd: Path,
) -> list[Probe]:
    probes: list[Probe] = []

    execpath = (environ.get(EXECPATH_VAR) or "").strip()
    # Only reuse the invoking CLI when it belongs to the requested manager.
    if execpath and _is_script(execpath) and match_manager(execpath) in (None, manager):
        probes.append(partial(Path, execpath))

    requests = PACKAGE_SCRIPTS[manager]
    for request in requests:
        probes.append(partial(_require_resolve, request, cwd, environ))

    if runtime is not None:
        node_dir = runtime.parent
        for request in requests:
            # Windows installs npm beside node.exe; POSIX under <prefix>/lib.
            probes.append(partial(Path, node_dir, "node_modules", request))
            probes.append(partial(Path, node_dir.parent, "lib", "node_modules", request))

    if manager == "yarn":
        probes.append(partial(_latest_yarn_release, cwd))
    return probes


def _accept(candidate: Path | str | None) -> Path | None:
    if not candidate:
        return None
    path = Path(candidate)
    if not _is_script(path) or not path.is_file():
        return None
    return path.resolve()


def resolve_entrypoint(
    manager: PackageManager,
    environ: Mapping[str, str],
    runtime: Path | None = None,
    cwd: Path | None = None,
) -> Path | None:
    """Return the absolute path of `manager`'s CLI script, or None when nothing exists."""
    base = (cwd or Path.cwd()).resolve()
    for probe in _entrypoint_probes(manager, environ, runtime, base):
        try:
            found = _accept(probe())
        except (OSError, ValueError) as e:
            log.debug("%s probe failed: %s", manager, e)
            continue
        if found is not None:
            log.debug("%s entrypoint: %s", manager, found)
            return found
    log.debug("no entrypoint found for %s", manager)
    return None


def _search_path(environ: Mapping[str, str]) -> str | None:
    for key in PATH_CASINGS:
        value = environ.get(key)
        if value:
            return value
    return None


def resolve_runtime(environ: Mapping[str, str]) -> Path | None:
    """Return the Node executable: the invoking manager's own, else `node` on PATH."""
    candidates: list[str] = []
    node_execpath = (environ.get(NODE_EXECPATH_VAR) or "").strip()
    if node_execpath:
        candidates.append(node_execpath)
    found = shutil.which("node", path=_search_path(environ))
    if found:
        candidates.append(found)

    for candidate in candidates:
        path = Path(candidate)
        if path.suffix.lower() in SHIM_SUFFIXES:
            log.debug("skipping runtime shim %s", path)
            continue
        if path.is_file():
            return path.resolve()
    return None
