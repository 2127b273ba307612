"""Compose the child-process environment for an install run."""

import logging
import platform
from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import quote, urlsplit, urlunsplit

from cyboot.constants import (
    BINARY_URL_VAR,
    CERT_PATH_VAR,
    CREDENTIAL_DESCRIPTIONS,
    PASSWORD_VAR,
    PATH_CASINGS,
    TELEMETRY_OPT_OUTS,
    USERNAME_VAR,
)
from cyboot.errors import MissingCertificateError, MissingCredentialsError, UnsupportedPlatformError
from cyboot.models import CLEAN, InjectionMode, LauncherConfig, RedactionContext

log = logging.getLogger(__name__)

BINARY_REPOSITORY = "/nexus/repository/cypress-binary"
BINARY_PATHS: dict[tuple[str, str], str] = {
    ("windows", "x64"): f"{BINARY_REPOSITORY}/windows/cypress.zip",
    ("windows", "ia32"): f"{BINARY_REPOSITORY}/windows/cypress.zip",
    ("windows", "arm64"): f"{BINARY_REPOSITORY}/windows/cypress.zip",
    ("linux", "x64"): f"{BINARY_REPOSITORY}/linux64/cypress.zip",
    ("linux", "arm64"): f"{BINARY_REPOSITORY}/linux/cypress.zip",
    ("darwin", "x64"): f"{BINARY_REPOSITORY}/macos-x64/cypress.zip",
    ("darwin", "arm64"): f"{BINARY_REPOSITORY}/macos-arm64/cypress.zip",
}
_MACHINE_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
}


@dataclass(frozen=True)
class ComposedEnvironment:
    env: dict[str, str] = field(repr=False)
    redaction: RedactionContext = field(default_factory=RedactionContext)


def host_platform() -> tuple[str, str]:
    """Return (system, machine) as reported by the interpreter."""
    return platform.system(), platform.machine()


def _normalize(system: str, machine: str) -> tuple[str, str]:
    lowered = machine.lower()
    return system.lower(), _MACHINE_ALIASES.get(lowered, lowered)


def binary_path(system: str, machine: str) -> str:
    """Return the registry path of the Cypress binary for an OS and CPU pair."""
    try:
        return BINARY_PATHS[_normalize(system, machine)]
    except KeyError:
        raise UnsupportedPlatformError(system, machine) from None


def build_binary_url(
    config: LauncherConfig,
    username: str,
    password: str,
    system: str,
    machine: str,
) -> str:
    """Return the binary download URL with percent-encoded credentials."""
    userinfo = f"{quote(username, safe='')}:{quote(password, safe='')}"
    return urlunsplit(
        ("https", f"{userinfo}@{config.registry_domain}", binary_path(system, machine), "", "")
    )


def public_binary_url(url: str) -> str:
    """Strip the userinfo from a binary URL for display."""
    parts = urlsplit(url)
    host = parts.netloc.rpartition("@")[2]
    return urlunsplit((parts.scheme, host, parts.path, parts.query, parts.fragment))


def sanitize_environment(environ: Mapping[str, object], system: str) -> dict[str, str]:
    """Copy `environ` as str -> str, keeping one populated PATH on Windows."""
    out: dict[str, str] = {}
    for key, value in environ.items():
        if value is None:
            continue
        out[str(key)] = str(value)

    if system.lower() == "windows":
        path_value = ""
        for key in PATH_CASINGS:
            if out.get(key):
                path_value = out[key]
                break
        for key in PATH_CASINGS:
            out.pop(key, None)
        out["PATH"] = path_value
    return out


def _require_credentials(environ: Mapping[str, str]) -> tuple[str, str]:
    missing = {
        name: description
        for name, description in CREDENTIAL_DESCRIPTIONS.items()
        if not environ.get(name)
    }
    if missing:
        raise MissingCredentialsError(missing)
    return environ[USERNAME_VAR], environ[PASSWORD_VAR]


def credential_secrets(environ: Mapping[str, object]) -> tuple[str, ...]:
    """Return the ambient credentials, raw and percent-encoded, for redaction."""
    secrets: list[str] = []
    for name in (USERNAME_VAR, PASSWORD_VAR):
        value = environ.get(name)
        if value:
            secrets.extend((str(value), quote(str(value), safe="")))
    return tuple(secrets)


def compose_environment(
    environ: Mapping[str, object],
    config: LauncherConfig,
    injection_mode: InjectionMode,
    system: str,
    machine: str,
) -> ComposedEnvironment:
    """Build the finalized child environment for the chosen injection policy."""
    env = sanitize_environment(environ, system)

    if injection_mode == CLEAN:
        cleared = [CERT_PATH_VAR, BINARY_URL_VAR]
        if config.clear_telemetry_on_clean:
            cleared.extend(TELEMETRY_OPT_OUTS)
        for key in cleared:
            env.pop(key, None)
        env.update(TELEMETRY_OPT_OUTS)
        log.debug("clean-install: registry injection disabled")
        return ComposedEnvironment(env=env)

    username, password = _require_credentials(env)
    cert_path = config.certificate_path
    if not cert_path.is_file():
        raise MissingCertificateError(str(cert_path))

    env[CERT_PATH_VAR] = str(cert_path)
    env[BINARY_URL_VAR] = build_binary_url(config, username, password, system, machine)
    env.update(TELEMETRY_OPT_OUTS)

    redaction = RedactionContext(secrets=credential_secrets(env))
    return ComposedEnvironment(env=env, redaction=redaction)
