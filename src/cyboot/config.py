"""Configuration loading for cyboot."""

import logging
import os
from collections.abc import Mapping

from pydantic import ValidationError

from cyboot.errors import ConfigurationError
from cyboot.models import LauncherConfig

log = logging.getLogger(__name__)

ENV_OVERRIDES = {
    "CYBOOT_REGISTRY_DOMAIN": "registry_domain",
    "CYBOOT_CERT_FILENAME": "cert_filename",
    "CYBOOT_CERT_DIR": "cert_dir",
    "CYBOOT_CLEAR_TELEMETRY": "clear_telemetry_on_clean",
}


def load_config(environ: Mapping[str, str] | None = None) -> LauncherConfig:
    """Build the launcher config from defaults plus CYBOOT_* environment overrides."""
    source = os.environ if environ is None else environ
    overrides: dict[str, str] = {}
    for var, field_name in ENV_OVERRIDES.items():
        value = source.get(var, "").strip()
        if value:
            overrides[field_name] = value
    log.debug("config overrides: %s", sorted(overrides))

    try:
        return LauncherConfig(**overrides)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"Invalid launcher configuration: {problems}") from e
