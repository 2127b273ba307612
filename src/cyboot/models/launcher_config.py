"""Configuration model for cyboot."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from cyboot.constants import DEFAULT_CERT_FILENAME, DEFAULT_REGISTRY_DOMAIN

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class LauncherConfig(BaseModel):
    """Process-wide settings, read once at startup and passed around explicitly."""

    model_config = ConfigDict(frozen=True)

    registry_domain: str = DEFAULT_REGISTRY_DOMAIN
    cert_filename: str = DEFAULT_CERT_FILENAME
    cert_dir: Path = PACKAGE_DIR
    clear_telemetry_on_clean: bool = False

    @field_validator("registry_domain")
    @classmethod
    def _check_domain(cls, value: str) -> str:
        value = value.strip()
        if not value or "/" in value or "@" in value:
            raise ValueError("registry_domain must be a bare host, optionally with a port")
        return value

    @field_validator("cert_filename")
    @classmethod
    def _check_cert_filename(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("cert_filename must not be empty")
        return value

    @property
    def certificate_path(self) -> Path:
        return (self.cert_dir / self.cert_filename).resolve()
