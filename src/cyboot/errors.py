"""Errors raised while planning a launch."""


class LauncherError(RuntimeError):
    """Base class for failures that abort a run before anything is spawned."""

    def lines(self) -> list[str]:
        return str(self).splitlines()


class ConfigurationError(LauncherError):
    """Missing credentials, certificate, invalid manager or invalid config."""


class MissingCredentialsError(ConfigurationError):
    def __init__(self, missing: dict[str, str]) -> None:
        self.missing = missing
        details = "\n".join(f"  {name} - {description}" for name, description in missing.items())
        super().__init__(f"Missing required environment variables:\n{details}")


class MissingCertificateError(ConfigurationError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"Certificate required but not found: {path}\n"
            "Set CYBOOT_CERT_FILENAME/CYBOOT_CERT_DIR or place the PEM bundle next to the launcher."
        )


class UnsupportedPlatformError(ConfigurationError):
    def __init__(self, system: str, machine: str) -> None:
        self.system = system
        self.machine = machine
        super().__init__(f"Unsupported platform: {system} {machine}")


class ResolutionError(LauncherError):
    """No runtime or CLI entrypoint could be found for the selected manager."""
