"""Unit tests for cyboot.environment."""

from urllib.parse import unquote, urlsplit

import pytest

from cyboot.environment import (
    BINARY_PATHS,
    binary_path,
    build_binary_url,
    compose_environment,
    public_binary_url,
    sanitize_environment,
)
from cyboot.errors import MissingCertificateError, MissingCredentialsError, UnsupportedPlatformError
from cyboot.models import CLEAN, INJECT_CREDENTIALS, LauncherConfig

CREDS = {"NEXUS_USERNAME": "ci user", "NEXUS_PASSWORD": "p@ss:w/rd"}


@pytest.fixture
def cert_config(tmp_path):
    (tmp_path / "certificate.pem").write_text("-----BEGIN CERTIFICATE-----\n", encoding="utf-8")
    return LauncherConfig(cert_dir=tmp_path)


class TestSanitizeEnvironment:
    def test_drops_none_and_coerces_values(self):
        assert sanitize_environment({"A": 1, "B": None, "C": "x"}, "Linux") == {"A": "1", "C": "x"}

    def test_windows_keeps_single_path(self):
        env = sanitize_environment({"Path": "C:\\node", "path": "", "TEMP": "C:\\tmp"}, "Windows")

        assert env == {"PATH": "C:\\node", "TEMP": "C:\\tmp"}

    def test_windows_prefers_first_populated_casing(self):
        env = sanitize_environment({"PATH": "", "Path": "first", "path": "second"}, "Windows")

        assert [key for key in env if key.lower() == "path"] == ["PATH"]
        assert env["PATH"] == "first"

    def test_other_platforms_keep_casings(self):
        env = sanitize_environment({"PATH": "/bin", "path": "x"}, "Linux")

        assert env == {"PATH": "/bin", "path": "x"}


class TestBinaryPath:
    @pytest.mark.parametrize(
        ("system", "machine", "suffix"),
        [
            ("Windows", "AMD64", "/windows/cypress.zip"),
            ("Windows", "ARM64", "/windows/cypress.zip"),
            ("Linux", "x86_64", "/linux64/cypress.zip"),
            ("Linux", "aarch64", "/linux/cypress.zip"),
            ("Darwin", "arm64", "/macos-arm64/cypress.zip"),
            ("Darwin", "x86_64", "/macos-x64/cypress.zip"),
        ],
    )
    def test_known_platforms(self, system, machine, suffix):
        assert binary_path(system, machine) == "/nexus/repository/cypress-binary" + suffix

    @pytest.mark.parametrize(("system", "machine"), [("Linux", "s390x"), ("FreeBSD", "amd64")])
    def test_unmapped_platform_raises(self, system, machine):
        with pytest.raises(UnsupportedPlatformError, match="Unsupported platform"):
            binary_path(system, machine)


class TestBinaryUrl:
    def test_credentials_are_percent_encoded(self):
        url = build_binary_url(LauncherConfig(), "ci user", "p@ss:w/rd", "Linux", "x86_64")
        parts = urlsplit(url)

        assert parts.scheme == "https"
        assert parts.username == "ci%20user"
        assert parts.password == "p%40ss%3Aw%2Frd"
        assert parts.hostname == "nexus.company.com"
        assert parts.path == BINARY_PATHS[("linux", "x64")]

    def test_domain_port_is_kept(self):
        config = LauncherConfig(registry_domain="nexus.example.com:8081")
        parts = urlsplit(build_binary_url(config, "u", "p", "Darwin", "arm64"))

        assert parts.port == 8081

    def test_public_url_drops_userinfo(self):
        url = build_binary_url(LauncherConfig(), "u", "secret", "Linux", "x86_64")

        public = public_binary_url(url)

        assert "secret" not in public
        assert public == "https://nexus.company.com/nexus/repository/cypress-binary/linux64/cypress.zip"


class TestComposeClean:
    def test_removes_injected_vars_left_in_ambient_env(self):
        ambient = {
            "PATH": "/usr/bin",
            "NODE_EXTRA_CA_CERTS": "/old/cert.pem",
            "CYPRESS_INSTALL_BINARY": "https://u:p@old/cypress.zip",
        }

        composed = compose_environment(ambient, LauncherConfig(), CLEAN, "Linux", "x86_64")

        assert "NODE_EXTRA_CA_CERTS" not in composed.env
        assert "CYPRESS_INSTALL_BINARY" not in composed.env
        assert composed.env["PATH"] == "/usr/bin"

    def test_needs_no_credentials_or_certificate(self, tmp_path):
        config = LauncherConfig(cert_dir=tmp_path)

        composed = compose_environment({}, config, CLEAN, "Linux", "x86_64")

        assert composed.env["CYPRESS_CRASH_REPORTS"] == "0"
        assert composed.env["CYPRESS_COMMERCIAL_RECOMMENDATIONS"] == "0"
        assert composed.redaction.secrets == ()

    def test_telemetry_opt_outs_overwrite_ambient_values(self):
        config = LauncherConfig(clear_telemetry_on_clean=True)

        composed = compose_environment({"CYPRESS_CRASH_REPORTS": "1"}, config, CLEAN, "Linux", "x86_64")

        assert composed.env["CYPRESS_CRASH_REPORTS"] == "0"


class TestComposeInjected:
    def test_missing_both_credentials_are_enumerated(self, cert_config):
        with pytest.raises(MissingCredentialsError) as exc_info:
            compose_environment({}, cert_config, INJECT_CREDENTIALS, "Linux", "x86_64")

        assert set(exc_info.value.missing) == {"NEXUS_USERNAME", "NEXUS_PASSWORD"}
        assert "NEXUS_USERNAME" in str(exc_info.value)
        assert "NEXUS_PASSWORD" in str(exc_info.value)

    def test_missing_password_only(self, cert_config):
        with pytest.raises(MissingCredentialsError) as exc_info:
            compose_environment(
                {"NEXUS_USERNAME": "ci"}, cert_config, INJECT_CREDENTIALS, "Linux", "x86_64"
            )

        assert list(exc_info.value.missing) == ["NEXUS_PASSWORD"]

    def test_missing_certificate_names_resolved_path(self, tmp_path):
        config = LauncherConfig(cert_dir=tmp_path)
        expected = str((tmp_path / "certificate.pem").resolve())

        with pytest.raises(MissingCertificateError) as exc_info:
            compose_environment(CREDS, config, INJECT_CREDENTIALS, "Linux", "x86_64")

        assert exc_info.value.path == expected
        assert expected in str(exc_info.value)

    def test_injects_cert_url_and_telemetry(self, cert_config):
        composed = compose_environment(CREDS, cert_config, INJECT_CREDENTIALS, "Darwin", "arm64")
        env = composed.env
        parts = urlsplit(env["CYPRESS_INSTALL_BINARY"])

        assert env["NODE_EXTRA_CA_CERTS"] == str(cert_config.certificate_path)
        assert unquote(parts.username) == "ci user"
        assert unquote(parts.password) == "p@ss:w/rd"
        assert parts.path == BINARY_PATHS[("darwin", "arm64")]
        assert env["CYPRESS_CRASH_REPORTS"] == "0"
        assert env["CYPRESS_COMMERCIAL_RECOMMENDATIONS"] == "0"

    def test_redaction_covers_raw_and_encoded_credentials(self, cert_config):
        composed = compose_environment(CREDS, cert_config, INJECT_CREDENTIALS, "Linux", "x86_64")

        assert {"ci user", "p@ss:w/rd", "ci%20user", "p%40ss%3Aw%2Frd"} <= set(
            composed.redaction.secrets
        )

    def test_unsupported_platform_fails_planning(self, cert_config):
        with pytest.raises(UnsupportedPlatformError):
            compose_environment(CREDS, cert_config, INJECT_CREDENTIALS, "SunOS", "sparc")
