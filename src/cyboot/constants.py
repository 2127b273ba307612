"""Fixed names and values shared across the launcher."""

# Credentials consumed in inject-credentials mode.
USERNAME_VAR = "NEXUS_USERNAME"
PASSWORD_VAR = "NEXUS_PASSWORD"
CREDENTIAL_DESCRIPTIONS = {
    USERNAME_VAR: "Nexus authentication username/token",
    PASSWORD_VAR: "Nexus authentication password/token",
}

# Hints left behind by the invoking package manager.
USER_AGENT_VAR = "npm_config_user_agent"
EXECPATH_VAR = "npm_execpath"
NODE_EXECPATH_VAR = "npm_node_execpath"
NODE_PATH_VAR = "NODE_PATH"

# Produced into the child environment.
CERT_PATH_VAR = "NODE_EXTRA_CA_CERTS"
BINARY_URL_VAR = "CYPRESS_INSTALL_BINARY"
TELEMETRY_OPT_OUTS = {
    "CYPRESS_CRASH_REPORTS": "0",
    "CYPRESS_COMMERCIAL_RECOMMENDATIONS": "0",
}

PATH_CASINGS = ("PATH", "Path", "path")

DEFAULT_REGISTRY_DOMAIN = "nexus.company.com"
DEFAULT_CERT_FILENAME = "certificate.pem"

MASK = "***"
FAILURE_EXIT_CODE = 1
