"""Top-level CLI: parse flags, then plan and run the install."""

import argparse
import logging
import os
import sys

from cyboot import __version__
from cyboot.config import load_config
from cyboot.constants import FAILURE_EXIT_CODE
from cyboot.environment import credential_secrets
from cyboot.errors import LauncherError
from cyboot.launcher import launch
from cyboot.managers import parse_manager
from cyboot.models import CLEAN, INJECT_CREDENTIALS, InvocationRequest
from cyboot.redaction import redact_text

log = logging.getLogger("cyboot")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cyboot",
        description=(
            "Run the package manager's install step with the private Cypress binary "
            "registry configured, without going through a shell"
        ),
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "manager",
        nargs="?",
        metavar="pm",
        help="Package manager to run: npm, pnpm or yarn (detected when omitted)",
    )
    parser.add_argument("-p", "--pm", dest="pm", help="Package manager to run (overrides pm)")
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Verbose install output and debug logging",
    )
    parser.add_argument(
        "--clean-install",
        action="store_true",
        help="Do not inject registry credentials or certificates (public defaults)",
    )
    return parser


def build_request(args: argparse.Namespace, raw_args: list[str]) -> InvocationRequest:
    """Turn parsed flags into an InvocationRequest; invalid manager names raise."""
    explicit = args.pm if args.pm is not None else args.manager
    return InvocationRequest(
        manager=parse_manager(explicit) if explicit is not None else None,
        debug=args.debug,
        injection_mode=CLEAN if args.clean_install else INJECT_CREDENTIALS,
        raw_args=tuple(raw_args),
    )


def main(argv: list[str] | None = None) -> int:
    """Run one install and return the exit code to use."""
    raw_args = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    args, unknown = parser.parse_known_args(raw_args)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )
    if unknown:
        log.debug("ignoring arguments: %s", " ".join(unknown))

    try:
        request = build_request(args, raw_args)
        config = load_config()
        return launch(request, config)
    except LauncherError as e:
        secrets = credential_secrets(os.environ)
        first, *rest = e.lines() or [e.__class__.__name__]
        print(redact_text(f"Error: {first}", secrets), file=sys.stderr)
        for line in rest:
            print(redact_text(line, secrets), file=sys.stderr)
        return FAILURE_EXIT_CODE


def entrypoint() -> None:
    """Console script entrypoint."""
    raise SystemExit(main())
