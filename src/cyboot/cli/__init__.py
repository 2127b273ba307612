"""Command-line front end for cyboot."""

from cyboot.cli.app import build_parser, build_request, entrypoint, main

__all__ = [
    "build_parser",
    "build_request",
    "entrypoint",
    "main",
]
