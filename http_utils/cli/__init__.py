"""Command-line host for the fetch engine."""

from http_utils.cli.main import cli


__all__ = ["cli"]
