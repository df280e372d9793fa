"""Command-line interface for the deployment wrapper."""

from anyconnect_deploy.cli.main import cli, main

__all__ = ['cli', 'main']
