# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Pane Viewer CLI package."""

import click

from paneviewer import __version__
from paneviewer.utils.logging import configure_logging


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Enable debug logging")
def cli(debug):
    """Pane Viewer - monitor panes for agent tasks in tmux or WezTerm."""
    # Without --debug, PANE_VIEWER_DEBUG decides
    configure_logging(debug=True if debug else None)


def main():
    """Main entry point."""
    cli()


from paneviewer.cli.commands import panes  # noqa: E402,F401
from paneviewer.cli.commands import hook  # noqa: E402,F401
