#!/usr/bin/env python3
# /// script
# requires-python = ">=3.10"
# dependencies = ["beautifulsoup4", "PyYAML", "jsonschema", "click", "servicelayer"]
# ///

"""
SPDX-License-Identifier: LicenseRef-NonCommercial-Only
© 2025 github.com/defmon3 — Non-commercial use only. Commercial use requires permission.

Format docstrings according to PEP 287
File: cli.py
"""

import logging
import os
import sys

import click
import yaml
from servicelayer.logs import configure_logging

from htmlwasher.parse import parse_setup
from htmlwasher.preset import PRESET_NAMES, get_preset
from htmlwasher.washer import wash

log = logging.getLogger(__name__)

MAX_INPUT_LEN = int(os.environ.get("HTMLWASHER_MAX_INPUT_LEN", "5000000"))


@click.group()
def cli() -> None:
    """
    Root Click command group for the htmlwasher CLI.

    This initializes logging via ``servicelayer.logs.configure_logging()`` and
    serves as the parent for the wash, check and preset subcommands.
    """
    configure_logging()


@cli.command("wash")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--setup", "setup_file", type=click.File("r", encoding="utf-8"), help="Policy YAML file.")
@click.option("--preset", type=click.Choice(PRESET_NAMES), help="Built-in policy to use instead of --setup.")
@click.option("--title", default=None, help="Title to add when the document has none.")
@click.option("-o", "--output", type=click.File("w", encoding="utf-8"), default="-", help="Where to write the result.")
def wash_command(source, setup_file, preset: str | None, title: str | None, output) -> None:
    """
    Sanitize an HTML file (or stdin) and write the result.

    :param source: HTML input, ``-`` for stdin.
    :param setup_file: Optional policy file.
    :param preset: Optional built-in preset name.
    :param title: Optional document title.
    :param output: Destination, ``-`` for stdout.
    :notes:
        - Without ``--setup`` or ``--preset`` the standard preset applies.
        - Warnings go to stderr; an invalid policy falls back to the standard preset.
    """
    if setup_file is not None and preset is not None:
        raise click.UsageError("--setup and --preset are mutually exclusive")

    html = source.read(MAX_INPUT_LEN + 1)
    if len(html) > MAX_INPUT_LEN:
        raise click.ClickException(f"input exceeds {MAX_INPUT_LEN} characters (HTMLWASHER_MAX_INPUT_LEN)")

    setup = setup_file.read() if setup_file is not None else None
    if preset is not None:
        setup = get_preset(preset)

    log.debug(f"Washing {len(html)} characters from {source.name}")
    result = wash(html, setup=setup, title=title)
    for warning in result.warnings:
        log.warning("[cli.wash] %s", warning)
        click.echo(f"warning: {warning}", err=True)
    output.write(result.html)


@cli.command()
@click.argument("setup_file", type=click.File("r", encoding="utf-8"))
def check(setup_file) -> None:
    """
    Validate a policy file and print it in normalized form.

    :param setup_file: Policy YAML to check.
    :notes:
        - Exits with status 1 and prints ``<ERROR_CODE>: <message>`` on failure.
    """
    parsed = parse_setup(setup_file.read())
    if not parsed.ok:
        click.echo(f"{parsed.error_code.value}: {parsed.error_message}", err=True)
        sys.exit(1)
    click.echo(yaml.safe_dump(parsed.config.to_dict(), sort_keys=False, default_flow_style=False), nl=False)


@cli.command()
@click.argument("name", type=click.Choice(PRESET_NAMES))
def preset(name: str) -> None:
    """Print a built-in preset, e.g. as a starting point for a custom policy."""
    click.echo(get_preset(name), nl=False)


if __name__ == "__main__":
    cli()
