#!/usr/bin/env python3
"""
Kasa Control CLI
Control TP-Link Kasa smart bulbs through the Kasa cloud.
"""

import logging

import click

from core.config import load_configuration
from commands.setup import (
    ColouredGroup,
    help_command,
    setup_command,
    configure_command,
    auto_connect_command,
    reset_command
)
from commands.devices import devices_command, info_command, presets_command
from commands.control import on_command, off_command, preset_command


@click.group(
    cls=ColouredGroup,
    invoke_without_command=True,
    context_settings={'help_option_names': ['-h', '--help']}
)
@click.option('--verbose', '-v', is_flag=True, help='Show diagnostic logging')
@click.version_option(version='0.1.0', prog_name='Kasa Control')
@click.pass_context
def cli(ctx, verbose: bool):
    """Kasa Control CLI - Switch your TP-Link Kasa bulbs from the terminal.

Credentials are stored encrypted in ~/.kasa_control/config.json and unlocked
with a passphrase (KASA_PASSPHRASE or prompt). Run 'configure' first.

With auto connect on, running without a command lists your devices."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    if ctx.invoked_subcommand is None:
        if load_configuration().auto_connect:
            ctx.invoke(devices_command)
        else:
            click.echo(ctx.get_help())


# Register setup and help commands
cli.add_command(help_command)
cli.add_command(setup_command)
cli.add_command(configure_command)
cli.add_command(auto_connect_command)
cli.add_command(reset_command)

# Register device commands
cli.add_command(devices_command)
cli.add_command(info_command)
cli.add_command(presets_command)

# Register control commands
cli.add_command(on_command)
cli.add_command(off_command)
cli.add_command(preset_command)


if __name__ == '__main__':
    cli()
