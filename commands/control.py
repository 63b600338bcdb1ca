"""
Control commands for switching bulbs and applying preferred states.

Includes on, off and preset.
"""

import click

from core.errors import KasaError
from models.utils import get_device


@click.command(name='on')
@click.argument('alias')
def on_command(alias: str):
    """Turn a bulb ON (100% brightness).

    \b
    Examples:
      uv run python kasa_control.py on "Lamp"
    """
    device = get_device(alias)
    if not device:
        return

    try:
        device.turn_on()
    except KasaError as e:
        click.secho(f"✗ Failed to turn {alias} on: {e}", fg='red')
        return

    click.echo(f"✓ {device.alias} now turned On with {device.brightness}% brightness")


@click.command(name='off')
@click.argument('alias')
def off_command(alias: str):
    """Turn a bulb OFF.

    \b
    Examples:
      uv run python kasa_control.py off "Lamp"
    """
    device = get_device(alias)
    if not device:
        return

    try:
        device.turn_off()
    except KasaError as e:
        click.secho(f"✗ Failed to turn {alias} off: {e}", fg='red')
        return

    click.echo(f"✓ {device.alias} now turned Off")


@click.command(name='preset')
@click.argument('alias')
@click.argument('index', type=int)
def preset_command(alias: str, index: int):
    """Apply one of a bulb's preferred states by index.

    Use 'presets <alias>' to see the available indexes.

    \b
    Examples:
      uv run python kasa_control.py preset "Lamp" 0
    """
    device = get_device(alias)
    if not device:
        return

    try:
        device.set_preferred_state(index)
    except KasaError as e:
        click.secho(f"✗ Failed to apply preset {index}: {e}", fg='red')
        return

    click.echo(f"✓ {device.alias} now set to brightness {device.brightness}%")
