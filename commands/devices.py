"""
Inspection commands for listing devices and their reported state.

Includes devices, info and presets.
"""

import json

import click

from core.errors import KasaError
from models.utils import get_device, get_session, to_json_dict


@click.command(name='devices')
def devices_command():
    """List all bulbs on the Kasa account with their current state."""
    session = get_session()
    if not session:
        return

    try:
        devices = session.list_devices()
    except KasaError as e:
        click.secho(f"✗ Failed to list devices: {e}", fg='red')
        return

    click.echo(f"Found {len(devices)} device(s)")
    click.echo()
    for device in devices:
        colour = 'green' if device.is_connected() else 'red'
        click.echo(f"  {click.style(device.human_name(), fg=colour)}")
        click.echo(f"    Model: {device.model}  ID: {device.id}")
    click.echo()


@click.command(name='info')
@click.argument('alias')
@click.option('--json', 'as_json', is_flag=True, help='Print the raw system info as JSON')
def info_command(alias: str, as_json: bool):
    """Show the system info reported by one bulb.

    \b
    Examples:
      uv run python kasa_control.py info "Lamp"
      uv run python kasa_control.py info "Lamp" --json
    """
    device = get_device(alias)
    if not device:
        return

    try:
        sys_info = device.system_info()
    except KasaError as e:
        click.secho(f"✗ Failed to read system info: {e}", fg='red')
        return

    if as_json:
        click.echo(json.dumps(to_json_dict(sys_info), indent=2))
        return

    click.secho(f"=== {sys_info.alias} ===", fg='cyan', bold=True)
    click.echo(f"  Model:       {sys_info.model} ({sys_info.description})")
    click.echo(f"  Device ID:   {sys_info.device_id}")
    click.echo(f"  MAC:         {sys_info.mic_mac}")
    click.echo(f"  Firmware:    {sys_info.sw_ver} (hardware {sys_info.hw_ver})")
    click.echo(f"  Signal:      {sys_info.rssi} dBm")
    state = sys_info.light_state
    click.echo(f"  Power:       {'ON' if state.on_off else 'OFF'}")
    click.echo(f"  Brightness:  {state.brightness}%")
    if sys_info.is_variable_color_temp:
        click.echo(f"  Colour temp: {state.color_temp}K")
    if sys_info.is_color:
        click.echo(f"  Hue/Sat:     {state.hue}/{state.saturation}")
    click.echo()


@click.command(name='presets')
@click.argument('alias')
def presets_command(alias: str):
    """List a bulb's preferred states."""
    device = get_device(alias)
    if not device:
        return

    if not device.preferred_states:
        click.echo(f"{device.alias} has no preferred states.")
        return

    click.echo(f"Preferred states for {device.alias}:")
    for position, state in enumerate(device.preferred_states):
        click.echo(
            f"  {click.style(str(position), fg='green', bold=True)}. "
            f"Brightness [{state.brightness}%]  colour temp {state.color_temp}K  "
            f"hue {state.hue}  saturation {state.saturation}"
        )
