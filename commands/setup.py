"""
Setup and help commands for Kasa Control CLI.

Contains the Click group class with coloured command listing and typo
suggestions, plus the commands that manage the settings file.
"""

from dataclasses import dataclass

import click

from core.config import load_configuration, obtain_passphrase, prompt_credentials
from core.errors import KasaError
from core.session import login
from models.utils import find_similar_strings


@dataclass(frozen=True)
class CommandSection:
    """Represents a section in the help command."""
    name: str
    commands: list[tuple[str, str]]


class ColouredGroup(click.Group):
    """Group that colours its command list and suggests commands for typos."""

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            if 'No such command' not in str(e):
                raise
            cmd_name = args[0] if args else ''
            visible = [name for name in self.list_commands(ctx)
                       if not self.get_command(ctx, name).hidden]
            suggestions = find_similar_strings(cmd_name, visible, limit=3) if cmd_name else []
            if not suggestions:
                raise
            error_msg = f"No such command '{cmd_name}'.\n\n"
            error_msg += click.style("Did you mean one of these?\n", fg='yellow')
            for suggestion in suggestions:
                error_msg += click.style(f"  • {suggestion}\n", fg='green')
            raise click.UsageError(error_msg, ctx) from e

    def format_commands(self, ctx, formatter):
        commands = []
        for name in self.list_commands(ctx):
            cmd = self.get_command(ctx, name)
            if cmd is None or cmd.hidden:
                continue
            commands.append((name, cmd.get_short_help_str(limit=200)))

        if not commands:
            return

        width = max(len(name) for name, _ in commands)
        formatter.write_paragraph()
        formatter.write_text(click.style('Commands:', fg='yellow', bold=True))
        with formatter.indentation():
            for name, help_text in commands:
                formatter.write_text(
                    click.style(name.ljust(width), fg='green') + '  ' + help_text
                )


COMMAND_SECTIONS = [
    CommandSection(
        name="SETUP",
        commands=[
            ("configure", "Enter and store your Kasa cloud credentials"),
            ("setup", "Show configuration and test login"),
            ("auto-connect [--on/--off]", "Show or change the auto-connect flag"),
            ("reset", "Delete the settings file"),
        ]
    ),
    CommandSection(
        name="DEVICES",
        commands=[
            ("devices", "List bulbs with power state and brightness"),
            ("info <alias>", "Show system info for one bulb"),
            ("presets <alias>", "List a bulb's preferred states"),
        ]
    ),
    CommandSection(
        name="CONTROL",
        commands=[
            ("on <alias>", "Turn a bulb on"),
            ("off <alias>", "Turn a bulb off"),
            ("preset <alias> <index>", "Apply a preferred state"),
        ]
    ),
]


@click.command(name='help')
def help_command():
    """Display help and common commands."""
    click.echo()
    click.secho("Kasa Control - Quick Reference", fg='cyan', bold=True)
    click.echo()

    for section in COMMAND_SECTIONS:
        click.secho(section.name, fg='yellow', bold=True)
        for cmd, desc in section.commands:
            click.echo("  ", nl=False)
            click.secho(cmd, fg='green', nl=False)
            click.echo(" " * (30 - len(cmd)) + "  " + desc)
        click.echo()

    click.secho("Environment:", fg='yellow', bold=True)
    click.echo("  KASA_PASSPHRASE     Vault passphrase (prompted for if unset)")
    click.echo("  KASA_CONFIG_FILE    Settings file location")
    click.echo()


@click.command(name='configure')
@click.option('--reconfigure', is_flag=True, help='Replace stored credentials without asking')
def configure_command(reconfigure: bool):
    """Store Kasa cloud credentials, encrypted with your passphrase.

    The credentials are checked by logging in before they are saved.
    """
    configuration = load_configuration()

    if configuration.encrypted_auth and not reconfigure:
        click.echo(f"✓ Credentials already stored in {configuration.path}")
        if not click.confirm("Replace them?", default=False):
            return

    configuration.set_passphrase(obtain_passphrase())
    credential = prompt_credentials()

    click.echo("Checking credentials with the Kasa cloud...")
    try:
        login(credential.username, credential.password)
    except KasaError as e:
        click.secho(f"✗ Login failed: {e}", fg='red')
        return

    try:
        configuration.set_auth(credential.username, credential.password)
    except OSError as e:
        click.secho(f"✗ Failed to save {configuration.path}: {e}", fg='red')
        return
    click.secho(f"✓ Credentials saved to {configuration.path}", fg='green')


@click.command(name='setup')
def setup_command():
    """Show current configuration and test the cloud login."""
    configuration = load_configuration()

    click.echo()
    click.secho("=== Kasa Control Configuration ===", fg='cyan', bold=True)
    click.echo(f"   Path:          {configuration.path}")
    exists = configuration.path.exists()
    click.echo(f"   File:          {'present' if exists else 'does not exist'}")
    stored = click.style('✓ Stored', fg='green') if configuration.encrypted_auth \
        else click.style('✗ Not configured', fg='yellow')
    click.echo(f"   Credentials:   {stored}")
    click.echo(f"   Auto connect:  {'on' if configuration.auto_connect else 'off'}")
    click.echo()

    if not configuration.encrypted_auth:
        click.echo("Run this command to store your credentials:")
        click.echo(click.style("  uv run python kasa_control.py configure", fg='green', bold=True))
        click.echo()
        return

    click.echo("Testing login...")
    configuration.set_passphrase(obtain_passphrase())
    try:
        credential, _ = configuration.read_auth(prompt_credentials)
        session = login(credential.username, credential.password)
    except KasaError as e:
        click.secho(f"✗ {e}", fg='red', bold=True)
        return

    account = session.account
    click.secho(f"✓ Logged in as {account.email or credential.username}", fg='green', bold=True)
    click.echo()


@click.command(name='auto-connect')
@click.option('--on/--off', 'enabled', default=None, help='Turn auto connect on or off')
def auto_connect_command(enabled: bool | None):
    """Show or change the auto-connect flag."""
    configuration = load_configuration()
    if enabled is None:
        click.echo(f"Auto Connect is {'on' if configuration.auto_connect else 'off'}")
        return

    configuration.auto_connect = enabled
    try:
        configuration.write()
    except OSError as e:
        click.secho(f"✗ Failed to save {configuration.path}: {e}", fg='red')
        return
    click.echo(f"✓ Auto Connect is now {'on' if enabled else 'off'}")


@click.command(name='reset')
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation prompt')
def reset_command(yes: bool):
    """Delete the settings file, including stored credentials."""
    configuration = load_configuration()
    if not yes and not click.confirm(f"Delete {configuration.path}?", default=False):
        click.echo("Cancelled.")
        return

    if configuration.delete():
        click.secho(f"✓ Deleted {configuration.path}", fg='green')
    else:
        click.echo(f"Nothing to delete at {configuration.path}")
