"""Configuration management.

This module handles:
- Loading/saving the settings file (encrypted credentials, auto-connect flag)
- Obtaining the passphrase and cloud credentials from the user
- Locking/unlocking credentials through the vault
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import click

from core import vault
from models.types import Credential

# User configuration file location
DEFAULT_CONFIG_FILE = Path.home() / '.kasa_control' / 'config.json'

CONFIG_FILE_ENV = 'KASA_CONFIG_FILE'
PASSPHRASE_ENV = 'KASA_PASSPHRASE'


def get_config_file() -> Path:
    """Settings file path, overridable with KASA_CONFIG_FILE."""
    override = os.getenv(CONFIG_FILE_ENV)
    return Path(override).expanduser() if override else DEFAULT_CONFIG_FILE


@dataclass
class Configuration:
    """Settings record. The passphrase lives in memory only and is never written."""
    path: Path
    encrypted_auth: str = ''
    auto_connect: bool = False
    passphrase: str = field(default='', repr=False)

    def set_passphrase(self, passphrase: str):
        self.passphrase = passphrase

    def set_auth(self, username: str, password: str):
        """Encrypt credentials into the record and write it."""
        self.encrypted_auth = vault.encrypt_credential(self.passphrase, Credential(username, password))
        self.write()

    def read_auth(self, provider: Callable[[], Credential]) -> tuple[Credential, bool]:
        """Unlock the stored credentials, asking the provider when none are stored.

        Freshly provided credentials are encrypted into the record but not
        written; the caller saves them once a login has succeeded.

        Args:
            provider: Returns a Credential entered by the user

        Returns:
            Tuple of (credential, is_fresh)

        Raises:
            AuthFailure: If the stored blob cannot be opened with the passphrase
        """
        is_fresh = False
        if not self.encrypted_auth:
            credential = provider()
            self.encrypted_auth = vault.encrypt_credential(self.passphrase, credential)
            is_fresh = True
        return vault.decrypt_credential(self.passphrase, self.encrypted_auth), is_fresh

    def to_dict(self) -> dict:
        return {'encrypted_auth': self.encrypted_auth, 'auto_connect': self.auto_connect}

    def write(self):
        """Save the settings file with user-only permissions."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

        os.chmod(self.path, 0o600)

    def delete(self) -> bool:
        """Remove the settings file. Returns False if it did not exist."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        self.encrypted_auth = ''
        self.auto_connect = False
        return True


def load_configuration(path: Path | None = None) -> Configuration:
    """Load settings from file.

    A missing file gives default settings; an unreadable one gives defaults
    with a warning.

    Args:
        path: Settings file (defaults to get_config_file())

    Returns:
        Configuration for that path
    """
    path = path or get_config_file()
    configuration = Configuration(path=path)
    if not path.exists():
        return configuration

    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        click.echo(f"Warning: Failed to load config from {path}: {e}", err=True)
        return configuration

    if not isinstance(data, dict):
        click.echo(f"Warning: Ignoring config in {path}: not a JSON object", err=True)
        return configuration

    encrypted_auth = data.get('encrypted_auth') or ''
    if isinstance(encrypted_auth, str):
        configuration.encrypted_auth = encrypted_auth
    else:
        click.echo(f"Warning: Ignoring encrypted_auth in {path}: expected a string", err=True)

    auto_connect = data.get('auto_connect', False)
    if isinstance(auto_connect, bool):
        configuration.auto_connect = auto_connect
    else:
        click.echo(f"Warning: Ignoring auto_connect in {path}: expected true or false", err=True)
    return configuration


def obtain_passphrase() -> str:
    """Passphrase from KASA_PASSPHRASE, or prompted for (hidden input)."""
    passphrase = os.getenv(PASSPHRASE_ENV)
    if passphrase:
        return passphrase
    return click.prompt("Vault passphrase", hide_input=True)


def prompt_credentials() -> Credential:
    """Ask the user for their Kasa cloud credentials."""
    username = click.prompt("Kasa account email", type=str)
    password = click.prompt("Kasa account password", hide_input=True)
    return Credential(username=username, password=password)
