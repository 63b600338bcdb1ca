"""Utility functions for Kasa Control.

This module contains helper functions used across the application:
- from_json_dict: Decode a loosely typed JSON mapping into a dataclass
- to_json_dict: Encode a dataclass back into its wire-keyed dict
- get_session: Unlock stored credentials and log in to the cloud
- get_device: Log in and look up a device by alias
- similarity_score: Canonical fuzzy string matching algorithm
- find_similar_strings: Find similar strings using fuzzy matching
"""

import types
import typing
from dataclasses import fields, is_dataclass
from typing import Any, TypeVar, get_type_hints

import click

from core.errors import DecodeError, KasaError

T = TypeVar('T')


def from_json_dict(cls: type[T], data: Any) -> T:
    """Decode a JSON object into an instance of the dataclass ``cls``.

    Keys are looked up by the field's ``json`` metadata entry, falling back to
    the field name. Unknown keys are ignored and missing or null keys keep the
    field default, so records from the cloud that carry extra or fewer fields
    still decode. Nested dataclasses, ``list[...]`` and ``X | None`` fields are
    decoded recursively.

    Args:
        cls: Target dataclass type (every field must have a default)
        data: Decoded JSON value, expected to be a dict

    Returns:
        Instance of cls

    Raises:
        DecodeError: If data is not an object or a value has an incompatible type
    """
    if not isinstance(data, dict):
        raise DecodeError(f"Expected an object for {cls.__name__}, got {type(data).__name__}")

    hints = get_type_hints(cls)
    kwargs = {}
    for f in fields(cls):
        key = f.metadata.get('json', f.name)
        value = data.get(key)
        if value is None:
            continue
        kwargs[f.name] = _coerce(hints[f.name], value, f"{cls.__name__}.{key}")
    return cls(**kwargs)


def _coerce(tp: Any, value: Any, where: str) -> Any:
    origin = typing.get_origin(tp)

    if origin in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        return _coerce(args[0], value, where)

    if origin is list:
        if not isinstance(value, list):
            raise DecodeError(f"{where}: expected a list, got {type(value).__name__}")
        (item_type,) = typing.get_args(tp)
        return [_coerce(item_type, item, f"{where}[{i}]") for i, item in enumerate(value)]

    if is_dataclass(tp):
        return from_json_dict(tp, value)

    if tp is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        raise DecodeError(f"{where}: expected a boolean, got {value!r}")

    if tp is int:
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value)
            except ValueError:
                pass
        raise DecodeError(f"{where}: expected an integer, got {value!r}")

    if tp is str:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise DecodeError(f"{where}: expected a string, got {value!r}")

    return value


def to_json_dict(obj) -> dict:
    """Encode a dataclass back into a JSON-ready dict using its wire keys."""
    result = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if is_dataclass(value):
            value = to_json_dict(value)
        elif isinstance(value, list):
            value = [to_json_dict(v) if is_dataclass(v) else v for v in value]
        result[f.metadata.get('json', f.name)] = value
    return result


def get_session(configuration=None):
    """Unlock the stored credentials and log in to the Kasa cloud.

    This helper reduces boilerplate in device commands. Credentials are
    prompted for when none are stored; a freshly entered pair is saved only
    after the login succeeded.

    Args:
        configuration: Loaded Configuration (defaults to the settings file)

    Returns:
        A logged-in KasaSession, or None if login failed
    """
    # Import here to avoid circular dependency
    from core.config import load_configuration, obtain_passphrase, prompt_credentials
    from core.session import login

    if configuration is None:
        configuration = load_configuration()
    if not configuration.passphrase:
        configuration.set_passphrase(obtain_passphrase())

    try:
        credential, is_fresh = configuration.read_auth(prompt_credentials)
        session = login(credential.username, credential.password)
    except KasaError as e:
        click.secho(f"✗ Login failed: {e}", fg='red')
        return None

    if is_fresh:
        configuration.write()
    return session


def get_device(alias: str):
    """Log in, enumerate devices and look one up by alias.

    Prints an error with similar aliases when the device is not found.

    Returns:
        The Device, or None if login, enumeration or lookup failed
    """
    session = get_session()
    if not session:
        return None

    try:
        devices = session.list_devices()
    except KasaError as e:
        click.secho(f"✗ Failed to list devices: {e}", fg='red')
        return None

    device = session.find_device(alias)
    if device is None:
        click.echo(f"Error: Device '{alias}' not found.")
        similar = find_similar_strings(alias, [d.alias for d in devices])
        if similar:
            click.echo("Did you mean: " + ", ".join(f"'{s}'" for s in similar))
    return device


def similarity_score(s1: str, s2: str) -> int:
    """Calculate similarity score between two strings.

    This is the canonical implementation used throughout the application
    for fuzzy matching (command typo suggestions, device alias matching).

    Args:
        s1: First string to compare
        s2: Second string to compare

    Returns:
        Similarity score:
        - 100: Exact match (case-insensitive)
        - 80: Prefix match
        - 60: Substring match
        - 0-50: Character sequence match (proportional to matching characters)
        - 0: No match
    """
    s1_lower = s1.lower()
    s2_lower = s2.lower()

    if s1_lower == s2_lower:
        return 100

    if s2_lower.startswith(s1_lower) or s1_lower.startswith(s2_lower):
        return 80

    if s1_lower in s2_lower or s2_lower in s1_lower:
        return 60

    # Character sequence matching
    matches = 0
    j = 0
    for char in s1_lower:
        while j < len(s2_lower):
            if s2_lower[j] == char:
                matches += 1
                j += 1
                break
            j += 1

    if matches > 0:
        score = int((matches / max(len(s1_lower), len(s2_lower))) * 50)
        return score if score > 20 else 0

    return 0


def find_similar_strings(target: str, candidates: list[str], limit: int = 5) -> list[str]:
    """Find similar strings using simple similarity scoring.

    Args:
        target: The string to match against
        candidates: List of candidate strings to search
        limit: Maximum number of results to return

    Returns:
        List of similar strings, sorted by similarity score (most similar first)
    """
    scored = [(candidate, similarity_score(target, candidate)) for candidate in candidates]
    filtered = [(c, s) for c, s in scored if s > 0]
    sorted_matches = sorted(filtered, key=lambda x: x[1], reverse=True)
    return [c for c, s in sorted_matches[:limit]]
