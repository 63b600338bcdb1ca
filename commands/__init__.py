"""CLI command modules.

This package contains:
- setup: Setup and help commands (configure, setup, auto-connect, reset)
- devices: Inspection commands (devices, info, presets)
- control: Direct control commands (on, off, preset)
"""
