"""Core functionality for Kasa control.

This package contains:
- session: KasaSession class for cloud login and device enumeration
- device: Smart bulb client using the passthrough protocol
- transport: Shared request envelope and JSON helpers
- vault: Credential encryption
- config: Settings file and passphrase handling
- errors: Error types
"""
