"""Data models and utility functions.

This package contains:
- types: Dataclasses for cloud records (devices, system info, credentials)
- utils: Utility functions (JSON decoding, session helpers, fuzzy matching)
"""
