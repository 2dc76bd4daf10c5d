"""Data models and utility functions.

This package contains:
- types: Bridge identity, light and desired-state dataclasses
- utils: CLI helpers (get_session, bridge_errors, similarity_score, etc.)
"""
