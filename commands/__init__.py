"""CLI command modules.

This package contains:
- control: Light control commands (power, brightness, colour, state)
- inspection: Discovery and light listing commands
- setup: Credential commands (setup, configure) and the CLI group class
"""
