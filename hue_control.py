#!/usr/bin/env python3
"""
Hue Control CLI
Find the Philips Hue bridge on the local network and control its lights.
"""

import logging

import click

from core.config import DISCOVERY_TIMEOUT
from commands.setup import SuggestingGroup, setup_command, configure_command
from commands.inspection import discover_command, lights_command
from commands.control import (
    power_command,
    brightness_command,
    colour_command,
    state_command,
)


@click.group(
    cls=SuggestingGroup,
    context_settings={
        'help_option_names': ['-h', '--help'],
        'max_content_width': 120
    }
)
@click.version_option(version='0.1.0', prog_name='Hue Control')
@click.option('--bridge-ip', envvar='HUE_BRIDGE_IP',
              help='Use this bridge address instead of mDNS discovery')
@click.option('--timeout', type=float, default=DISCOVERY_TIMEOUT, show_default=True,
              help='Discovery timeout in seconds')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, bridge_ip: str | None, timeout: float, verbose: bool):
    """Hue Control CLI - Discover your Hue Bridge and control its lights.

Lights are addressed by index; run 'lights' to see them.

Authentication: HUE_USERNAME → 1Password → Local config (~/.hue_control/config.json)
Run 'configure' to store an existing bridge username, 'setup' to check it."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
    )
    ctx.obj = {
        'bridge_ip': bridge_ip,
        'timeout': timeout,
    }


# Register setup commands
cli.add_command(setup_command)
cli.add_command(configure_command)

# Register inspection commands
cli.add_command(discover_command)
cli.add_command(lights_command)

# Register control commands
cli.add_command(power_command)
cli.add_command(brightness_command)
cli.add_command(colour_command)
cli.add_command(state_command)


if __name__ == '__main__':
    cli()
