"""
Control commands for direct manipulation of lights.

Includes power, brightness, colour and general state changes. Lights are
addressed by the index shown by the 'lights' command.
"""

import click
from core.errors import HueError
from models.types import DesiredState
from models.utils import get_session, report_state_result


def _send(options: dict, index: int, desired: DesiredState, message: str):
    """Open a session, apply desired to one light and report the result."""
    session = get_session(options['bridge_ip'], options['timeout'])
    with session:
        try:
            response = session.apply_state(index, desired)
        except HueError as e:
            click.secho(f"✗ {type(e).__name__}: {e}", fg='red', err=True)
            raise click.exceptions.Exit(1)
        name = session.lights[index].name

    if not report_state_result(response, f"{name} {message}"):
        raise click.exceptions.Exit(1)


@click.command(name='power')
@click.argument('index', type=int)
@click.option('--on/--off', default=True, help='Turn light on or off')
@click.pass_obj
def power_command(options: dict, index: int, on: bool):
    """Turn a light ON or OFF.

    \b
    Examples:
      hue-control power 0 --on
      hue-control power 2 --off
    """
    _send(options, index, DesiredState(on=on), f"turned {'ON' if on else 'OFF'}")


@click.command(name='brightness')
@click.argument('index', type=int)
@click.argument('brightness', type=click.IntRange(0, 255))
@click.pass_obj
def brightness_command(options: dict, index: int, brightness: int):
    """Set brightness of a light (0-255) without changing anything else."""
    _send(options, index, DesiredState(bri=brightness), f"brightness set to {brightness}")


@click.command(name='colour')
@click.argument('index', type=int)
@click.option('--hue', '-u', type=click.IntRange(0, 65535), help='Hue value (0-65535)')
@click.option('--sat', '-s', type=click.IntRange(0, 255), help='Saturation (0-255)')
@click.option('--ct', '-t', type=click.IntRange(153, 500), help='Colour temperature (153-500 mireds)')
@click.option('--xy', type=(float, float), help='CIE xy chromaticity, e.g. --xy 0.31 0.32')
@click.pass_obj
def colour_command(options: dict, index: int, hue: int | None, sat: int | None,
                   ct: int | None, xy: tuple[float, float] | None):
    """Set colour or temperature of a light.

    \b
    Examples:
      hue-control colour 0 -u 10000 -s 254
      hue-control colour 0 --ct 300
      hue-control colour 1 --xy 0.675 0.322
    """
    if hue is None and sat is None and ct is None and xy is None:
        raise click.UsageError("Please specify --hue/--sat, --ct or --xy")

    _send(options, index, DesiredState(hue=hue, sat=sat, ct=ct, xy=xy), "colour updated")


@click.command(name='state')
@click.argument('index', type=int)
@click.option('--on/--off', default=None, help='Power state')
@click.option('--bri', type=click.IntRange(0, 255), help='Brightness (0-255)')
@click.option('--hue', type=click.IntRange(0, 65535), help='Hue value (0-65535)')
@click.option('--sat', type=click.IntRange(0, 255), help='Saturation (0-255)')
@click.option('--ct', type=int, help='Colour temperature in mireds')
@click.option('--effect', type=click.Choice(['none', 'colorloop']), help='Dynamic effect')
@click.option('--alert', type=click.Choice(['none', 'select', 'lselect']), help='Alert (flash) mode')
@click.pass_obj
def state_command(options: dict, index: int, on: bool | None, bri: int | None,
                  hue: int | None, sat: int | None, ct: int | None,
                  effect: str | None, alert: str | None):
    """Apply several state fields to a light in one request.

    Only the options given are sent. The bridge may accept some fields and
    reject others; rejected fields are listed.
    """
    desired = DesiredState(on=on, bri=bri, hue=hue, sat=sat, ct=ct, effect=effect, alert=alert)
    if not desired.to_payload():
        raise click.UsageError("Specify at least one state option")

    _send(options, index, desired, "state updated")
