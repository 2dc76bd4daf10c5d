"""
Inspection commands for the bridge and its lights.

Includes bridge discovery and the light listing used to find inventory
indices for the control commands.
"""

import click

from core.discovery import discover_bridge
from core.errors import HueError
from models.utils import get_session, format_light


@click.command(name='discover')
@click.pass_obj
def discover_command(options: dict):
    """Find the Hue Bridge on the local network via mDNS.

    Takes the first bridge that answers; with several bridges on the
    network the one reported may vary between runs.
    """
    click.echo("Searching for Hue Bridge...")
    try:
        identity = discover_bridge(timeout=options['timeout'])
    except HueError as e:
        click.secho(f"✗ {type(e).__name__}: {e}", fg='red', err=True)
        raise click.exceptions.Exit(1)

    click.echo()
    click.secho(f"✓ Found {identity.instance_name}", fg='green', bold=True)
    click.echo(f"  Addresses: {', '.join(identity.addresses)}")
    click.echo(f"  Port: {identity.port}")
    if identity.bridge_id:
        click.echo(f"  Bridge ID: {identity.bridge_id}")
    if identity.txt_records:
        click.echo("  TXT:")
        for record in identity.txt_records:
            click.echo(f"    {record}")


@click.command(name='lights')
@click.option('--details', '-d', is_flag=True, help='Show model and software details')
@click.pass_obj
def lights_command(options: dict, details: bool):
    """List all lights with the index used by control commands."""
    session = get_session(options['bridge_ip'], options['timeout'])
    with session:
        lights = session.lights

    if not lights:
        click.echo("No lights found.")
        return

    click.echo(f"\nAvailable lights ({len(lights)}):\n")
    for index, light in enumerate(lights):
        click.echo(format_light(index, light))
        if details:
            click.echo(f"       Model: {light.model_id} ({light.product_name or light.type})")
            click.echo(f"       Manufacturer: {light.manufacturer}")
            click.echo(f"       Software: {light.sw_version}")
            click.echo(f"       Bridge ID: {light.bridge_id}")
