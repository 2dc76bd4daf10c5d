"""
Setup commands for Hue Control CLI.

Contains the custom Click group class with typo suggestions, plus the
commands to inspect and store the bridge credential.
"""

import click
from core.config import (
    USER_CONFIG_FILE,
    get_credential,
    get_trust_settings,
    save_user_config,
)
from core.session import TrustPolicy
from models.utils import similarity_score


class SuggestingGroup(click.Group):
    """Custom Group class that suggests similar commands on typos."""

    def resolve_command(self, ctx, args):
        """Resolve command with suggestions for typos."""
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            if 'No such command' in str(e):
                cmd_name = args[0] if args else ''
                suggestions = self._get_suggestions(ctx, cmd_name)

                if suggestions:
                    error_msg = f"No such command '{cmd_name}'.\n\n"
                    error_msg += click.style("Did you mean one of these?\n", fg='yellow')
                    for suggestion in suggestions:
                        error_msg += click.style(f"  • {suggestion}\n", fg='green')
                    raise click.UsageError(error_msg, ctx)
            raise

    def _get_suggestions(self, ctx, cmd_name, max_suggestions=3):
        """Get command suggestions based on similarity."""
        if not cmd_name:
            return []

        suggestions = []
        for command in self.list_commands(ctx):
            cmd_obj = self.get_command(ctx, command)
            if cmd_obj and not cmd_obj.hidden:
                score = similarity_score(cmd_name, command)
                if score > 0:
                    suggestions.append((score, command))

        suggestions.sort(reverse=True, key=lambda x: x[0])
        return [cmd for score, cmd in suggestions[:max_suggestions]]


def _mask(token: str) -> str:
    if len(token) <= 8:
        return '*' * len(token)
    return f"{token[:4]}…{token[-4:]}"


@click.command(name='setup')
def setup_command():
    """Show where the bridge credential and trust policy come from.

    \b
    Credential priority:
      1. HUE_USERNAME environment variable
      2. 1Password (HUE_1PASSWORD_VAULT / HUE_1PASSWORD_ITEM)
      3. ~/.hue_control/config.json
    """
    click.echo()
    click.secho("=== Hue Control Setup ===", fg='cyan', bold=True)
    click.echo()

    token, source = get_credential()
    if token:
        click.secho(f"✓ Credential: {_mask(token)}", fg='green')
        click.echo(f"  Source: {source}")
    else:
        click.secho("✗ No credential configured", fg='red')
        click.echo("  Set HUE_USERNAME, or store an existing one with:")
        click.echo("    hue-control configure <username>")

    policy, fingerprint = get_trust_settings()
    click.echo()
    click.echo(f"Trust policy: {policy}")
    if fingerprint:
        click.echo(f"Pinned fingerprint: {fingerprint}")
    click.echo(f"Config file: {USER_CONFIG_FILE}")
    click.echo()


@click.command(name='configure')
@click.argument('username')
@click.option('--trust', 'trust_policy',
              type=click.Choice([p.value for p in TrustPolicy]),
              help='Certificate validation policy for the bridge')
@click.option('--fingerprint', help='SHA-256 certificate fingerprint (for pin-certificate)')
def configure_command(username: str, trust_policy: str | None, fingerprint: str | None):
    """Store an existing bridge username in the user config file.

    The username must already have been issued by the bridge; this command
    does not pair with the bridge.

    \b
    Examples:
      hue-control configure 1028d66426293e821ecfd9ef1a0731df
      hue-control configure <username> --trust pin-certificate --fingerprint AB:CD:...
    """
    if not username.strip():
        raise click.BadParameter("username must not be empty", param_hint='USERNAME')
    if trust_policy == TrustPolicy.PIN_CERTIFICATE.value and not fingerprint:
        raise click.BadParameter("pin-certificate requires --fingerprint", param_hint='--trust')

    try:
        save_user_config(username.strip(), trust_policy, fingerprint)
    except (IOError, OSError) as e:
        click.secho(f"✗ Failed to save config to {USER_CONFIG_FILE}: {e}", fg='red', err=True)
        raise click.exceptions.Exit(1)

    click.secho(f"✓ Configuration saved to {USER_CONFIG_FILE}", fg='green')
