"""`turn-credential` command: print a freshly minted relay credential."""

import json

import click

from ..credential import new_credential


@click.command("turn-credential")
@click.option(
    "--secret",
    envvar="LK_TURN_SECRET",
    default="",
    show_envvar=True,
    help="Secret shared with the TURN server",
)
@click.option(
    "--format", "-f", "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text)",
)
def turn_credential(secret: str, fmt: str):
    """Mint a TURN REST API credential valid for 60 seconds."""
    credential = new_credential(secret)

    if fmt == "json":
        click.echo(json.dumps(credential.to_dict()))
    else:
        click.echo(f"username: {credential.username}")
        click.echo(f"password: {credential.password}")
