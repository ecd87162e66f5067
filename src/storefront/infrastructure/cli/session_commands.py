"""CLI commands for signing in and out."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.identity import Identity
from storefront.infrastructure.bootstrap import cart_manager, session_provider
from storefront.infrastructure.cli.cart_commands import EchoCartObserver


@click.command("login")
@click.option("--user-id", required=True, help="Identity issued by the identity provider.")
@click.option("--email", default="", help="Account email.")
@click.option("--name", default="", help="Display name.")
def session_login(user_id: str, email: str, name: str) -> None:
    """Sign in; a guest cart is merged into the account cart."""
    session = session_provider()
    cart_manager(session, EchoCartObserver())

    try:
        session.sign_in(Identity(id=user_id, email=email, name=name))
    except DomainException as exc:
        raise click.ClickException(f"Sign-in failed, still browsing as guest: {exc}")

    click.echo(f"Signed in as {name or user_id}")


@click.command("logout")
def session_logout() -> None:
    """Sign out and continue as a guest."""
    try:
        session_provider().sign_out()
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo("Signed out.")


@click.command("whoami")
def session_whoami() -> None:
    """Show the signed-in identity."""
    identity = session_provider().current_identity()
    if identity is None:
        click.echo("Browsing as guest.")
        return
    click.echo(f"{identity.name or identity.id} <{identity.email}> (id={identity.id})")
