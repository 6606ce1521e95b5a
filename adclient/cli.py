from __future__ import annotations

import json
from typing import Any, Callable, List, Optional

import typer
from pydantic import ValidationError

from .client import ADClient
from .env_settings import get_settings
from .errors import ADClientError
from .log_config import setup_logging


cli = typer.Typer(
    name="adclient",
    help="Query and authenticate against Active Directory. Configured through AD_* environment variables.",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2))


def _run(op: Callable[[ADClient], Any]) -> Any:
    try:
        st = get_settings()
    except ValidationError as e:
        typer.echo(f"invalid configuration: {e}", err=True)
        raise typer.Exit(code=2)

    setup_logging(level=st.log_level, log_file=st.log_file)
    try:
        with ADClient(st.to_config()) as client:
            return op(client)
    except ADClientError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)


@cli.command()
def users(base_dn: Optional[str] = typer.Option(None, "--base-dn", help="Search base (default: AD_BASE_DN)")):
    """Print all enabled user accounts."""
    _echo_json(_run(lambda c: c.get_all_users(base_dn)))


@cli.command()
def computers(base_dn: Optional[str] = typer.Option(None, "--base-dn", help="Search base (default: AD_BASE_DN)")):
    """Print all computer accounts."""
    _echo_json(_run(lambda c: c.get_all_computers(base_dn)))


@cli.command()
def search(
    search_filter: str = typer.Argument("", help="LDAP filter (default: enabled users)"),
    base_dn: Optional[str] = typer.Option(None, "--base-dn"),
    attribute: Optional[List[str]] = typer.Option(None, "--attribute", "-a", help="Attribute to request; repeatable"),
):
    """Print all entries matching a raw LDAP filter."""
    _echo_json(_run(lambda c: c.fetch_all(search_filter, base_dn, attribute or None)))


@cli.command()
def user(username: str):
    """Print the single entry matching AD_USER_FILTER."""
    _echo_json(_run(lambda c: c.get_user_info(username)))


@cli.command("group-members")
def group_members(group: str):
    """Print the entries matching AD_GROUP_FILTER for GROUP."""
    _echo_json(_run(lambda c: c.get_group_members(group)))


@cli.command()
def auth(
    username: str,
    password: str = typer.Option(..., prompt=True, hide_input=True, envvar="AD_USER_PASSWORD"),
):
    """Check a user's password. Exit code 0 on success, 3 otherwise."""
    result = _run(lambda c: c.authenticate(username, password))
    _echo_json({"status": result.status.value, "user": result.record})
    if result.rebind_error is not None:
        typer.echo(f"warning: {result.rebind_error}", err=True)
    if not result.success:
        raise typer.Exit(code=3)


def main() -> None:
    cli()
