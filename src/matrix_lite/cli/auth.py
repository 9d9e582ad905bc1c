"""CLI: matrix-lite auth login|status|logout"""

from typing import Optional

import click
from rich.console import Console

from matrix_lite.client import MatrixClient
from matrix_lite.errors import MatrixError
from matrix_lite.models.session import Credentials
from matrix_lite.sessions import FileSessionStorage, InMemorySessionStorage

console = Console()


def _load_config() -> dict:
    from matrix_lite.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from matrix_lite.cli.main import _save_config
    _save_config(cfg)


def _storage() -> FileSessionStorage:
    from matrix_lite.cli.main import SESSION_FILE
    return FileSessionStorage(SESSION_FILE)


@click.group()
def auth():
    """Authentication commands."""


@auth.command("login")
@click.option("--server", envvar="MATRIX_SERVER", default=None, help="Homeserver base URL")
@click.option("--user", envvar="MATRIX_USER", default=None, help="User id or localpart")
@click.option("--password", envvar="MATRIX_PASSWORD", default=None, help="Password (prompted if omitted)")
@click.option("--save-password", is_flag=True, help="Keep the password in the config for automatic re-login")
def auth_login(server: Optional[str], user: Optional[str], password: Optional[str], save_password: bool):
    """Log in with a password and save the session."""
    cfg = _load_config()
    server = server or click.prompt("Homeserver", default=cfg.get("server", "https://matrix.org"))
    user = user or click.prompt("User", default=cfg.get("user"))
    password = password or click.prompt("Password", hide_input=True)

    # Log in against a scratch store so a failed attempt keeps the saved session.
    fresh = InMemorySessionStorage()
    storage = _storage()
    try:
        with console.status("Logging in..."):
            client = MatrixClient(Credentials(server=server, user=user, password=password), session_storage=fresh)
        client.close()
        session = fresh.get()
        storage.set(session)
    except MatrixError as e:
        console.print(f"[red]Login failed ({e.code}):[/red] {e}")
        raise SystemExit(1)
    new_cfg = {**cfg, "server": server, "user": user}
    if save_password:
        new_cfg["password"] = password
    else:
        new_cfg.pop("password", None)
    _save_config(new_cfg)
    console.print(f"[green]Logged in as {session.user_id or user} (device: {session.device_id or 'unknown'})[/green]")
    console.print(f"[dim]Session saved to {storage.path}[/dim]")


@auth.command("status")
def auth_status():
    """Show current auth status."""
    cfg = _load_config()
    try:
        session = _storage().get()
    except MatrixError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    if session.access_token:
        console.print(f"[green]Logged in[/green] as {session.user_id or cfg.get('user', 'unknown')} on {cfg.get('server')}")
    else:
        console.print("[yellow]Not logged in. Run `matrix-lite auth login`.[/yellow]")


@auth.command("logout")
def auth_logout():
    """Clear saved session and credentials."""
    _storage().clear()
    _save_config({})
    console.print("[green]Logged out.[/green]")
