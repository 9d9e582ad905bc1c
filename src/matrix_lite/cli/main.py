"""
matrix-lite CLI — `matrix-lite` command.

Commands:
  matrix-lite auth login        Password login, session saved to disk
  matrix-lite auth status       Show the saved login
  matrix-lite auth logout       Forget the saved session
  matrix-lite send ROOM TEXT    Send a text (or --html) message
  matrix-lite send-media ROOM   Send an already uploaded file
  matrix-lite upload FILE       Upload a file, optionally post it to a room
"""

import json
import logging
import os
from pathlib import Path
from typing import NoReturn, Optional

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install matrix-lite[cli]")

from matrix_lite.client import MatrixClient
from matrix_lite.errors import MatrixError
from matrix_lite.models.session import Credentials
from matrix_lite.sessions import FileSessionStorage

console = Console()
CONFIG_DIR = Path.home() / ".matrix-lite"
CONFIG_FILE = CONFIG_DIR / "config.json"
SESSION_FILE = CONFIG_DIR / "session.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))
    CONFIG_FILE.chmod(0o600)


def _credentials(cfg: dict, password: Optional[str] = None) -> Credentials:
    server = os.environ.get("MATRIX_SERVER") or cfg.get("server")
    user = os.environ.get("MATRIX_USER") or cfg.get("user")
    if not server or not user:
        console.print("[red]Not logged in. Run `matrix-lite auth login` first.[/red]")
        raise SystemExit(1)
    password = password or os.environ.get("MATRIX_PASSWORD") or cfg.get("password", "")
    return Credentials(server=server, user=user, password=password)


def _get_client() -> MatrixClient:
    try:
        return MatrixClient(_credentials(_load_config()), session_storage=FileSessionStorage(SESSION_FILE))
    except MatrixError as e:
        _fail(e)


def _fail(e: MatrixError) -> NoReturn:
    console.print(f"[red]{e.code}:[/red] {e}")
    raise SystemExit(1)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log HTTP and auth activity")
def main(verbose: bool):
    """matrix-lite CLI — send messages and files to Matrix rooms."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


# Register subcommands from separate modules
from matrix_lite.cli.auth import auth
from matrix_lite.cli.messages import send_cmd, send_media_cmd, upload_cmd

main.add_command(auth)
main.add_command(send_cmd)
main.add_command(send_media_cmd)
main.add_command(upload_cmd)


if __name__ == "__main__":
    main()
