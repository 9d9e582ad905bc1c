"""CLI: matrix-lite send, send-media, upload"""

import mimetypes
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from matrix_lite.errors import MatrixError
from matrix_lite.models.message import Media, MediaType

console = Console()

MEDIA_TYPES = {t.name.lower(): t for t in MediaType}


def _get_client():
    from matrix_lite.cli.main import _get_client
    return _get_client()


def _fail(e: MatrixError):
    from matrix_lite.cli.main import _fail
    _fail(e)


def _media_type_for(content_type: str) -> MediaType:
    major = content_type.split("/", 1)[0]
    return MEDIA_TYPES.get(major, MediaType.FILE)


def _report(event_id: Optional[str]) -> None:
    if event_id:
        console.print(f"[green]Sent[/green] [dim]{event_id}[/dim]")
    else:
        console.print("[green]Sent[/green]")


@click.command("send")
@click.argument("room_id")
@click.argument("text")
@click.option("--html", default=None, help="HTML rendering of the message; TEXT is the plain fallback")
@click.option("--notice", is_flag=True, help="Send as m.notice")
def send_cmd(room_id: str, text: str, html: Optional[str], notice: bool):
    """Send a text message to ROOM_ID."""
    with _get_client() as client:
        try:
            if html:
                event_id = client.send_html(room_id, text, html)
            elif notice:
                event_id = client.send_notice(room_id, text)
            else:
                event_id = client.send_text(room_id, text)
        except MatrixError as e:
            _fail(e)
    _report(event_id)


@click.command("send-media")
@click.argument("room_id")
@click.option("--uri", required=True, help="mxc:// content URI from `matrix-lite upload`")
@click.option("--type", "media_type", type=click.Choice(sorted(MEDIA_TYPES)), default="file")
@click.option("--caption", default="")
@click.option("--filename", default="")
def send_media_cmd(room_id: str, uri: str, media_type: str, caption: str, filename: str):
    """Send an uploaded file to ROOM_ID."""
    media = Media(type=MEDIA_TYPES[media_type], caption=caption, filename=filename, uri=uri)
    with _get_client() as client:
        try:
            event_id = client.send_media(room_id, media)
        except MatrixError as e:
            _fail(e)
    _report(event_id)


@click.command("upload")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--content-type", default=None, help="Defaults to a guess from the file name")
@click.option("--send-to", "room_id", default=None, help="Also post the file to this room")
@click.option("--caption", default=None, help="Message body when posting; defaults to the file name")
def upload_cmd(path: Path, content_type: Optional[str], room_id: Optional[str], caption: Optional[str]):
    """Upload PATH to the media repository and print its content URI."""
    content_type = content_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    data = path.read_bytes()
    with _get_client() as client:
        try:
            with console.status(f"Uploading {path.name} ({len(data)} bytes)..."):
                uri = client.upload_file(content_type, data, filename=path.name)
            click.echo(uri)
            if room_id:
                event_id = client.send_media(room_id, Media(
                    type=_media_type_for(content_type),
                    caption=caption if caption is not None else path.name,
                    filename=path.name,
                    uri=uri,
                ))
                _report(event_id)
        except MatrixError as e:
            _fail(e)
