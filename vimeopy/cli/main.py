"""Vimeo CLI - Main commands."""
import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    DownloadColumn,
    TransferSpeedColumn,
    TimeRemainingColumn
)
from rich.table import Table

from vimeopy.core.exceptions import VimeoException

app = typer.Typer(
    name="vimeo",
    help="Vimeo upload CLI",
    add_completion=False
)
console = Console()

state = {"token": None}


# Token store: ~/.config/vimeo/token.session
def get_token_path() -> Path:
    config_dir = Path.home() / ".config" / "vimeo"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir / "token"


def load_saved_token() -> Optional[str]:
    from vimeopy.core.credentials import SQLiteTokenStore

    token_path = get_token_path()
    if not token_path.with_suffix(".session").exists():
        return None
    with SQLiteTokenStore(str(token_path)) as store:
        return store.get_token()


def resolve_token() -> str:
    """Token from --token / VIMEO_TOKEN, else the saved one."""
    token = state["token"] or load_saved_token()
    if not token:
        console.print("[red]No access token. Run 'vimeo save-token' or set VIMEO_TOKEN.[/red]")
        raise typer.Exit(1)
    return token


def create_client(token: str):
    from vimeopy import VimeoClient
    return VimeoClient(token)


def run_async(coro):
    """Run async function, reporting Vimeo errors."""
    try:
        return asyncio.run(coro)
    except (VimeoException, FileNotFoundError, NotADirectoryError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def format_mb(size: int) -> str:
    return f"{size / (1024 * 1024):,.1f} MB"


class UploadProgressBar:
    """Feeds upload progress into a rich task, counting from the resume offset."""

    def __init__(self, progress: Progress, task):
        self._progress = progress
        self._task = task
        self.offset = 0

    def on_resume(self, offset: int, total: int) -> None:
        self.offset = offset
        self._progress.update(self._task, completed=offset, total=total)

    def on_progress(self, sent: int, total: int) -> None:
        self._progress.update(self._task, completed=self.offset + sent, total=total)


@app.callback()
def main_options(
    token: Optional[str] = typer.Option(
        None, "--token", "-t", envvar="VIMEO_TOKEN", help="Vimeo access token"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress logs"),
):
    """Upload videos to Vimeo and manage them."""
    state["token"] = token
    if verbose:
        from vimeopy import setup_logging
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)]
        )
        setup_logging(logging.INFO)


@app.command("save-token")
def save_token(
    token: str = typer.Argument(None, help="Access token to store"),
):
    """Save an access token for later commands."""
    from vimeopy.core.credentials import SQLiteTokenStore, TokenData

    if not token:
        token = typer.prompt("Access token", hide_input=True)

    data = TokenData(token=token)
    if not data.is_valid():
        console.print("[red]Empty token, nothing saved[/red]")
        raise typer.Exit(1)

    token_path = get_token_path()
    with SQLiteTokenStore(str(token_path)) as store:
        store.save(data)
    console.print(f"[green]Token saved to: {token_path}.session[/green]")


@app.command()
def whoami():
    """Show the account of the current token."""
    token = resolve_token()

    async def show_user():
        async with create_client(token) as vimeo:
            user = await vimeo.get_user_info()

        console.print(f"[bold]Name:[/bold] {user.name}")
        console.print(f"[bold]Link:[/bold] {user.link}")
        console.print(f"[bold]Account:[/bold] {user.account}")
        if user.connections:
            table = Table()
            table.add_column("Connection", style="cyan")
            table.add_column("Total", justify="right")
            table.add_column("URI", style="dim")
            for name, item in sorted(user.connections.items()):
                table.add_row(name, str(item.total), item.uri)
            console.print(table)

    run_async(show_user())


@app.command()
def quota():
    """Show the upload quota."""
    token = resolve_token()

    async def show_quota():
        async with create_client(token) as vimeo:
            user = await vimeo.get_quota()

        space = user.upload_quota.space
        console.print(f"[bold]User:[/bold] {user.name}")
        console.print(f"[bold]Free:[/bold] {format_mb(space.free)}")
        console.print(f"[bold]Used:[/bold] {format_mb(space.used)}")
        console.print(f"[bold]Max:[/bold] {format_mb(space.max)}")
        console.print(f"[bold]HD:[/bold] {user.upload_quota.hd}  [bold]SD:[/bold] {user.upload_quota.sd}")

    run_async(show_quota())


@app.command()
def videos():
    """List your videos."""
    token = resolve_token()

    async def list_videos():
        async with create_client(token) as vimeo:
            page = await vimeo.get_videos()

        table = Table()
        table.add_column("ID", style="cyan")
        table.add_column("Name")
        table.add_column("Status")
        table.add_column("Created", style="dim")
        table.add_column("Modified", style="dim")
        for video in page:
            table.add_row(
                video.video_id, video.name, video.status,
                video.created_time, video.modified_time
            )
        console.print(table)
        console.print(f"{len(page)} of {page.total} videos")

    run_async(list_videos())


@app.command()
def info(
    video_id: str = typer.Argument(..., help="Video ID"),
):
    """Show video information."""
    token = resolve_token()

    async def show_info():
        async with create_client(token) as vimeo:
            video = await vimeo.get_video(video_id)

        console.print(f"[bold]Name:[/bold] {video.name}")
        console.print(f"[bold]URI:[/bold] {video.uri}")
        console.print(f"[bold]Link:[/bold] {video.link}")
        console.print(f"[bold]Status:[/bold] {video.status}")
        console.print(f"[bold]Duration:[/bold] {video.duration}s")
        console.print(f"[bold]Size:[/bold] {video.width}x{video.height}")
        console.print(f"[bold]Plays:[/bold] {video.plays}")
        console.print(f"[bold]Privacy:[/bold] {video.privacy.view}")
        if video.description:
            console.print(f"[bold]Description:[/bold] {video.description}")

    run_async(show_info())


@app.command()
def status(
    video_id: str = typer.Argument(..., help="Video ID"),
):
    """Show the transcoding status of a video."""
    token = resolve_token()

    async def show_status():
        async with create_client(token) as vimeo:
            video_status = await vimeo.get_video_status(video_id)
        console.print(f"{video_id}: {video_status}")

    run_async(show_status())


@app.command()
def upload(
    file_path: Path = typer.Argument(..., help="Video file to upload", exists=True, dir_okay=False),
    name: str = typer.Option("", "--name", "-n", help="Video title"),
    description: str = typer.Option("", "--description", "-d", help="Video description"),
    picture: Path = typer.Option(None, "--picture", "-p", help="Thumbnail image", exists=True, dir_okay=False),
):
    """Upload a video to Vimeo."""
    token = resolve_token()

    async def do_upload():
        async with create_client(token) as vimeo:
            user = await vimeo.get_quota()
            size = file_path.stat().st_size
            if not user.upload_quota.has_space_for(size):
                console.print(
                    f"[red]Not enough upload quota: {format_mb(size)} needed, "
                    f"{format_mb(user.upload_quota.space.free)} free[/red]"
                )
                raise typer.Exit(1)

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                DownloadColumn(),
                TransferSpeedColumn(),
                TimeRemainingColumn(),
                console=console
            ) as progress:
                task = progress.add_task(f"Uploading {file_path.name}", total=None)

                result = await vimeo.upload_video(
                    file_path,
                    name=name,
                    description=description,
                    progress_callback=UploadProgressBar(progress, task)
                )

            if picture:
                console.print(f"Setting picture {picture.name}")
                await vimeo.set_picture(result.video_id, picture)

        console.print(f"[green]Uploaded:[/green] {file_path.name}")
        console.print(f"Video ID: {result.video_id}")
        console.print(f"Link: {result.link}")
        console.print(
            f"Completed in {result.elapsed:.1f}s "
            f"({result.attempts} attempts, {result.verifications} verifications)"
        )

    run_async(do_upload())


@app.command()
def delete(
    video_id: str = typer.Argument(..., help="Video ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete a video."""
    token = resolve_token()

    if not force:
        confirm = typer.confirm(f"Delete video {video_id}?")
        if not confirm:
            raise typer.Abort()

    async def do_delete():
        async with create_client(token) as vimeo:
            await vimeo.delete_video(video_id)
        console.print(f"[green]Deleted:[/green] {video_id}")

    run_async(do_delete())


@app.command()
def edit(
    video_id: str = typer.Argument(..., help="Video ID"),
    name: str = typer.Option("", "--name", "-n", help="New title"),
    description: str = typer.Option("", "--description", "-d", help="New description"),
):
    """Set the title and/or description of a video."""
    if not name and not description:
        console.print("[red]Nothing to change: pass --name and/or --description[/red]")
        raise typer.Exit(1)

    token = resolve_token()

    async def do_edit():
        async with create_client(token) as vimeo:
            await vimeo.edit_video(video_id, name, description)
        console.print(f"[green]Updated:[/green] {video_id}")

    run_async(do_edit())


@app.command("set-picture")
def set_picture(
    video_id: str = typer.Argument(..., help="Video ID"),
    file: Path = typer.Option(None, "--file", "-f", help="Image to upload", exists=True, dir_okay=False),
    time: float = typer.Option(None, "--time", help="Use the frame at this many seconds"),
):
    """Set the thumbnail of a video from an image or a frame."""
    if (file is None) == (time is None):
        console.print("[red]Pass exactly one of --file or --time[/red]")
        raise typer.Exit(1)

    token = resolve_token()

    async def do_set_picture():
        async with create_client(token) as vimeo:
            if file is not None:
                await vimeo.set_picture(video_id, file)
            else:
                await vimeo.set_picture_time(video_id, time)
        console.print(f"[green]Picture set for:[/green] {video_id}")

    run_async(do_set_picture())


@app.command()
def scan(
    check_folder: Path = typer.Argument(..., help="Folder with new videos", file_okay=False),
    dest_folder: Path = typer.Argument(..., help="Folder receiving uploaded files", file_okay=False),
):
    """Upload every video in a folder once, then move it away."""
    from vimeopy.core.watch import FolderWatcher

    token = resolve_token()

    async def do_scan():
        async with create_client(token) as vimeo:
            watcher = FolderWatcher(vimeo, check_folder, dest_folder)
            console.print(f"Monitor folder: {check_folder} - Destination folder: {dest_folder}")
            results = await watcher.scan_once()

        if not results:
            console.print("[yellow]No new videos[/yellow]")
        for result in results:
            picture = f" (picture {result.picture_path.name})" if result.picture_path else ""
            console.print(f"[green]Uploaded:[/green] {result.video_path.name} -> {result.video_id}{picture}")

    run_async(do_scan())


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
