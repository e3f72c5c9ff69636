# cli.py
import logging
from datetime import timedelta

import click

from uploader.logging_config import configure_logging
from uploader.manager import UploadManager
from uploader.schemas import STRATEGY_CHOICES
from uploader.settings import get_settings

logger = logging.getLogger(__name__)


@click.group()
@click.option("--log-level", default=None, help="Override the configured log level")
@click.pass_context
def cli(ctx, log_level):
    """CLI commands for storing files on configured disks"""
    configure_logging(log_level)
    ctx.ensure_object(dict)
    if "manager" not in ctx.obj:
        ctx.obj["manager"] = UploadManager(get_settings())


@cli.command()
@click.pass_context
def show_config(ctx):
    """Show current configuration"""
    settings = ctx.obj["manager"].settings

    click.echo("Current Configuration:")
    click.echo(f"  App Name: {settings.app_name}")
    click.echo(f"  Default Disk: {settings.default_disk}")
    click.echo(f"  AWS Region: {settings.aws_region}")
    click.echo(f"  AWS Endpoint: {settings.aws_endpoint_url}")
    click.echo(f"  Temporary URL TTL: {settings.temporary_url_ttl_seconds}s")
    click.echo("  Disks:")
    for name in settings.disk_names:
        disk = settings.disks[name]
        location = disk.bucket if disk.driver == "s3" else disk.root
        click.echo(f"    {name}: driver={disk.driver} location={location}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--disk", default=None, help="Disk name (default disk when omitted)")
@click.option("--dir", "directory", default=None, help="Target directory")
@click.option("--name", default=None, help="Literal file name")
@click.option("--strategy", type=click.Choice(STRATEGY_CHOICES), default=None, help="Generated naming strategy")
@click.option("--visibility", type=click.Choice(["public", "private"]), default=None)
@click.pass_context
def store(ctx, path, disk, directory, name, strategy, visibility):
    """Store a local file on a disk"""
    adapter = ctx.obj["manager"].disk(disk).dir(directory).name(name)
    if strategy:
        adapter.use_strategy(strategy)
    if visibility:
        adapter.visibility(visibility)

    stored_path = adapter.store(path)
    if stored_path is False:
        raise click.ClickException(f"Failed to store {path}")

    click.echo(stored_path)


@cli.command()
@click.argument("path")
@click.option("--disk", default=None, help="Disk name (default disk when omitted)")
@click.option("--temporary", is_flag=True, help="Request a time-limited URL")
@click.option("--expires-in", type=int, default=None, help="Temporary URL lifetime in seconds")
@click.pass_context
def url(ctx, path, disk, temporary, expires_in):
    """Print the URL of a stored file"""
    manager = ctx.obj["manager"]
    adapter = manager.disk(disk)
    if temporary or expires_in:
        ttl = expires_in or manager.settings.temporary_url_ttl_seconds
        click.echo(adapter.temporary_url(path, timedelta(seconds=ttl)))
    else:
        click.echo(adapter.url(path))


@cli.command()
@click.argument("path")
@click.option("--disk", default=None, help="Disk name (default disk when omitted)")
@click.pass_context
def destroy(ctx, path, disk):
    """Delete a stored file (succeeds if it does not exist)"""
    if not ctx.obj["manager"].disk(disk).destroy(path):
        raise click.ClickException(f"Failed to delete {path}")
    click.echo(f"Deleted {path}")


@cli.command()
@click.option("--host", default="0.0.0.0")
@click.option("--port", default=8000, type=int)
@click.pass_context
def serve(ctx, host, port):
    """Run the upload API"""
    import uvicorn

    from uploader.main import create_app

    manager = ctx.obj["manager"]
    uvicorn.run(create_app(manager.settings, manager), host=host, port=port)


if __name__ == "__main__":
    cli()
