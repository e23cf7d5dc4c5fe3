"""Command-line interface for objstore-tools.

This module exposes the object storage operations for operators and scripts.

Commands:
    - buckets / create-bucket / delete-bucket: Manage buckets
    - list: List objects in a bucket
    - upload / download: Transfer single files (uploads accept http(s) URLs)
    - delete / copy / info: Manage objects
    - presign: Generate presigned URLs
    - stats: Aggregate object counts and sizes across all buckets
    - policy get|set|delete: Manage bucket policies

Connection options are given once, before the command name, or through
OBJSTORE_TOOLS_* environment variables.
"""

from typing import Annotated, Optional

import typer

from . import __version__
from .cli_params import (
    DEFAULT_PORT,
    DEFAULT_REGION,
    DEFAULT_USE_SSL,
    AccessKeyOption,
    BucketArgument,
    EndpointOption,
    ObjectArgument,
    PortOption,
    RegionOption,
    SecretKeyOption,
    SSLOption,
)
from .client import ObjectStorageClient
from .core.exceptions import ObjstoreToolsError
from .schemas import ConnectionConfig, PresignOptions

app = typer.Typer(
    name="objstore-tools",
    help="Object storage tools for S3-compatible services such as MinIO.",
    no_args_is_help=True,
)
policy_app = typer.Typer(help="Manage bucket policies.", no_args_is_help=True)
app.add_typer(policy_app, name="policy")


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"objstore-tools {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    endpoint: EndpointOption = None,
    port: PortOption = DEFAULT_PORT,
    use_ssl: SSLOption = DEFAULT_USE_SSL,
    access_key: AccessKeyOption = None,
    secret_key: SecretKeyOption = None,
    region: RegionOption = DEFAULT_REGION,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    objstore-tools: Buckets, objects, presigned URLs and policies.
    """
    ctx.obj = {
        "endpoint": endpoint,
        "port": port,
        "use_ssl": use_ssl,
        "access_key": access_key,
        "secret_key": secret_key,
        "region": region,
    }


def _get_client(ctx: typer.Context) -> ObjectStorageClient:
    """Build a connected client from the callback's connection options."""
    options = ctx.obj or {}
    missing = [
        flag
        for flag, key in (
            ("--endpoint", "endpoint"),
            ("--access-key", "access_key"),
            ("--secret-key", "secret_key"),
        )
        if not options.get(key)
    ]
    if missing:
        raise ValueError(f"Missing connection options: {', '.join(missing)}")

    config = ConnectionConfig(**options)
    client = ObjectStorageClient()
    client.connect(config)
    return client


def _human_size(size: int) -> str:
    """Format a byte count for display."""
    if size >= 1024**3:
        return f"{size / (1024**3):.2f} GB"
    elif size >= 1024**2:
        return f"{size / (1024**2):.2f} MB"
    elif size >= 1024:
        return f"{size / 1024:.2f} KB"
    return f"{size} bytes"


def _fail(error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


@app.command("buckets")
def buckets_cmd(ctx: typer.Context) -> None:
    """List all buckets."""
    try:
        buckets = _get_client(ctx).list_buckets()
        if buckets:
            typer.echo(f"Found {len(buckets)} buckets:")
            for bucket in buckets:
                created = (
                    bucket.creation_date.isoformat() if bucket.creation_date else "-"
                )
                typer.echo(f"  {bucket.name}  {created}")
        else:
            typer.echo("No buckets found.")
    except (ObjstoreToolsError, ValueError) as e:
        _fail(e)


@app.command("create-bucket")
def create_bucket_cmd(
    ctx: typer.Context,
    bucket: BucketArgument,
    region: Annotated[
        Optional[str], typer.Option("--bucket-region", help="Bucket region")
    ] = None,
) -> None:
    """Create a bucket."""
    try:
        _get_client(ctx).create_bucket(bucket, region=region)
        typer.echo(f"Bucket created: {bucket}")
    except (ObjstoreToolsError, ValueError) as e:
        _fail(e)


@app.command("delete-bucket")
def delete_bucket_cmd(ctx: typer.Context, bucket: BucketArgument) -> None:
    """Delete an empty bucket."""
    try:
        _get_client(ctx).delete_bucket(bucket)
        typer.echo(f"Bucket deleted: {bucket}")
    except (ObjstoreToolsError, ValueError) as e:
        _fail(e)


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    bucket: BucketArgument,
    prefix: Annotated[
        Optional[str], typer.Option("--prefix", help="Only list names with this prefix")
    ] = None,
    recursive: Annotated[
        bool, typer.Option("--recursive", "-r", help="List all levels")
    ] = False,
) -> None:
    """
    List objects in a bucket.

    Examples:
        objstore-tools -e localhost list photos --prefix 2024/
        objstore-tools -e localhost list photos --recursive
    """
    try:
        objects = _get_client(ctx).list_objects(
            bucket, prefix=prefix, recursive=recursive
        )
        if objects:
            typer.echo(f"Found {len(objects)} objects:")
            for obj in objects:
                if obj.is_dir:
                    typer.echo(f"  {obj.name}")
                else:
                    typer.echo(f"  {obj.name}  {_human_size(obj.size)}")
        else:
            typer.echo("No objects found.")
    except (ObjstoreToolsError, ValueError) as e:
        _fail(e)


@app.command("upload")
def upload_cmd(
    ctx: typer.Context,
    bucket: BucketArgument,
    object_name: ObjectArgument,
    source: Annotated[str, typer.Argument(help="Local file path or http(s) URL")],
    metadata: Annotated[
        Optional[list[str]],
        typer.Option("--meta", "-m", help="Metadata entry as KEY=VALUE"),
    ] = None,
) -> None:
    """
    Upload a local file or a remote URL to an object.

    Examples:
        objstore-tools -e localhost upload photos cat.jpg ./cat.jpg
        objstore-tools -e localhost upload photos cat.jpg https://example.com/cat.jpg
    """
    try:
        meta = {}
        for entry in metadata or []:
            key, sep, value = entry.partition("=")
            if not sep:
                raise ValueError(f"Metadata must be KEY=VALUE, got: {entry}")
            meta[key] = value

        _get_client(ctx).upload_file(bucket, object_name, source, metadata=meta)
        typer.echo(f"Uploaded {source} to {bucket}/{object_name}")
    except (ObjstoreToolsError, ValueError) as e:
        _fail(e)


@app.command("download")
def download_cmd(
    ctx: typer.Context,
    bucket: BucketArgument,
    object_name: ObjectArgument,
    destination: Annotated[str, typer.Argument(help="Local destination path")],
) -> None:
    """Download an object to a local file."""
    try:
        _get_client(ctx).download_file(bucket, object_name, destination)
        typer.echo(f"Downloaded {bucket}/{object_name} to {destination}")
    except (ObjstoreToolsError, ValueError) as e:
        _fail(e)


@app.command("delete")
def delete_cmd(
    ctx: typer.Context,
    bucket: BucketArgument,
    object_names: Annotated[list[str], typer.Argument(help="Objects to delete")],
) -> None:
    """Delete one or more objects."""
    try:
        client = _get_client(ctx)
        if len(object_names) == 1:
            client.delete_object(bucket, object_names[0])
            typer.echo(f"Deleted {bucket}/{object_names[0]}")
            return

        result = client.delete_objects(bucket, object_names)
        typer.echo(
            f"Deleted {result.success_count} objects, "
            f"{result.failure_count} failures"
        )
        for error in result.errors:
            typer.echo(f"  {error.item}: {error.error}", err=True)
        if not result.success:
            raise typer.Exit(1)
    except (ObjstoreToolsError, ValueError) as e:
        _fail(e)


@app.command("copy")
def copy_cmd(
    ctx: typer.Context,
    source_bucket: Annotated[str, typer.Argument(help="Source bucket")],
    source_object: Annotated[str, typer.Argument(help="Source object")],
    dest_bucket: Annotated[str, typer.Argument(help="Destination bucket")],
    dest_object: Annotated[str, typer.Argument(help="Destination object")],
) -> None:
    """Copy an object server-side."""
    try:
        _get_client(ctx).copy_object(
            source_bucket, source_object, dest_bucket, dest_object
        )
        typer.echo(
            f"Copied {source_bucket}/{source_object} to {dest_bucket}/{dest_object}"
        )
    except (ObjstoreToolsError, ValueError) as e:
        _fail(e)


@app.command("info")
def info_cmd(
    ctx: typer.Context, bucket: BucketArgument, object_name: ObjectArgument
) -> None:
    """Show an object's metadata."""
    try:
        info = _get_client(ctx).get_object_info(bucket, object_name)
        typer.echo(info.model_dump_json(indent=2))
    except (ObjstoreToolsError, ValueError) as e:
        _fail(e)


@app.command("presign")
def presign_cmd(
    ctx: typer.Context,
    bucket: BucketArgument,
    object_name: ObjectArgument,
    method: Annotated[
        str, typer.Option("--method", help="HTTP method: GET, PUT or DELETE")
    ] = "GET",
    expires: Annotated[
        int, typer.Option("--expires", help="Expiry in seconds")
    ] = 3600,
) -> None:
    """Generate a presigned URL for an object."""
    try:
        url = _get_client(ctx).generate_presigned_url(
            bucket, object_name, method=method, options=PresignOptions(expires=expires)
        )
        typer.echo(url)
    except (ObjstoreToolsError, ValueError) as e:
        _fail(e)


@app.command("stats")
def stats_cmd(ctx: typer.Context) -> None:
    """
    Aggregate object counts and sizes across all buckets.

    Every object of every bucket is listed, so this can be slow on large
    deployments.
    """
    try:
        stats = _get_client(ctx).get_storage_stats()
        typer.echo(f"Buckets: {stats.total_buckets:,}")
        typer.echo(f"Objects: {stats.total_objects:,}")
        typer.echo(f"Total size: {stats.total_size:,} bytes")
        typer.echo(f"Human readable: {_human_size(stats.total_size)}")
        for bucket in stats.bucket_stats:
            typer.echo(
                f"  {bucket.bucket_name}: {bucket.object_count:,} objects, "
                f"{_human_size(bucket.total_size)}"
            )
    except (ObjstoreToolsError, ValueError) as e:
        _fail(e)


@policy_app.command("get")
def policy_get_cmd(ctx: typer.Context, bucket: BucketArgument) -> None:
    """Print a bucket's policy document."""
    try:
        typer.echo(_get_client(ctx).get_bucket_policy(bucket))
    except (ObjstoreToolsError, ValueError) as e:
        _fail(e)


@policy_app.command("set")
def policy_set_cmd(
    ctx: typer.Context,
    bucket: BucketArgument,
    policy_file: Annotated[
        typer.FileText, typer.Argument(help="JSON policy file, '-' for stdin")
    ],
) -> None:
    """Attach a policy document to a bucket."""
    try:
        _get_client(ctx).set_bucket_policy(bucket, policy_file.read())
        typer.echo(f"Policy set on bucket: {bucket}")
    except (ObjstoreToolsError, ValueError) as e:
        _fail(e)


@policy_app.command("delete")
def policy_delete_cmd(ctx: typer.Context, bucket: BucketArgument) -> None:
    """Remove a bucket's policy."""
    try:
        _get_client(ctx).delete_bucket_policy(bucket)
        typer.echo(f"Policy deleted from bucket: {bucket}")
    except (ObjstoreToolsError, ValueError) as e:
        _fail(e)


if __name__ == "__main__":
    app()
