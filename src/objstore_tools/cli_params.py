"""Shared CLI parameter definitions for connection options.

Every command talks to the same endpoint, so connection options are declared
once here and consumed by the application callback. Each option can also be
supplied through an ``OBJSTORE_TOOLS_*`` environment variable, which keeps
secrets off the command line.
"""

from typing import Annotated, Optional

import typer

from .core import settings

EndpointOption = Annotated[
    Optional[str],
    typer.Option(
        "--endpoint",
        "-e",
        envvar="OBJSTORE_TOOLS_ENDPOINT",
        help="Storage endpoint host name, without scheme",
    ),
]

PortOption = Annotated[
    int,
    typer.Option("--port", "-p", envvar="OBJSTORE_TOOLS_PORT", help="Endpoint port"),
]

SSLOption = Annotated[
    bool,
    typer.Option(
        "--ssl/--no-ssl", envvar="OBJSTORE_TOOLS_USE_SSL", help="Connect over HTTPS"
    ),
]

AccessKeyOption = Annotated[
    Optional[str],
    typer.Option("--access-key", envvar="OBJSTORE_TOOLS_ACCESS_KEY", help="Access key"),
]

SecretKeyOption = Annotated[
    Optional[str],
    typer.Option("--secret-key", envvar="OBJSTORE_TOOLS_SECRET_KEY", help="Secret key"),
]

RegionOption = Annotated[
    str,
    typer.Option("--region", envvar="OBJSTORE_TOOLS_REGION", help="Region name"),
]

BucketArgument = Annotated[str, typer.Argument(help="Bucket name")]

ObjectArgument = Annotated[str, typer.Argument(help="Object name")]

DEFAULT_PORT = settings.port
DEFAULT_USE_SSL = settings.use_ssl
DEFAULT_REGION = settings.region
