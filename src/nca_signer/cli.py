"""nca-signer command line.

Usage:
    nca-signer tokens                          # List active key storages
    nca-signer sign document.pdf               # Sign a file, save signed_file.cms
    nca-signer sign inbox/ -o out/doc.cms      # Sign the first file of a directory
    nca-signer call MODULE METHOD '[...]'      # Send a raw command
    nca-signer version

Connection options come before the subcommand:
    nca-signer --url wss://127.0.0.1:13579/ --insecure tokens
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from . import __version__
from .config import DEFAULT_CMS_FILENAME, SignerConfig
from .errors import NCASignerError
from .protocol import Command
from .sdk import DirectorySaver, LocalFileHost, SignerClient, SigningPipeline

# Output format options
FORMAT_TABLE = "table"
FORMAT_TEXT = "text"
FORMAT_JSON = "json"

_LOG_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)

T = TypeVar("T")


def _configure_logging(verbosity: int) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS[min(verbosity, len(_LOG_LEVELS) - 1)],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _run(ctx: click.Context, operation: Callable[[SignerClient], Awaitable[T]]) -> T:
    """Connect, run one operation, close. Exit 1 on signer errors."""
    config: SignerConfig = ctx.obj["config"]

    async def runner() -> T:
        async with SignerClient(config, channel_factory=ctx.obj.get("channel_factory")) as client:
            await client.connect()
            return await operation(client)

    try:
        return asyncio.run(runner())
    except NCASignerError as e:
        code = f" [{e.code}]" if e.code else ""
        click.echo(f"Error{code}: {e.message}", err=True)
        sys.exit(1)


@click.group()
@click.option("--url", default=None, help="Signing service WebSocket URL")
@click.option(
    "--insecure/--verify-tls",
    "insecure",
    default=None,
    help="Skip TLS certificate verification (NCALayer uses a self-signed certificate)",
)
@click.option("--timeout", type=float, default=None, help="Seconds to wait for each reply")
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v, -vv)")
@click.pass_context
def main(
    ctx: click.Context,
    url: str | None,
    insecure: bool | None,
    timeout: float | None,
    verbose: int,
) -> None:
    """Sign files with the NCALayer local signing service.

    Settings default to the NCA_SIGNER_* environment variables.
    """
    _configure_logging(verbose)

    try:
        config = SignerConfig.from_env()
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    if url:
        config.url = url
    if insecure is not None:
        config.verify_tls = not insecure
    if timeout is not None:
        config.call_timeout = timeout

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@main.command()
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice([FORMAT_TABLE, FORMAT_JSON]),
    default=FORMAT_TABLE,
    help="Output format",
)
@click.pass_context
def tokens(ctx: click.Context, output_format: str) -> None:
    """List the key storages currently available."""
    result = _run(ctx, lambda client: client.get_active_tokens())

    if output_format == FORMAT_JSON:
        click.echo(json.dumps(result, indent=2, ensure_ascii=False))
        return

    items = result if isinstance(result, list) else [result]
    if not items:
        click.echo("No active tokens.")
        return
    for item in items:
        click.echo(str(item))


@main.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Where to save the signature (default: <output dir>/{DEFAULT_CMS_FILENAME})",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice([FORMAT_TEXT, FORMAT_JSON]),
    default=FORMAT_TEXT,
    help="Output format",
)
@click.pass_context
def sign(ctx: click.Context, path: Path, output: Path | None, output_format: str) -> None:
    """Sign a file (or the first file in a directory) and save the CMS.

    Examples:

        # Sign a document
        nca-signer --insecure sign contract.pdf

        # Choose where the signature goes
        nca-signer sign contract.pdf -o contract.pdf.cms
    """
    config: SignerConfig = ctx.obj["config"]
    target = output or config.output_dir / DEFAULT_CMS_FILENAME
    saver = DirectorySaver(target.parent)

    async def operation(client: SignerClient) -> int:
        pipeline = SigningPipeline(client, host=LocalFileHost(), saver=saver)
        pipeline.link_file_input(str(path))
        artifact = await pipeline.sign_selected_file()
        pipeline.download_cms_file(artifact, target.name)
        return len(artifact)

    length = _run(ctx, operation)
    saved = saver.path_for(target.name)

    if output_format == FORMAT_JSON:
        click.echo(json.dumps({"input": str(path), "output": str(saved), "base64_length": length}))
        return
    click.echo(f"Signed {path} -> {saved}")


@main.command("call")
@click.argument("module")
@click.argument("method")
@click.argument("args_json", required=False)
@click.pass_context
def call_command(ctx: click.Context, module: str, method: str, args_json: str | None) -> None:
    """Send a raw command and print its responseObject as JSON.

    ARGS_JSON, when given, must be a JSON array.

    Example:

        nca-signer call kz.gov.pki.knca.commonUtils getActiveTokens
    """
    args: list[Any] | None = None
    if args_json is not None:
        try:
            args = json.loads(args_json)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"not valid JSON: {e}", param_hint="ARGS_JSON") from e
        if not isinstance(args, list):
            raise click.BadParameter("must be a JSON array", param_hint="ARGS_JSON")

    command = Command.create(module, method, args)
    result = _run(ctx, lambda client: client.call(command))
    click.echo(json.dumps(result, indent=2, ensure_ascii=False))


@main.command()
def version() -> None:
    """Show the installed version."""
    click.echo(f"nca-signer {__version__}")


if __name__ == "__main__":
    main()
