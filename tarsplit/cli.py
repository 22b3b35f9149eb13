"""Command line entrypoint for splitting archives."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click

from tarsplit import __version__
from tarsplit.config import (
    AppConfig,
    configure_logging,
    get_config,
    get_settings,
    load_config,
)
from tarsplit.libs.tar_archive import TarSplitError
from tarsplit.services import SplitPipeline, SplitRequest

logger = logging.getLogger(__name__)


def _resolve_config(environment: Optional[str]) -> AppConfig:
    settings = get_settings()
    config_path = Path(settings.config_dir) / f"{environment or settings.environment}.yaml"
    if environment is None and not config_path.exists():
        return get_config()
    return load_config(environment)


@click.command(help="Split a tar archive into chunks along file boundaries.")
@click.version_option(__version__, prog_name="tarsplit")
@click.option(
    "-c",
    "--chunk-size",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum size of output chunks in bytes (incompatible with --num-chunks)",
)
@click.option(
    "-n",
    "--num-chunks",
    type=click.IntRange(min=1),
    default=None,
    help="Number of output chunks (incompatible with --chunk-size)",
)
@click.option(
    "-p",
    "--prefix",
    default=None,
    help="Prefix to apply to the filename of each output chunk [default: split]",
)
@click.option("--env", "environment", default=None, help="Configuration environment to load")
@click.argument("source", type=click.Path(path_type=Path))
@click.argument("target", type=click.Path(path_type=Path))
def cli(chunk_size, num_chunks, prefix, environment, source, target):
    if chunk_size is None and num_chunks is None:
        raise click.UsageError("Must provide either --chunk-size or --num-chunks")
    if chunk_size is not None and num_chunks is not None:
        raise click.UsageError("--chunk-size and --num-chunks are mutually exclusive")

    try:
        config = _resolve_config(environment)
        configure_logging(config.logging)
        request = SplitRequest(
            source=source,
            target=target,
            chunk_size=chunk_size,
            num_chunks=num_chunks,
            prefix=prefix or config.archive.default_prefix,
        )
        state = SplitPipeline(config=config).run(request)
    except (TarSplitError, OSError) as exc:
        click.echo(f"ERROR: {exc}", err=True)
        raise SystemExit(1)

    for chunk in state.files_created:
        click.echo(chunk)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
