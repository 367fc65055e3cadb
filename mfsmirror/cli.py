"""CLI interface for mfsmirror."""

import logging
from pathlib import Path
from typing import Any, Optional

import click

from .api import IpfsClient
from .config import config
from .exceptions import MfsConfigError, MirrorError
from .output import OutputFormatter
from .sync import SyncEngine

logger = logging.getLogger(__name__)


def _validate_destination(ctx: Any, param: Any, value: str) -> str:
    if not value.startswith("/"):
        raise click.BadParameter("destination must begin with a slash.")
    return value


@click.command()
@click.argument(
    "source",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.argument("destination", callback=_validate_destination)
@click.option(
    "--flush-depth",
    type=click.IntRange(min=0),
    default=None,
    help="Flush when finishing directories fewer than this many levels "
    "below the source (default: 4)",
)
@click.option("--api-url", envvar="MFSMIRROR_API_URL", help="IPFS RPC API URL")
@click.option(
    "--workers",
    "-j",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of files of a directory to publish in parallel",
)
@click.option("--timeout", type=float, default=None, help="Request timeout in seconds")
@click.option("--quiet", "-q", is_flag=True, help="Suppress event and summary output")
@click.option("--json", is_flag=True, help="Output events in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="mfsmirror")
@click.pass_context
def main(
    ctx: Any,
    source: Path,
    destination: str,
    flush_depth: Optional[int],
    api_url: Optional[str],
    workers: int,
    timeout: Optional[float],
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """Mirror the local directory SOURCE into the MFS path DESTINATION.

    Files whose content is unchanged since the last run are skipped, and
    remote entries that no longer exist locally are removed.

    Examples:
        mfsmirror ./site /site
        mfsmirror --flush-depth 0 ~/photos /backup/photos
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("mfsmirror").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    out = OutputFormatter(json_output=json, quiet=quiet)

    try:
        if flush_depth is None:
            flush_depth = config.flush_depth
            if flush_depth < 0:
                raise click.UsageError("flush depth cannot be negative.", ctx)
        client = IpfsClient(api_url=api_url, timeout=timeout)
    except MfsConfigError as e:
        out.error(str(e))
        ctx.exit(1)

    try:
        engine = SyncEngine(client, output=out, max_workers=workers)
        engine.sync(source, destination, flush_depth)
    except MirrorError as e:
        logger.debug("Sync failed", exc_info=True)
        out.error(str(e))
        ctx.exit(1)
    except KeyboardInterrupt:
        out.warning("Sync cancelled by user")
        ctx.exit(130)  # Standard exit code for SIGINT
    finally:
        client.close()


if __name__ == "__main__":
    main()
