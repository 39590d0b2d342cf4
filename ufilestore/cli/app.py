"""Typer CLI for uploading files to UFile."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from tqdm import tqdm

from ufilestore import __version__
from ufilestore.config.config_manager import ConfigManager
from ufilestore.config.ufile_config import UfileConfig
from ufilestore.core.const import DEFAULT_CONFIG_SECTION, OCTET_STREAM
from ufilestore.core.exceptions import ConfigError, UfileError
from ufilestore.core.signer import authorization_header
from ufilestore.storage.storage_factory import create_storage

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="UCloud UFile command line interface.")

_CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    exists=True,
    readable=True,
    dir_okay=False,
    help="Path to a configuration file (YAML or JSON).",
)
_SECTION_OPTION = typer.Option(
    DEFAULT_CONFIG_SECTION,
    "--section",
    help="Dotted key of the client settings inside the configuration file.",
)
_BUCKET_OPTION = typer.Option(
    None, "--bucket", "-b", help="Override the configured bucket."
)
_VERBOSE_OPTION = typer.Option(False, "--verbose", help="Enable debug logging.")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _resolve_config(
    config_path: Path | None, section: str, **overrides: object
) -> UfileConfig:
    manager = ConfigManager(config_path=config_path, section=section or None)
    try:
        return manager.resolve_effective_config(overrides)
    except ConfigError as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=1) from exc


def _version_callback(value: bool) -> bool:
    if value:
        typer.echo(__version__)
        raise typer.Exit()
    return value


@app.callback()
def callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show the ufilestore version and exit.",
        callback=_version_callback,
        is_eager=True,
        is_flag=True,
    ),
) -> None:
    """Handle global CLI option for --version."""
    return None


@app.command("upload")
def upload(
    path: Path = typer.Argument(
        ...,
        exists=True,
        readable=True,
        dir_okay=False,
        help="File to upload.",
    ),
    key: str | None = typer.Option(
        None, "--key", "-k", help="Object key. Defaults to the file name."
    ),
    config_path: Path | None = _CONFIG_OPTION,
    section: str = _SECTION_OPTION,
    bucket: str | None = _BUCKET_OPTION,
    max_workers: int | None = typer.Option(
        None, "--max-workers", min=1, help="Number of parts uploaded concurrently."
    ),
    no_progress: bool = typer.Option(
        False, "--no-progress", help="Do not show a progress bar."
    ),
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Upload a file, using multipart upload for large files."""
    _configure_logging(verbose)
    config = _resolve_config(
        config_path, section, bucket_name=bucket, max_workers=max_workers
    )
    object_key = key or path.name

    try:
        content = path.read_bytes()
    except OSError as exc:
        logger.error("Cannot read %s: %s", path, exc)
        raise typer.Exit(code=1) from exc

    with create_storage(config) as storage, tqdm(
        total=len(content),
        unit="B",
        unit_scale=True,
        desc=object_key,
        disable=no_progress,
    ) as progress:
        try:
            outcome = storage.save(
                content,
                object_key,
                progress_callback=lambda _part, nbytes: progress.update(nbytes),
            )
        except UfileError as exc:
            logger.error("%s", exc)
            raise typer.Exit(code=1) from exc

    typer.echo(f"Uploaded {outcome.bucket}/{outcome.key} ({outcome.file_size} bytes)")


@app.command("sign")
def sign_request(
    method: str = typer.Argument(..., help="HTTP method, e.g. PUT."),
    key: str = typer.Argument(..., help="Object key the request targets."),
    content_type: str = typer.Option(
        OCTET_STREAM, "--content-type", "-t", help="Content-Type of the request."
    ),
    config_path: Path | None = _CONFIG_OPTION,
    section: str = _SECTION_OPTION,
    bucket: str | None = _BUCKET_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Print the Authorization header value for a request."""
    _configure_logging(verbose)
    config = _resolve_config(config_path, section, bucket_name=bucket)
    typer.echo(
        authorization_header(
            config.credential, method.upper(), content_type, config.bucket_name, key
        )
    )


def main() -> None:
    """CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
