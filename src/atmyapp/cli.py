"""Command line interface entry point."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from atmyapp.configuration import (
    DEFAULT_ANALYSIS_CONFIG,
    ConfigurationError,
    SessionSettings,
    generate_project_id,
    save_session,
)
from atmyapp.console_logging import configure_console_logging
from atmyapp.migration import MigrationError, MigrationRequest, UploadStatus, execute_migration
from atmyapp.publishing import PublishError


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="atmyapp-core")
def cli() -> None:
    """AtMyApp CLI Tool."""


@cli.command(name="use")
@click.option("-u", "--url", "url", required=False, help="Project base URL")
@click.option("-t", "--token", "token", required=False, help="Authentication token")
def use(url: str | None, token: str | None) -> None:
    """Set authentication token for AMA project."""
    project_url = url or click.prompt("Enter the project URL")
    auth_token = token or click.prompt("Enter the authentication token", hide_input=True)
    try:
        save_session(
            Path.cwd(),
            SessionSettings(url=project_url, token=auth_token, project_id=generate_project_id()),
        )
    except ConfigurationError as exc:
        raise CliError(f"Error: {exc}") from exc
    click.secho("Successfully authenticated and joined project", fg="green")
    click.secho(
        "Warning: Keep your .ama/session.json file private "
        "and do not commit it to version control",
        fg="yellow",
    )
    click.secho("Note: Session file has been automatically added to .gitignore", fg="blue")


@cli.command(name="migrate")
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Generate definitions without uploading to server.",
)
@click.option("--verbose", is_flag=True, default=False, help="Enable verbose logging.")
@click.option(
    "--analysis-config",
    "analysis_config",
    required=False,
    default=DEFAULT_ANALYSIS_CONFIG,
    show_default=True,
    type=click.Path(path_type=str),
    help="TOML file holding the [tool.ama.analysis] table",
)
@click.option(
    "--continue-on-error",
    is_flag=True,
    default=False,
    help="Continue processing even if some definitions fail.",
)
def migrate(dry_run: bool, verbose: bool, analysis_config: str, continue_on_error: bool) -> None:
    """Migrate definitions to AtMyApp platform."""
    configure_console_logging(verbose)
    try:
        outcome = execute_migration(
            MigrationRequest(
                project_root=str(Path.cwd()),
                analysis_config=analysis_config,
                dry_run=dry_run,
                continue_on_error=continue_on_error,
            )
        )
    except (MigrationError, PublishError) as exc:
        raise CliError(f"Fatal error: {exc}") from exc

    if outcome.upload_status is UploadStatus.FAILED:
        raise CliError("Upload failed, but definitions were generated successfully")
    click.secho("Migration completed successfully", fg="green")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), prog_name="ama", standalone_mode=False)
    except CliError as exc:
        click.secho(str(exc), fg="red", err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
