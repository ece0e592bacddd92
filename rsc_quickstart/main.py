"""
RSC Quickstart: CLI entrypoint.

Usage:
    rsc-quickstart --help
    rsc-quickstart my-rsc-app
    python -m rsc_quickstart.main -v my-rsc-app
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from rsc_quickstart import __version__
from rsc_quickstart.core.errors import QuickstartError
from rsc_quickstart.core.observability.logging_config import setup_from_env


def _non_empty(ctx: click.Context, param: click.Parameter, value: str) -> str:
    if not value.strip():
        raise click.BadParameter("must not be empty")
    return value


def _fail(err: QuickstartError, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(err.to_dict(), indent=2))
    else:
        click.secho(f"❌ {err.message}", fg="red", err=True)
        for hint in err.hints:
            click.echo(f"   {hint}", err=True)
    sys.exit(err.exit_code)


@click.command()
@click.version_option(version=__version__, prog_name="rsc-quickstart")
@click.argument("installation_dir", callback=_non_empty)
@click.option("--verbose", "-v", is_flag=True, help="Show verbose output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a settings YAML (default: $RSCQ_CONFIG, else built-in defaults).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output the result as JSON.")
def cli(
    installation_dir: str,
    verbose: bool,
    debug: bool,
    config_path: str | None,
    as_json: bool,
) -> None:
    """Quick start for RedwoodJS with React Server Components.

    INSTALLATION_DIR is where you want to create the project.
    """
    setup_from_env(verbose=verbose, debug=debug)

    from rsc_quickstart.core.config.loader import load_settings
    from rsc_quickstart.core.use_cases.bootstrap import run_bootstrap

    verbose = verbose or debug
    target = Path(installation_dir)
    progress = None if as_json else click.echo

    try:
        settings = load_settings(Path(config_path) if config_path else None)
        result = run_bootstrap(target, settings, progress=progress, verbose=verbose)
    except QuickstartError as err:
        _fail(err, as_json)
        return

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    for failure in result.rewrite.failures:
        click.secho(f"⚠️  {failure.message}", fg="yellow", err=True)

    click.secho(
        f"Done! You can now run `{settings.package_manager} rw dev` "
        f"in the `{installation_dir}` directory.",
        fg="green",
    )


if __name__ == "__main__":
    cli()
