"""
depend — CLI entrypoint.

Usage:
    depend --help
    depend install doxygen --prefix ~/.local/deps
    depend install nasm --prefix /opt/deps --dry-run
    depend versions nasm
    depend packages
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from depend import __version__
from depend.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="depend")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--catalog",
    "-c",
    "catalog_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="DEPEND_CATALOG",
    default=None,
    help="Extra package catalog (YAML) layered over the built-in one.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    catalog_path: Path | None,
) -> None:
    """depend — install tools from their latest upstream release tag."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["catalog_path"] = catalog_path

    setup_logging(debug=debug, verbose=verbose, quiet=quiet)


def _load_catalog(ctx: click.Context, as_json: bool):
    """Catalog from ctx.obj (tests) or disk; exits 1 on config errors."""
    from depend.core.config.catalog import load_catalog
    from depend.core.errors import ConfigError

    # ctx.obj "catalog", "vcs" and "executor" are only set by tests
    # (CliRunner.invoke(obj=...)); real runs build the defaults.
    if ctx.obj.get("catalog") is not None:
        return ctx.obj["catalog"]
    try:
        return load_catalog(ctx.obj.get("catalog_path"))
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"error": e.to_dict()}, indent=2))
        else:
            click.secho(f"❌ {e.message}", fg="red", err=True)
        sys.exit(1)


def _render_failure(result, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        click.secho(f"❌ {result.error}", fg="red", err=True)
    sys.exit(1)


@cli.command()
@click.argument("package")
@click.option(
    "--prefix",
    "-p",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Installation prefix (sources go to PREFIX/src, binaries to PREFIX/bin).",
)
@click.option("--dry-run", is_flag=True, help="Only resolve and print the version.")
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    envvar="DEPEND_JOBS",
    default=None,
    help="Parallel compile jobs (default: CPU count).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    package: str,
    prefix: Path | None,
    dry_run: bool,
    jobs: int | None,
    as_json: bool,
) -> None:
    """Install PACKAGE from its newest release tag.

    Examples:

        depend install doxygen --prefix ~/.local/deps

        depend install nasm --prefix /opt/deps --jobs 4

        depend install nasm --dry-run
    """
    from depend.core.models.request import InstallRequest
    from depend.core.use_cases.install import install_package

    if prefix is None and not dry_run:
        raise click.UsageError("--prefix is required unless --dry-run is given.")

    request = InstallRequest(
        package_name=package,
        prefix=Path(os.path.abspath(prefix.expanduser())) if prefix else None,
        dry_run=dry_run,
        jobs=jobs,
    )
    # vcs / executor are None outside tests: install_package uses git + subprocess.
    result = install_package(
        request,
        catalog=_load_catalog(ctx, as_json),
        vcs=ctx.obj.get("vcs"),
        executor=ctx.obj.get("executor"),
    )

    if not result.ok:
        _render_failure(result, as_json)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if dry_run:
        click.echo(result.version)
        return

    quiet = ctx.obj.get("quiet", False)
    if ctx.obj.get("verbose") and result.report:
        for receipt in result.report.receipts:
            click.echo(f"   ✓ {' '.join(receipt.argv)} ({receipt.duration_ms}ms)")
    if not quiet:
        click.secho(
            f"✅ Installed {result.package} {result.version} into {result.prefix}",
            fg="green",
            bold=True,
        )
        for path in result.report.installed if result.report else []:
            click.echo(f"   • {path}")


@cli.command()
@click.argument("package")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def resolve(ctx: click.Context, package: str, as_json: bool) -> None:
    """Print the version PACKAGE would install (same as install --dry-run)."""
    from depend.core.models.request import InstallRequest
    from depend.core.use_cases.install import install_package

    result = install_package(
        InstallRequest(package_name=package, dry_run=True),
        catalog=_load_catalog(ctx, as_json),
        vcs=ctx.obj.get("vcs"),
    )

    if not result.ok:
        _render_failure(result, as_json)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    click.echo(result.version)


@cli.command()
@click.argument("package")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def versions(ctx: click.Context, package: str, as_json: bool) -> None:
    """List every release version of PACKAGE, oldest first."""
    from depend.core.use_cases.query import list_versions

    result = list_versions(
        package,
        catalog=_load_catalog(ctx, as_json),
        vcs=ctx.obj.get("vcs"),
    )

    if result.error:
        _render_failure(result, as_json)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    latest = result.latest
    for version in result.versions:
        marker = "  ← latest" if version is latest else ""
        click.echo(f"{version.display_name}{marker}")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def packages(ctx: click.Context, as_json: bool) -> None:
    """List packages depend knows how to install."""
    from depend.core.use_cases.query import describe_package

    catalog = _load_catalog(ctx, as_json)
    entries = [describe_package(spec) for spec in catalog.all()]

    if as_json:
        click.echo(json.dumps({"packages": entries}, indent=2))
        return

    if not entries:
        click.echo("No packages defined.")
        return

    for entry in entries:
        click.secho(f"📦 {entry['name']}", fg="cyan", bold=True, nl=False)
        click.echo(f"  {entry['description']}" if entry["description"] else "")
        click.echo(f"   {entry['remote_url']}")
        if ctx.obj.get("verbose") and entry["requires"]:
            click.echo(f"   requires: {', '.join(entry['requires'])}")


def main() -> None:
    """Console-script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
