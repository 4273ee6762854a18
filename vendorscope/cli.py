"""Vendorscope CLI - Inspect the installed packages of a Composer project."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import click

from vendorscope.errors import VendorscopeError
from vendorscope.index import PackageIndex
from vendorscope.resolver import NamespaceResolver


@dataclass
class _State:
    manifest: str | None
    as_json: bool
    _resolver: NamespaceResolver | None = None

    def resolver(self) -> NamespaceResolver:
        if self._resolver is None:
            try:
                if self.manifest:
                    index = PackageIndex(self.manifest)
                else:
                    index = PackageIndex.for_application()
            except VendorscopeError as e:
                raise click.ClickException(str(e)) from e
            self._resolver = NamespaceResolver(index)
        return self._resolver


def _package_row(resolver: NamespaceResolver, package) -> dict:
    return {
        "name": package.name,
        "version": package.version,
        "namespace": resolver.get_namespace(package),
        "source_root": resolver.get_source_root(package),
        "install_path": resolver.resolve_install_path(package),
    }


def _print_table(title: str, rows: list[dict], columns: list[str]) -> None:
    from rich.console import Console
    from rich.table import Table

    table = Table(title=title, show_edge=False)
    for column in columns:
        table.add_column(column.replace("_", " ").title(), style="bold" if column == columns[0] else None)
    for row in rows:
        table.add_row(*(str(row.get(c) or "-") for c in columns))
    Console().print(table)


@click.group()
@click.option(
    "-m", "--manifest", default=None, envvar="VENDORSCOPE_MANIFEST",
    type=click.Path(dir_okay=False),
    help="Path to composer.json (default: topmost one above the current directory)",
)
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of tables")
@click.option("--verbose", is_flag=True, help="Log resolution details")
@click.pass_context
def cli(ctx: click.Context, manifest: str | None, as_json: bool, verbose: bool) -> None:
    """Vendorscope - Find out which installed package ships a symbol."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    ctx.obj = _State(manifest=manifest, as_json=as_json)


@cli.command("manifest")
@click.pass_obj
def manifest_cmd(state: _State) -> None:
    """Print the manifest governing the current project."""
    click.echo(state.resolver().index.get_manifest_path())


@cli.command("list")
@click.pass_obj
def list_cmd(state: _State) -> None:
    """List installed packages with their namespace and install path."""
    resolver = state.resolver()
    try:
        rows = [_package_row(resolver, p) for p in resolver.index.list_packages()]
    except VendorscopeError as e:
        raise click.ClickException(str(e)) from e

    if state.as_json:
        click.echo(json.dumps(rows, indent=2))
        return
    _print_table(
        "Installed packages", rows,
        ["name", "version", "namespace", "install_path"],
    )


@cli.command("which")
@click.argument("symbols", nargs=-1, required=True)
@click.pass_context
def which_cmd(ctx: click.Context, symbols: tuple[str, ...]) -> None:
    """Show the package that defines each SYMBOL."""
    state: _State = ctx.obj
    resolver = state.resolver()
    rows = []
    try:
        for symbol in symbols:
            package = resolver.resolve_package_by_symbol(symbol)
            rows.append({
                "symbol": symbol,
                "package": package.name if package else None,
                "source_directory": resolver.resolve_source_directory(symbol),
            })
    except VendorscopeError as e:
        raise click.ClickException(str(e)) from e

    if state.as_json:
        click.echo(json.dumps(rows, indent=2))
    else:
        _print_table("Symbol owners", rows, ["symbol", "package", "source_directory"])

    if any(row["package"] is None for row in rows):
        ctx.exit(1)


@cli.command("show")
@click.argument("name")
@click.pass_obj
def show_cmd(state: _State, name: str) -> None:
    """Show details for the installed package NAME."""
    resolver = state.resolver()
    try:
        package = next((p for p in resolver.index.list_packages() if p.name == name), None)
        if package is None:
            raise click.ClickException(f"Package {name} is not installed")
        row = _package_row(resolver, package)
    except VendorscopeError as e:
        raise click.ClickException(str(e)) from e

    if state.as_json:
        click.echo(json.dumps(row, indent=2))
        return
    for key, value in row.items():
        click.echo(f"{key}: {value if value is not None else '-'}")


if __name__ == "__main__":
    cli()
