"""
CLI entrypoint.

doctor: print effective settings.
pages: list the pages a site class declares (offline).
resolve: tell which page a URL belongs to (offline, no browser).
"""

from __future__ import annotations

import importlib
from typing import Optional, Type

import typer
from rich.console import Console
from rich.table import Table

from ..core.controller.resolver import PageResolver
from ..core.log import setup_logging
from ..core.settings import settings
from ..core.site import Site

app = typer.Typer(help="site-object CLI")
console = Console()


@app.callback()
def _main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override SITE_OBJECT_LOG_LEVEL"),
) -> None:
    setup_logging(log_level, console=console)


def load_site(target: str) -> Type[Site]:
    """Import "package.module:SiteClass" and check it is a Site subclass."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        typer.secho(f"expected module:SiteClass, got {target!r}", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        typer.secho(f"cannot import {module_name}: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    site_cls = getattr(module, attr, None)
    if not (isinstance(site_cls, type) and issubclass(site_cls, Site)):
        typer.secho(f"{target} is not a Site subclass", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    return site_cls


@app.command("doctor")
def doctor() -> None:
    """Environment check: print key settings to confirm CLI is usable."""
    console.print("[bold green]site-object[/] environment")
    console.print(f"- base_url:  {settings.base_url or '-'}")
    console.print(f"- platform:  {settings.platform} ({settings.browser_type})")
    console.print(f"- headless:  {settings.headless}")
    console.print(f"- timeout:   {settings.default_timeout_ms}ms")


@app.command("pages")
def pages(
    target: str = typer.Argument(..., help="Site class as module:SiteClass"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Base URL to compile against"),
) -> None:
    """Print every page the site declares, page templates included."""
    site_cls = load_site(target)
    table = Table(title=f"{site_cls.__name__} pages", show_header=True, header_style="bold")
    table.add_column("accessor")
    table.add_column("class")
    table.add_column("url template")
    table.add_column("matcher")
    table.add_column("arguments")
    table.add_column("attributes")

    for d in site_cls.registry.all():
        tmpl = d.compile(base_url if base_url is not None else settings.base_url)
        table.add_row(
            "-" if d.is_page_template else d.name,
            d.page_class.__name__,
            tmpl.pattern or "-",
            d.url_matcher.pattern if d.url_matcher is not None else "-",
            ", ".join(tmpl.placeholders) or "-",
            ", ".join(d.attributes) or "-",
        )
    console.print(table)


@app.command("resolve")
def resolve(
    target: str = typer.Argument(..., help="Site class as module:SiteClass"),
    url: str = typer.Argument(..., help="URL to identify"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Base URL to compile against"),
) -> None:
    """Print which page the URL belongs to; exit 1 if none."""
    site_cls = load_site(target)
    resolver = PageResolver.from_registry(
        site_cls.registry, base_url if base_url is not None else settings.base_url
    )
    found = resolver.match(url)
    if found is None:
        typer.secho(f"[resolve] no page matches {url}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    console.print(f"[bold green]{found.descriptor.name}[/] ({found.descriptor.page_class.__name__})")
    console.print(f"- matched via: {found.via}")
    console.print(f"- template:    {found.template.pattern}")
    for k, v in found.arguments.items():
        console.print(f"- {k} = {v}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
