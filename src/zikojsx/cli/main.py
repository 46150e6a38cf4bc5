"""Main CLI entry point."""

import logging
import sys
from pathlib import Path
from typing import Optional

import rich.panel
import rich_click as click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from zikojsx import __version__
from zikojsx.compiler.exceptions import ZikoJsxError
from zikojsx.config import CompilerOptions

console = Console()
err_console = Console(stderr=True)

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_HELPTEXT_FIRST = True
click.rich_click.STYLE_COMMANDS_TABLE_SHOW_LINES = False
click.rich_click.STYLE_COMMANDS_TABLE_PAD_EDGE = False
click.rich_click.STYLE_COMMANDS_TABLE_BOX = None
click.rich_click.STYLE_OPTIONS_TABLE_EXPAND = False
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running 'zikojsx --help' for more information."
click.rich_click.STYLE_OPTIONS_TABLE_BOX = None
click.rich_click.STYLE_COMMANDS_PANEL_BOX = None
click.rich_click.STYLE_OPTIONS_PANEL_BOX = None

click.rich_click.STYLE_HEADER_TEXT = "bold cyan"
click.rich_click.STYLE_OPTION = "cyan"
click.rich_click.STYLE_SWITCH = "cyan"
click.rich_click.STYLE_METAVAR = "dim white"
click.rich_click.STYLE_USAGE_COMMAND = "cyan"
click.rich_click.STYLE_USAGE = "dim"

click.rich_click.COMMAND_GROUPS = {
    "zikojsx": [
        {
            "name": "Commands",
            "commands": ["compile", "build", "watch"],
        }
    ]
}

# Workaround: rich-click wraps tables in Panels which default to expand=True.
original_panel_init = rich.panel.Panel.__init__


def panel_init(self, *args, **kwargs):
    kwargs.setdefault("expand", False)
    original_panel_init(self, *args, **kwargs)


rich.panel.Panel.__init__ = panel_init  # type: ignore[method-assign]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, markup=False)],
        force=True,
    )


def _load_options(binding: Optional[str], module: Optional[str], search_path: Path) -> CompilerOptions:
    try:
        return CompilerOptions.load(search_path=search_path, binding=binding, module=module)
    except ValueError as e:
        raise click.BadParameter(str(e))


binding_option = click.option(
    "--binding", default=None, help="Identifier the tag functions come from (default: tags)"
)
module_option = click.option(
    "--module", default=None, help="Module the binding is imported from (default: ziko/ui)"
)


@click.group(
    help=f"""
[bold white on cyan] zikojsx [/] [bold cyan]v{__version__}[/] Markup to plain calls.

Run [bold cyan]zikojsx compile FILE[/] to print the compiled file.
Run [bold cyan]zikojsx build SRC[/] to compile a source tree.
Run [bold cyan]zikojsx watch SRC[/] to recompile on change.
"""
)
@click.version_option(__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool) -> None:
    _configure_logging(verbose)


@cli.command("compile")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--out", "out_file", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Write output to a file instead of stdout")
@binding_option
@module_option
def compile_command(
    file: Path, out_file: Optional[Path], binding: Optional[str], module: Optional[str]
) -> None:
    """Compile a single file."""
    from zikojsx.compiler.pipeline import compile_file

    options = _load_options(binding, module, file.parent)
    try:
        output = compile_file(file, options)
    except ZikoJsxError as e:
        err_console.print(f"[bold red]Error[/] {escape(str(e))}", highlight=False)
        sys.exit(1)

    if out_file is None:
        click.echo(output, nl=False)
    else:
        out_file.parent.mkdir(parents=True, exist_ok=True)
        out_file.write_text(output, encoding="utf-8")
        console.print(f"✅ Wrote [cyan]{out_file}[/]")


@cli.command()
@click.argument("src", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--out-dir", default="dist", type=click.Path(file_okay=False, path_type=Path), help="Output directory for compiled files")
@click.option("--force", is_flag=True, help="Recompile files whose source did not change")
@binding_option
@module_option
def build(
    src: Path,
    out_dir: Path,
    force: bool,
    binding: Optional[str],
    module: Optional[str],
) -> None:
    """Compile every matching file under SRC."""
    from zikojsx.compiler.build import build_project

    options = _load_options(binding, module, src)
    console.print(f"🔨 Building [cyan]{src}[/]...")

    summary = build_project(src, out_dir, options, force=force)

    for error in summary.errors:
        err_console.print(f"[bold red]Error[/] {escape(str(error))}", highlight=False)
    if not summary.ok:
        console.print(f"❌ Build failed with {len(summary.errors)} error(s)")
        sys.exit(1)

    console.print(
        "✅ Build complete "
        f"(compiled={summary.compiled}, unchanged={summary.unchanged}, out={summary.out_dir})"
    )


@cli.command()
@click.argument("src", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--out-dir", default="dist", type=click.Path(file_okay=False, path_type=Path), help="Output directory for compiled files")
@binding_option
@module_option
def watch(src: Path, out_dir: Path, binding: Optional[str], module: Optional[str]) -> None:
    """Compile SRC, then recompile files as they change."""
    import asyncio

    from zikojsx.runtime.watcher import watch_project

    options = _load_options(binding, module, src)
    try:
        asyncio.run(watch_project(src, out_dir, options))
    except KeyboardInterrupt:
        console.print("\n[bold]zikojsx: Shutting down...[/]")


if __name__ == "__main__":
    cli()
