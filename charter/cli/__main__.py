"""Charter CLI - Main Entry Point.

Commands:
    build    - Build the document from controller definitions
    docs     - Render a Swagger UI or ReDoc page
    version  - Show version information
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from . import __version__, __cli_name__
from .utils.colors import success, error, warning, dim, kv, _CHECK, _CROSS


# ═══════════════════════════════════════════════════════════════════════════
# Custom Click help formatter
# ═══════════════════════════════════════════════════════════════════════════


class CharterGroup(click.Group):
    """Click group with aligned, coloured command listing."""

    def format_commands(
        self, ctx: click.Context, formatter: click.HelpFormatter
    ) -> None:
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            commands.append((subcommand, cmd.get_short_help_str(limit=48)))

        if commands:
            with formatter.section(click.style("Commands", fg="cyan", bold=True)):
                max_len = max(len(c[0]) for c in commands) + 2
                for name, help_text in commands:
                    styled_name = click.style(name.ljust(max_len), fg="green")
                    formatter.write(f"  {styled_name} {help_text}\n")


@click.group(cls=CharterGroup)
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Minimal output')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool):
    """Build API description documents from controller definitions.

    \b
    Quick start:
      charter build myapp.api:controllers
      charter build myapp.api:controllers --format yaml -o openapi.yaml
      charter docs --title "My API"
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ============================================================================
# Commands
# ============================================================================

@cli.command('build')
@click.argument('targets', nargs=-1, required=True)
@click.option('--config', '-c', 'config_paths', multiple=True, help='Config file (.json, .yaml)')
@click.option('--format', '-f', 'output_format', type=click.Choice(['json', 'yaml']), default='json',
              help='Output format')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write to file instead of stdout')
@click.option('--title', type=str, help='Override info.title')
@click.option('--api-version', type=str, help='Override info.version')
@click.option('--app-dir', type=click.Path(file_okay=False), default='.',
              help='Directory added to the import path')
@click.option('--quiet-warnings', is_flag=True, help='Do not report responses without a description')
@click.option('--no-validate-examples', is_flag=True, help='Skip example checks')
@click.option('--strict', is_flag=True, help='Exit with an error if any diagnostics were reported')
@click.pass_context
def build(
    ctx,
    targets: Tuple[str, ...],
    config_paths: Tuple[str, ...],
    output_format: str,
    output: Optional[str],
    title: Optional[str],
    api_version: Optional[str],
    app_dir: str,
    quiet_warnings: bool,
    no_validate_examples: bool,
    strict: bool,
):
    """
    Build the document from one or more MODULE:ATTR targets.

    Examples:
      charter build myapp.api:users
      charter build myapp.api:controllers -c charter.yaml --strict
    """
    from ..builder import CollectingSink, DocumentBuilder
    from ..config import ConfigLoader
    from ..faults import Fault
    from .loader import load_controllers

    overrides = {}
    if title:
        overrides['title'] = title
    if api_version:
        overrides['version'] = api_version
    if quiet_warnings:
        overrides['suppress_description_warnings'] = True
    if no_validate_examples:
        overrides['validate_examples'] = False

    sink = CollectingSink()
    try:
        options = ConfigLoader.load(paths=list(config_paths), overrides=overrides).options()
        builder = DocumentBuilder(options, sink=sink)
        for target in targets:
            builder.add_controllers(load_controllers(target, search_path=app_dir))
        rendered = builder.to_yaml() if output_format == 'yaml' else builder.to_json()
    except Fault as e:
        error(f"  {_CROSS} {e}")
        sys.exit(1)

    if not ctx.obj['quiet']:
        for diagnostic in sink.diagnostics:
            warning(f"  ! {diagnostic.message}")

    if output:
        Path(output).write_text(rendered if rendered.endswith("\n") else rendered + "\n", encoding="utf-8")
        if not ctx.obj['quiet']:
            success(f"  {_CHECK} Wrote {output}")
            kv("Paths", str(len(builder.paths)))
            kv("Schemas", str(len(builder.registry)))
            kv("Diagnostics", str(len(sink)))
    else:
        click.echo(rendered)

    if strict and len(sink):
        error(f"  {_CROSS} {len(sink)} diagnostic(s) reported (--strict)")
        sys.exit(1)


@cli.command('docs')
@click.option('--title', type=str, default='API', help='Page title')
@click.option('--spec-url', type=str, default='/openapi.json', help='URL of the document')
@click.option('--style', type=click.Choice(['swagger', 'redoc']), default='swagger',
              help='Documentation UI')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write to file instead of stdout')
def docs(title: str, spec_url: str, style: str, output: Optional[str]):
    """
    Render a documentation page that loads the document from --spec-url.

    Examples:
      charter docs --title "Users API" > docs.html
      charter docs --style redoc --spec-url /api/openapi.json
    """
    from ..docs import render_docs

    page = render_docs(style, title, spec_url)
    if output:
        Path(output).write_text(page, encoding="utf-8")
        success(f"  {_CHECK} Wrote {output}")
    else:
        click.echo(page)


@cli.command('version')
def version():
    """Show version information."""
    click.echo(f"{__cli_name__} {__version__}")
    dim(f"  Python {sys.version.split()[0]}")


def main():
    """Entry point for `charter` command."""
    cli(obj={})


if __name__ == '__main__':
    main()
