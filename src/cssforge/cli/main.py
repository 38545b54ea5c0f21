"""Main CLI entry point."""
import importlib
import logging
import os
import sys
from pathlib import Path

import click


def import_styles(module_name: str):
    """Import a module that defines styles (e.g. 'app.styles')."""
    # Add current directory to path so we can import local modules
    sys.path.insert(0, os.getcwd())

    try:
        return importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"Could not import module '{module_name}': {e}", param_hint="MODULE")


@click.group()
@click.version_option(package_name="cssforge")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """cssforge CLI.

    Run 'cssforge extract MODULE' to print the CSS a module generates.
    Run 'cssforge ids FILE' to list hydration ids in rendered HTML.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@cli.command()
@click.argument("module")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write CSS to this file")
@click.option("--tag", is_flag=True, help="Wrap the rules in a <style> element with hydration ids")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None,
              help="Configuration file (defaults to ./cssforge.config.py)")
def extract(module, output, tag, config_path):
    """Import MODULE and emit the CSS it generated."""
    import cssforge
    from cssforge.config import load_config
    from cssforge.server import render_style_tag

    options = load_config(config_path)
    if options:
        cssforge.configure(**options)

    import_styles(module)

    engine = cssforge.default_engine
    text = render_style_tag(engine) if tag else engine.sheet.css_text()

    if output:
        output.write_text(text, encoding="utf-8")
        click.echo(f"Wrote {len(engine.sheet)} rules to {output}")
    else:
        click.echo(text)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def ids(file):
    """List the hydration ids embedded in an HTML FILE."""
    from cssforge.server import hydration_ids

    found = hydration_ids(file.read_text(encoding="utf-8"))
    if not found:
        raise click.UsageError(f"No style ids found in {file}")
    for id_ in found:
        click.echo(id_)


if __name__ == "__main__":
    cli()
