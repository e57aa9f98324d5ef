"""Command-line interface for Rehash."""

import json
import sys
from pathlib import Path

import click
from rich.panel import Panel
from rich.text import Text

from rehash_cli.version import get_version
from rehash_cli.reconcile import (
    ReconcileConfig,
    ReconcileError,
    Reconciler,
    load_compilation,
)
from rehash_cli.utils.console import (
    _rich_success, _rich_error, _rich_info, _rich_warning, _rich_blank_line,
    _create_renames_table, _print_table, _get_console
)


def print_version(ctx, param, value):
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return

    version_text = Text()
    version_text.append("Rehash CLI", style="bold cyan")
    version_text.append(f" version {get_version()}", style="white")
    _get_console().print(Panel(version_text, border_style="cyan", padding=(0, 1)))
    ctx.exit()


def _shared_options(func):
    """Options common to every command that reads a stats file."""
    options = [
        click.argument('stats_file', type=click.Path(exists=True, dir_okay=False)),
        click.option('--output-path', '-o', type=click.Path(file_okay=False),
                     help="Bundler output directory (defaults to the stats file's outputPath)"),
        click.option('--manifest-json-name', help="Name of the JSON manifest (default: manifest.json)"),
        click.option('--hash-function', help="hashlib algorithm used for content fingerprints (default: md5)"),
        click.option('--config', 'config_file', type=click.Path(dir_okay=False),
                     help="Path to rehash.yml (default: ./rehash.yml)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load(stats_file, output_path, manifest_json_name, hash_function, config_file):
    config = ReconcileConfig.from_yml(
        config_file,
        manifest_json_name=manifest_json_name,
        hash_function=hash_function,
    )
    compilation = load_compilation(stats_file, output_path=output_path)
    return compilation, config


def _rename_rows(plans):
    for plan in plans:
        label = plan.unit_name or plan.unit_id
        yield label, plan.old_filename, plan.new_filename
        if plan.new_map_filename:
            yield label, plan.old_map_filename, plan.new_map_filename


@click.group(help="Rehash: rename bundler output after its real content fingerprint")
@click.option('--version', is_flag=True, callback=print_version,
              expose_value=False, is_eager=True, help="Show version and exit.")
@click.pass_context
def cli(ctx):
    """Main entry point for the Rehash CLI."""
    ctx.ensure_object(dict)


@cli.command(help="Rename fingerprinted assets and update manifests")
@_shared_options
@click.option('--report', type=click.Path(dir_okay=False),
              help="Write an {old: new} JSON report of every rename")
@click.option('--verbose', '-v', is_flag=True, help="Show skipped units and configuration")
def run(stats_file, output_path, manifest_json_name, hash_function, config_file, report, verbose):
    """Reconcile a finished build."""
    try:
        compilation, config = _load(stats_file, output_path, manifest_json_name, hash_function, config_file)
        if verbose:
            _rich_info(f"Output: {compilation.output_path} ({config.describe()})", symbol="gear")

        result = Reconciler(compilation, config).run()
    except (ReconcileError, OSError) as e:
        _rich_error(f"Reconciliation failed: {e}", symbol="error")
        sys.exit(1)

    for warning in result.warnings:
        _rich_warning(warning, symbol="warning")
    if verbose:
        for label in result.skipped_units:
            _rich_info(f"Skipped {label}: naming template has no content fingerprint", symbol="info")

    plans = list(result.renames)
    if result.manifest_rename:
        plans.append(result.manifest_rename)

    if plans:
        _rich_blank_line()
        _print_table(_create_renames_table(_rename_rows(plans)))
        _rich_blank_line()
        _rich_success(f"Renamed {len(plans)} asset(s)", symbol="sparkles")
    else:
        _rich_success("All fingerprints already match their content", symbol="check")

    if result.manifest_json_written:
        _rich_info(f"Updated {config.manifest_json_name}", symbol="info")
    if verbose:
        summary = ", ".join(f"{key.replace('_', ' ')}: {value}" for key, value in result.stats.items())
        _rich_info(f"Stats: {summary}", symbol="list")

    if report:
        try:
            Path(report).write_text(json.dumps(result.rename_map(), indent=2), encoding='utf-8')
        except OSError as e:
            _rich_error(f"Failed to write report {report}: {e}", symbol="error")
            sys.exit(1)
        _rich_info(f"Report written to {report}", symbol="list")


@cli.command(help="Preview the renames 'run' would perform")
@_shared_options
def plan(stats_file, output_path, manifest_json_name, hash_function, config_file):
    """Show pending renames without touching the output directory."""
    try:
        compilation, config = _load(stats_file, output_path, manifest_json_name, hash_function, config_file)
        plans = Reconciler(compilation, config).plan()
    except (ReconcileError, OSError) as e:
        _rich_error(f"Planning failed: {e}", symbol="error")
        sys.exit(1)

    if not plans:
        _rich_success("All fingerprints already match their content", symbol="check")
        return

    _print_table(_create_renames_table(_rename_rows(plans), title="Pending renames"))
    _rich_info(f"{len(plans)} asset(s) would be renamed; the manifest is renamed after them", symbol="preview")


def main():
    """Main entry point for the CLI."""
    try:
        cli(obj={})
    except Exception as e:
        _rich_error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
