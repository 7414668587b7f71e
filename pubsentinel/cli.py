"""CLI entry point: pubsentinel.

Subcommands:
    pubsentinel deps [PROJECT_DIR] [--json]                  # declared dependencies, no network
    pubsentinel report [PROJECT_DIR] [--json] [--commands]   # health report against pub.dev
    pubsentinel search QUERY [--page N] [--json]             # find packages on pub.dev
    pubsentinel popular [--flutter] [--page N] [--json]      # most popular packages
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click

from pubsentinel.core.config import load_settings
from pubsentinel.core.logging import setup_logging
from pubsentinel.engines.dependency_scanner.scanner import scan
from pubsentinel.engines.health_classifier.models import (
    DependencyHealthRecord,
    Report,
    ReportStatus,
)
from pubsentinel.engines.health_classifier.runner import HealthReportRunner
from pubsentinel.engines.pub_client.client import PubDevClient
from pubsentinel.exceptions import ManifestNotFoundError, RegistryError

_NOT_FOUND_MSG = "No pubspec.yaml found in {}"


def _client() -> PubDevClient:
    settings = load_settings()
    return PubDevClient(settings.registry_url, timeout=settings.http_timeout)


def _flags(record: DependencyHealthRecord) -> str:
    parts: list[str] = []
    if record.is_discontinued:
        parts.append("DISCONTINUED")
    if record.is_deprecated:
        parts.append("DEPRECATED")
    if record.is_outdated:
        parts.append("outdated")
    return ", ".join(parts)


def _commands(record: DependencyHealthRecord) -> dict[str, str | None]:
    """Update (outdated records only) and remove command text for one record."""
    update = None
    if record.is_outdated and record.latest_version:
        update = PubDevClient.add_command(record.name, record.latest_version)
    return {"update": update, "remove": PubDevClient.remove_command(record.name)}


def _print_report(report: Report, as_json: bool, show_commands: bool) -> None:
    if as_json:
        packages = [{**r.to_dict(), "commands": _commands(r)} for r in report.records]
        payload = {
            "status": report.status.value,
            "manifest": str(report.manifest_path) if report.manifest_path else None,
            "packages": packages,
            "unavailable": list(report.failed),
        }
        click.echo(json.dumps(payload, indent=2))
        return

    if report.status is ReportStatus.EMPTY:
        click.echo(f"No dependencies declared in {report.manifest_path}.")
        return

    click.echo(
        f"{report.manifest_path}: {len(report.records)} dependencies "
        f"({report.outdated_count} outdated, {report.at_risk_count} deprecated/discontinued)\n"
    )
    for r in report.records:
        latest = r.latest_version or "?"
        flags = _flags(r)
        line = f"  {r.name:<30} {r.current_version:<14} {latest:<14}"
        click.echo(f"{line} {flags}".rstrip())
        if show_commands:
            for label, command in _commands(r).items():
                if command:
                    click.echo(f"      {label}: {command}")
    if report.failed:
        click.echo(f"\nRegistry lookup failed for: {', '.join(report.failed)}", err=True)


def _print_names(names: list[str], as_json: bool) -> None:
    if as_json:
        rows = [{"name": n, "add": PubDevClient.add_command(n)} for n in names]
        click.echo(json.dumps(rows, indent=2))
        return
    if not names:
        click.echo("No packages found.")
        return
    for n in names:
        click.echo(f"  {n:<30} {PubDevClient.add_command(n)}")


async def _build_report(project_dir: Path) -> Report:
    settings = load_settings()
    async with _client() as client:
        runner = HealthReportRunner(client, concurrency=settings.fetch_concurrency)
        return await runner.run(project_dir)


async def _list_packages(query: str | None, page: int, flutter: bool = False) -> list[str]:
    async with _client() as client:
        if query is not None:
            return await client.search_packages(query, page)
        if flutter:
            return await client.flutter_packages(page)
        return await client.popular_packages(page)


def _run_listing(query: str | None, page: int, flutter: bool, as_json: bool) -> None:
    try:
        names = asyncio.run(_list_packages(query, page, flutter))
    except RegistryError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    _print_names(names, as_json)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """pubsentinel: dependency health for pubspec.yaml projects."""
    setup_logging("DEBUG" if verbose else None)


@main.command("deps")
@click.argument("project_dir", default=".", type=click.Path(file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def deps(project_dir: Path, as_json: bool) -> None:
    """List dependencies declared in PROJECT_DIR/pubspec.yaml."""
    try:
        result = scan(project_dir.resolve())
    except ManifestNotFoundError:
        click.echo(_NOT_FOUND_MSG.format(project_dir), err=True)
        sys.exit(1)

    if as_json:
        rows = [
            {"name": d.name, "version": d.version_expr, "registry": d.is_registry_version}
            for d in result.dependencies
        ]
        click.echo(json.dumps(rows, indent=2))
        return

    if not result.dependencies:
        click.echo("No dependencies found.")
        return

    click.echo(f"Found {len(result.dependencies)} dependencies in {result.manifest_path}\n")
    for d in result.dependencies:
        note = "" if d.is_registry_version else "  (not version-checked)"
        click.echo(f"  {d.name} {d.version_expr}{note}")


@main.command("report")
@click.argument("project_dir", default=".", type=click.Path(file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--commands", "show_commands", is_flag=True, help="Show update/remove commands")
def report(project_dir: Path, as_json: bool, show_commands: bool) -> None:
    """Check PROJECT_DIR's dependencies against pub.dev."""
    result = asyncio.run(_build_report(project_dir.resolve()))

    if result.status is ReportStatus.NOT_FOUND:
        if as_json:
            click.echo(json.dumps({"status": result.status.value}))
        else:
            click.echo(_NOT_FOUND_MSG.format(project_dir), err=True)
        sys.exit(1)

    _print_report(result, as_json, show_commands)


@main.command("search")
@click.argument("query")
@click.option("--page", default=1, show_default=True, type=click.IntRange(min=1))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search(query: str, page: int, as_json: bool) -> None:
    """Search pub.dev for QUERY."""
    _run_listing(query, page, False, as_json)


@main.command("popular")
@click.option("--flutter", is_flag=True, help="Only packages supporting the Flutter SDK")
@click.option("--page", default=1, show_default=True, type=click.IntRange(min=1))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def popular(flutter: bool, page: int, as_json: bool) -> None:
    """List popular pub.dev packages."""
    _run_listing(None, page, flutter, as_json)


if __name__ == "__main__":
    main()
