"""Command-line entry point: ``serve`` the API or run a one-off ``scan``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from kubescope import __version__
from kubescope.constants.defaults import RESOURCE_TYPE_DEFAULT, SCAN_NAMESPACE_DEFAULT
from kubescope.constants.enums import Severity
from kubescope.controllers.cluster.scanner import ResourceScanner
from kubescope.errors import KubeScopeError
from kubescope.gateway.kubectl_gateway import open_gateway
from kubescope.models.core.resource_row import ResourceRow, ScanQuery
from kubescope.models.state.app_settings import AppSettings, ConfigError
from kubescope.models.state.config_manager import ConfigManager
from kubescope.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)

SEVERITY_STYLES = {
    Severity.OK: "green",
    Severity.INFO: "cyan",
    Severity.WARNING: "yellow",
    Severity.CRITICAL: "bold red",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kubescope", description="Kubernetes triage dashboard backend")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--context", dest="kube_context", help="kubectl context to use")
    parser.add_argument("--log-level", dest="log_level", help="Log level (default INFO)")
    subcommands = parser.add_subparsers(dest="command", required=True)

    serve = subcommands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", help="Bind address")
    serve.add_argument("--port", type=int, help="Bind port")

    scan = subcommands.add_parser("scan", help="Scan the cluster and print a table")
    scan.add_argument("-n", "--namespace", default=SCAN_NAMESPACE_DEFAULT)
    scan.add_argument("-t", "--type", dest="resource_type", default=RESOURCE_TYPE_DEFAULT)
    scan.add_argument("--search", default="")
    scan.add_argument("--problems-only", action="store_true")
    return parser


def render_rows(rows: Sequence[ResourceRow]) -> Table:
    table = Table(title=f"{len(rows)} resource(s)", show_lines=False)
    for column in ("Kind", "Namespace", "Name", "Status", "Age", "Issue"):
        table.add_column(column)
    for row in rows:
        style = SEVERITY_STYLES[row.severity]
        table.add_row(
            row.kind,
            row.namespace,
            row.name,
            row.status,
            row.age,
            Text(row.issue, style=style),
        )
    return table


async def run_scan(settings: AppSettings, query: ScanQuery, console: Console) -> int:
    gateway = await open_gateway(settings, verify=False)
    try:
        report = await ResourceScanner(gateway, settings).scan_report(query)
    finally:
        await gateway.close()
    console.print(render_rows(report.items))
    for failure in report.failures:
        console.print(
            f"Skipped {failure.source} ({failure.namespace or 'all'}): {failure.error}",
            style="yellow",
            markup=False,
        )
    return 0


def serve(settings: AppSettings) -> int:
    import uvicorn

    from kubescope.app import create_app

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    console = Console()
    overrides = {"kube_context": args.kube_context, "log_level": args.log_level}
    if args.command == "serve":
        overrides.update(host=args.host, port=args.port)

    try:
        settings = ConfigManager().load(**overrides)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        return 2
    setup_logging(settings.log_level)

    if args.command == "serve":
        return serve(settings)

    try:
        query = ScanQuery(
            namespace=args.namespace,
            resource_type=args.resource_type,
            search=args.search,
            problems_only=args.problems_only,
        )
        return asyncio.run(run_scan(settings, query, console))
    except KubeScopeError as exc:
        logger.error("Scan failed: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
