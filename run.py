#!/usr/bin/env python3
"""
NotesHub command line.

    python run.py                          # what is configured, where the API lives
    python run.py --action initdb          # create programs/semesters/notes tables
    python run.py --action server --reload
    python run.py --action health          # config, models, app and a live DB ping
    python run.py --action config          # every YAML section as loaded
    python run.py --action test --test-type unit --coverage
"""

import asyncio
import subprocess
import sys
from pathlib import Path
from typing import Any

import click

# run.py sits beside the noteshub package, which may not be installed
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from noteshub.backend.core.logging import get_logger, log_with_source, setup_logging

CATALOG_TABLES = frozenset({"programs", "semesters", "notes", "note_tags"})


def validate_project_root() -> Path:
    """Exit unless run.py sits next to the .project_root marker."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


def _fail(logger: Any, event: str, message: str, **fields: Any) -> None:
    log_with_source(logger, "cli", "error", event, **fields)
    click.echo(click.style(message, fg="red"))
    sys.exit(1)


# Actions


def run_server(logger: Any, host: str | None, port: int | None, reload: bool, **_: Any) -> None:
    """Serve the API and the browser client with uvicorn."""
    from noteshub.backend.core.config import get_app_config

    server = get_app_config().application.server
    host = host or server.host
    port = port or server.port

    cmd = [
        sys.executable, "-m", "uvicorn", "noteshub.backend.main:app",
        "--host", host, "--port", str(port),
    ]
    if reload:
        cmd.append("--reload")

    log_with_source(logger, "cli", "info", "Starting server", host=host, port=port, reload=reload)
    click.echo(f"NotesHub at http://{host}:{port}  (Ctrl+C to stop)\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        log_with_source(logger, "cli", "info", "Server stopped")
    except subprocess.CalledProcessError as e:
        log_with_source(logger, "cli", "error", "Server exited", exit_code=e.returncode)
        sys.exit(e.returncode)


def init_database(logger: Any, **_: Any) -> None:
    """Create the catalog tables from the models, without Alembic."""
    from noteshub.backend.core.database import dispose_engine, init_models

    async def _create() -> None:
        try:
            await init_models()
        finally:
            await dispose_engine()

    try:
        asyncio.run(_create())
    except Exception as e:
        _fail(logger, "Table creation failed", f"Could not create tables: {e}", error=str(e))

    log_with_source(logger, "cli", "info", "Tables created")
    click.echo(click.style("Database tables created.", fg="green"))


def _check_config() -> str:
    from noteshub.backend.core.config import get_app_config

    application = get_app_config().application
    return f"{application.name} {application.version}"


def _check_database_url() -> str:
    from noteshub.backend.core.config import get_database_url

    return get_database_url().split(":", 1)[0]


def _check_models() -> str:
    from noteshub.backend.models.base import Base
    from noteshub.backend.models.note import Note  # noqa: F401

    missing = CATALOG_TABLES - set(Base.metadata.tables)
    if missing:
        raise RuntimeError(f"missing tables: {', '.join(sorted(missing))}")
    return ", ".join(sorted(CATALOG_TABLES))


def _check_app() -> str:
    from noteshub.backend.core.config import get_app_config
    from noteshub.backend.main import get_app

    prefix = get_app_config().application.api_prefix
    api_routes = [r for r in get_app().routes if getattr(r, "path", "").startswith(prefix)]
    return f"{len(api_routes)} routes under {prefix}"


def _check_database_ping() -> str:
    from noteshub.backend.api.health import check_database
    from noteshub.backend.core.database import dispose_engine, get_session_factory

    async def _ping() -> dict[str, Any]:
        try:
            async with get_session_factory()() as session:
                return await check_database(session)
        finally:
            await dispose_engine()

    result = asyncio.run(_ping())
    if result["status"] != "healthy":
        raise RuntimeError(result["error"])
    return f"{result['latency_ms']} ms"


HEALTH_CHECKS = [
    ("YAML configuration", _check_config),
    ("Database URL", _check_database_url),
    ("Catalog models", _check_models),
    ("FastAPI application", _check_app),
    ("Database reachable", _check_database_ping),
]


def check_health(logger: Any, **_: Any) -> None:
    """Run every health check and exit 1 if any fails."""
    failed = 0
    for name, check in HEALTH_CHECKS:
        try:
            detail = check()
        except Exception as e:
            failed += 1
            log_with_source(logger, "cli", "error", "Health check failed", check=name, error=str(e))
            click.echo(f"  {click.style('FAIL', fg='red')}  {name}: {e}")
        else:
            click.echo(f"  {click.style('PASS', fg='green')}  {name}: {detail}")

    if failed:
        click.echo(click.style(f"\n{failed} of {len(HEALTH_CHECKS)} checks failed.", fg="yellow"))
        sys.exit(1)
    click.echo(click.style("\nAll checks passed.", fg="green"))


def _echo_tree(values: dict[str, Any], indent: int = 2) -> None:
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_tree(value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def show_config(logger: Any, **_: Any) -> None:
    """Print each YAML section as validated."""
    from noteshub.backend.core.config import SECTIONS, get_app_config

    try:
        config = get_app_config()
    except (ValueError, FileNotFoundError) as e:
        _fail(logger, "Configuration invalid", f"Error loading configuration: {e}", error=str(e))

    for section, (filename, _schema) in SECTIONS.items():
        click.echo(f"\n[{section}] config/settings/{filename}")
        _echo_tree(getattr(config, section).model_dump())


def run_tests(logger: Any, test_type: str, coverage: bool, **_: Any) -> None:
    """Run pytest on one suite or all of them."""
    target = {"unit": "tests/unit", "integration": "tests/integration"}.get(test_type, "tests/")
    cmd = [sys.executable, "-m", "pytest", target, "-v"]
    if coverage:
        cmd.extend(["--cov=noteshub", "--cov-report=term-missing"])

    log_with_source(logger, "cli", "info", "Running tests", suite=test_type, coverage=coverage)
    click.echo(f"Running: {' '.join(cmd)}\n")
    sys.exit(subprocess.run(cmd).returncode)


def show_info(logger: Any, **_: Any) -> None:
    """Name, version and the URLs of the API and the browser client."""
    from noteshub.backend.core.config import get_app_config, get_server_base_url

    application = get_app_config().application
    base_url = get_server_base_url()

    click.echo(f"{application.name} {application.version}")
    click.echo(application.description)
    click.echo()
    click.echo(f"API:      {base_url}{application.api_prefix}")
    if application.frontend.enabled:
        click.echo(f"Browser:  {base_url}/")
    click.echo()
    click.echo("Actions: " + ", ".join(f"--action {name}" for name in ACTIONS))
    click.echo("Logging: --verbose/-v for INFO, --debug/-d for DEBUG")


ACTIONS = {
    "info": show_info,
    "initdb": init_database,
    "server": run_server,
    "health": check_health,
    "config": show_config,
    "test": run_tests,
}


@click.command()
@click.option("--action", type=click.Choice(list(ACTIONS)), default="info", help="Action to perform.")
@click.option("--verbose", "-v", is_flag=True, help="Log at INFO.")
@click.option("--debug", "-d", is_flag=True, help="Log at DEBUG.")
@click.option("--host", default=None, help="Bind address for --action server.")
@click.option("--port", default=None, type=int, help="Port for --action server.")
@click.option("--reload", is_flag=True, help="Auto-reload for --action server.")
@click.option(
    "--test-type",
    type=click.Choice(["all", "unit", "integration"]),
    default="all",
    help="Suite for --action test.",
)
@click.option("--coverage", is_flag=True, help="Coverage report for --action test.")
def main(action: str, verbose: bool, debug: bool, **options: Any) -> None:
    """
    NotesHub Entry Point.

    Manage the NotesHub catalog service: create its tables, serve the
    API and browser client, check health, show configuration or run
    the tests.
    """
    validate_project_root()

    log_level = "DEBUG" if debug else "INFO" if verbose else "WARNING"
    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)
    logger.debug("Running action", extra={"action": action, "log_level": log_level})

    ACTIONS[action](logger, **options)


if __name__ == "__main__":
    main()
