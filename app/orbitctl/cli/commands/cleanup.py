"""Cleanup command for removing orbit agent data.

Two modes are supported:

- Agent mode: stop the orbit service and remove the selected categories
  (logs, cache, secrets, registry, service files). The osqueryd process
  is never touched.
- OpenFrame mode: stop the osquery collection process and clear logs,
  cache, and secrets without prompting. The orbit service is never
  touched.
"""

from pathlib import Path
from typing import Annotated, NoReturn

import typer

from orbitctl.cleanup.orchestrator import CleanupError, CleanupOrchestrator, require_admin
from orbitctl.cli.display import print_cleanup_summary
from orbitctl.core.paths import resolve_root_dir
from orbitctl.models.cleanup import CleanupCategory, ErrorPolicy
from orbitctl.platforms import UnsupportedPlatformError, get_platform
from orbitctl.utils.formatting import print_error, print_info

app = typer.Typer(
    name="cleanup",
    help="Clean up orbit data, logs, and configuration.",
    invoke_without_command=True,
)

OPENFRAME_CATEGORIES: frozenset[CleanupCategory] = frozenset(
    {
        CleanupCategory.COLLECTOR,
        CleanupCategory.LOGS,
        CleanupCategory.CACHE,
        CleanupCategory.SECRETS,
    }
)

ALL_AGENT_CATEGORIES: frozenset[CleanupCategory] = frozenset(
    {
        CleanupCategory.SERVICE,
        CleanupCategory.LOGS,
        CleanupCategory.CACHE,
        CleanupCategory.SECRETS,
        CleanupCategory.REGISTRY,
        CleanupCategory.SERVICE_FILES,
    }
)


@app.callback(invoke_without_command=True)
def cleanup(
    ctx: typer.Context,
    clean_all: Annotated[
        bool,
        typer.Option("--all", help="Clean all data including enrollment secrets and node keys."),
    ] = False,
    logs: Annotated[bool, typer.Option("--logs", help="Clean only log files.")] = False,
    cache: Annotated[
        bool, typer.Option("--cache", help="Clean only cache and temporary files.")
    ] = False,
    secrets: Annotated[
        bool, typer.Option("--secrets", help="Clean enrollment secrets and node keys.")
    ] = False,
    registry: Annotated[
        bool, typer.Option("--registry", help="Clean Windows registry entries (Windows only).")
    ] = False,
    service: Annotated[
        bool,
        typer.Option("--service", help="Stop and remove the orbit service (not osqueryd)."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted without deleting."),
    ] = False,
    force: Annotated[bool, typer.Option("--force", help="Skip confirmation prompt.")] = False,
    continue_on_error: Annotated[
        bool,
        typer.Option(
            "--continue-on-error",
            help="Keep going after a failed removal and report all errors at the end.",
        ),
    ] = False,
    root_dir: Annotated[
        Path | None,
        typer.Option(
            "--root-dir",
            envvar="ORBIT_ROOT_DIR",
            help="Agent root directory (platform default if omitted).",
        ),
    ] = None,
    openframe_mode: Annotated[
        bool,
        typer.Option(
            "--openframe-mode",
            envvar="ORBIT_OPENFRAME_MODE",
            help="Stop the osquery collection process and clear logs, cache, and secrets.",
        ),
    ] = False,
    osquery_path: Annotated[
        Path | None,
        typer.Option(
            "--openframe-osquery-path",
            envvar="ORBIT_OPENFRAME_OSQUERY_PATH",
            help="Path to the osqueryd binary used in OpenFrame mode.",
        ),
    ] = None,
) -> None:
    """Remove orbit logs, cache, secrets, and service files.

    Examples:
        sudo orbitctl cleanup --logs --dry-run
        sudo orbitctl cleanup --all --force
        sudo orbitctl cleanup --openframe-mode --openframe-osquery-path /opt/osquery/osqueryd
    """
    collector_name: str | None = None

    if openframe_mode:
        if osquery_path is None:
            _fail("--openframe-osquery-path must be specified when OpenFrame mode is enabled")
        if registry or service:
            _fail("--registry and --service are not available in OpenFrame mode")
        categories = set(OPENFRAME_CATEGORIES)
        collector_name = osquery_path.stem
    else:
        categories = _selected_categories(
            clean_all=clean_all,
            logs=logs,
            cache=cache,
            secrets=secrets,
            registry=registry,
            service=service,
        )
        if not categories:
            typer.echo(ctx.get_help())
            raise typer.Exit(code=0)

    try:
        platform = get_platform()
        require_admin(platform)
    except (UnsupportedPlatformError, CleanupError) as e:
        _fail(str(e))

    root = resolve_root_dir(root_dir, system=platform.name)

    if not openframe_mode and not force and not dry_run:
        confirmed = typer.confirm("This will delete orbit data. Continue?", default=False)
        if not confirmed:
            print_info("Cleanup cancelled.")
            raise typer.Exit(code=0)

    if dry_run:
        print_info("DRY RUN - No files will be deleted\n")

    policy = ErrorPolicy.CONTINUE if continue_on_error else ErrorPolicy.FAIL_FAST
    orchestrator = CleanupOrchestrator(platform, root, dry_run=dry_run, policy=policy)
    report = orchestrator.run(categories, collector_name=collector_name)

    print_cleanup_summary(report, dry_run=dry_run, collector_stopped=openframe_mode)

    if report.failed:
        print_error(f"cleanup completed with {len(report.errors)} errors")
        raise typer.Exit(code=1)


def _selected_categories(
    *,
    clean_all: bool,
    logs: bool,
    cache: bool,
    secrets: bool,
    registry: bool,
    service: bool,
) -> set[CleanupCategory]:
    """Translate agent-mode flags into cleanup categories."""
    if clean_all:
        return set(ALL_AGENT_CATEGORIES)

    categories: set[CleanupCategory] = set()
    if logs:
        categories.add(CleanupCategory.LOGS)
    if cache:
        categories.add(CleanupCategory.CACHE)
    if secrets:
        categories.add(CleanupCategory.SECRETS)
    if registry:
        categories.add(CleanupCategory.REGISTRY)
    if service:
        categories.update({CleanupCategory.SERVICE, CleanupCategory.SERVICE_FILES})
    return categories


def _fail(message: str) -> NoReturn:
    print_error(message)
    raise typer.Exit(code=1)
