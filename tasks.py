"""Invoke tasks for InvoiceBox application management."""

import sys
from pathlib import Path

from invoke import task
from invoke.context import Context

LOG_FILE = Path("data/logs/invoicebox.log")
IMPORT_DEBUG_FILE = Path("data/logs/last_import_debug.txt")


@task
def start(ctx: Context, host: str = "0.0.0.0", port: int = 8000, reload: bool = False) -> None:
    """Start the InvoiceBox FastAPI server in the foreground.

    Args:
        ctx: Invoke context
        host: Host to bind to (default: 0.0.0.0)
        port: Port to bind to (default: 8000)
        reload: Enable auto-reload for development
    """
    cmd = f"invoicebox-server start --host {host} --port {port} --foreground"
    if reload:
        cmd += " --reload"

    try:
        ctx.run(cmd, pty=True)
    except KeyboardInterrupt:
        print("\nServer stopped")
        sys.exit(0)


@task(name="start-background")
def start_background(ctx: Context, host: str = "0.0.0.0", port: int = 8000) -> None:
    """Start the InvoiceBox FastAPI server in the background."""
    ctx.run(f"invoicebox-server start --host {host} --port {port}")


@task
def stop(ctx: Context) -> None:
    """Stop the InvoiceBox FastAPI server."""
    ctx.run("invoicebox-server stop")


@task
def status(ctx: Context) -> None:
    """Check the status of the InvoiceBox server."""
    ctx.run("invoicebox-server status")


@task
def logs(ctx: Context, follow: bool = False, lines: int = 50) -> None:
    """View the InvoiceBox server logs.

    Args:
        ctx: Invoke context
        follow: Follow log output (like tail -f)
        lines: Number of lines to show (default: 50)
    """
    if not LOG_FILE.exists():
        print(f"Log file not found: {LOG_FILE}")
        return

    if follow:
        ctx.run(f"tail -f {LOG_FILE}", pty=True)
    else:
        ctx.run(f"tail -n {lines} {LOG_FILE}")


@task(name="import-debug")
def import_debug(ctx: Context) -> None:
    """Show the diagnostic trace of the most recent client import."""
    if not IMPORT_DEBUG_FILE.exists():
        print(f"No import trace found at {IMPORT_DEBUG_FILE}")
        return
    ctx.run(f"cat {IMPORT_DEBUG_FILE}")


@task
def test(ctx: Context, verbose: bool = False, coverage: bool = False) -> None:
    """Run the test suite.

    Args:
        ctx: Invoke context
        verbose: Enable verbose output
        coverage: Run with coverage report
    """
    cmd = "pytest"
    if verbose:
        cmd += " -v"
    if coverage:
        cmd += " --cov=invoicebox --cov-report=term-missing"
    ctx.run(cmd, pty=True)


@task
def clean(ctx: Context, all: bool = False) -> None:
    """Clean up temporary files.

    Args:
        ctx: Invoke context
        all: Also remove uploaded files and logs
    """
    for pattern in ["__pycache__", "*.pyc", "*.pyo", ".pytest_cache"]:
        ctx.run(f"find . -name '{pattern}' -exec rm -rf {{}} + 2>/dev/null || true", warn=True)

    for path in ["build", "dist", "*.egg-info", ".eggs"]:
        ctx.run(f"rm -rf {path} 2>/dev/null || true", warn=True)

    if all:
        print("Removing uploads and logs...")
        ctx.run("rm -rf data/uploads data/logs 2>/dev/null || true", warn=True)

    print("Cleanup complete")
