"""
Root pytest configuration for sitemapkit.

Provides test fixtures for CLI testing and temporary projects.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

# ============================================================================
# Project Fixtures
# ============================================================================


@pytest.fixture
def tmp_project(tmp_path: Path, monkeypatch) -> Path:
    """
    Create a temporary project directory with a sitemap.config file.

    The working directory is switched to the project for the test.
    """
    (tmp_path / "sitemap.config").write_text(
        """# Sitemap Project Configuration
PATH_SITEMAPS="web/sitemap"
HOST_INFO="https://example.com"
"""
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ============================================================================
# CLI Testing Fixtures
# ============================================================================


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner for testing."""
    return CliRunner()


def invoke_cli(runner: CliRunner, cmd, args: list[str], **kwargs):
    """
    Helper to invoke CLI command.

    Args:
        runner: Click test runner
        cmd: Click command or group
        args: Command arguments
        **kwargs: Additional arguments to runner.invoke()

    Returns:
        Click Result object
    """
    return runner.invoke(cmd, args, catch_exceptions=False, **kwargs)


def assert_cli_success(result, msg: str = None):
    """Assert CLI command succeeded (exit code 0)."""
    if result.exit_code != 0:
        error_msg = f"CLI failed (exit code {result.exit_code})"
        if msg:
            error_msg = f"{msg}: {error_msg}"
        if result.output:
            error_msg += f"\nOutput: {result.output}"
        raise AssertionError(error_msg)


def assert_cli_failure(result, expected_code: int = None, msg: str = None):
    """Assert CLI command failed."""
    if result.exit_code == 0:
        error_msg = "CLI succeeded but expected failure"
        if msg:
            error_msg = f"{msg}: {error_msg}"
        raise AssertionError(error_msg)

    if expected_code is not None and result.exit_code != expected_code:
        raise AssertionError(f"Expected exit code {expected_code}, got {result.exit_code}")


def assert_output_contains(result, text: str):
    """Assert CLI output contains text."""
    if text not in result.output:
        raise AssertionError(f"Expected output to contain '{text}'\nGot: {result.output}")


def assert_json_output(result) -> dict:
    """Assert CLI output is valid JSON and return it."""
    try:
        return json.loads(result.output)
    except json.JSONDecodeError as e:
        raise AssertionError(f"Expected JSON output, got:\n{result.output}") from e
