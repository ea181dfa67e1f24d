"""
Root conftest.py for the zkelect test suite.

Pytest plugin that enforces TRA (Test Responsibility Architecture) and Tier markers.
- Reports tests missing a TRA marker or tier marker
- Enforces tier timeouts when pytest-timeout is installed
- TRA_ENFORCE=1 / TIER_ENFORCE=1 turn the report into a collection failure

Usage:
    @pytest.mark.tier(1)
    @pytest.mark.tra("Domain.Invariant.MemberOrdering")
    def test_something():
        ...

Configuration:
    Set TIER_ENFORCE=0 to disable tier enforcement
    Set TRA_ENFORCE=0 to disable TRA enforcement
    Set TIER_TIMEOUT_MULTIPLIER to scale tier timeouts on slow machines
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.nodes import Item


# ============================================================================
# TRA (Test Responsibility Architecture) Configuration
# ============================================================================

# Valid TRA namespace prefixes
VALID_TRA_PREFIXES = frozenset(
    [
        "Domain.Invariant.",
        "Domain.Policy.",
        "UseCase.",
        "Port.",
        "Adapter.",
        "Contract.",
    ]
)


# ============================================================================
# Tier Configuration
# ============================================================================

# Tier timeout limits in seconds
TIER_TIMEOUTS: dict[int, float] = {
    0: 0.1,  # 100ms - instant
    1: 2.0,  # 2s - fast (pre-commit)
    2: 30.0,  # 30s - standard (CI), threaded watch handling
    3: 300.0,  # 5min - slow, live ZooKeeper ensemble
    4: 0,  # No limit - manual
}


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config: Config) -> None:
    """Register custom markers for TRA and Tier enforcement."""
    config.addinivalue_line(
        "markers",
        "tra(anchor): Test Responsibility Anchor - declares the single responsibility this test protects. "
        "Must start with one of: Domain.Invariant, Domain.Policy, UseCase, Port, Adapter, Contract",
    )
    config.addinivalue_line(
        "markers",
        "tier(level): Test tier (0=instant, 1=fast, 2=standard, 3=slow, 4=manual). "
        "Determines when test runs and enforces timeout.",
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )
    config.addinivalue_line(
        "markers", "concurrency: Tests driving watch handling from several threads"
    )


def _get_tier(item: Item) -> int | None:
    """Extract tier level from item's markers."""
    for marker in item.iter_markers(name="tier"):
        if marker.args:
            tier = marker.args[0]
            if isinstance(tier, int) and 0 <= tier <= 4:
                return tier
    return None


def _enforce_tra_markers(items: list[Item]) -> list[str]:
    """
    Validate TRA markers on all tests.

    Returns:
        List of error messages. Empty if all valid.
    """
    if os.environ.get("TRA_ENFORCE", "warn") == "0":
        return []

    errors = []

    for item in items:
        tra_markers = list(item.iter_markers(name="tra"))
        test_id = item.nodeid

        if not tra_markers:
            errors.append(f"{test_id}: Missing @pytest.mark.tra('...')")
            continue

        # Class-level and function-level markers both count; the closest wins
        anchor = tra_markers[0].args[0] if tra_markers[0].args else None

        if not isinstance(anchor, str) or not anchor.strip():
            errors.append(f"{test_id}: @tra anchor must be a non-empty string")
            continue

        if not any(anchor.startswith(prefix) for prefix in VALID_TRA_PREFIXES):
            valid = ", ".join(sorted(VALID_TRA_PREFIXES))
            errors.append(
                f"{test_id}: Invalid TRA anchor '{anchor}'. Must start with one of: {valid}"
            )

    return errors


def _enforce_tier_markers(items: list[Item]) -> list[str]:
    """
    Validate tier markers on all tests.

    Returns:
        List of error messages. Empty if all valid.
    """
    if os.environ.get("TIER_ENFORCE", "warn") == "0":
        return []

    missing = [item.nodeid for item in items if _get_tier(item) is None]
    if not missing:
        return []

    errors = [
        f"\nTests missing a valid @pytest.mark.tier() marker ({len(missing)}):\n"
        + "\n".join(f"  - {nodeid}" for nodeid in missing[:10])
    ]
    if len(missing) > 10:
        errors.append(f"  ... and {len(missing) - 10} more")
    return errors


def _apply_tier_timeouts(items: list[Item]) -> None:
    """Apply timeout based on tier level.

    Only applies if pytest-timeout is installed and no explicit timeout is set.
    Respects TIER_TIMEOUT_MULTIPLIER environment variable.
    """
    try:
        import pytest_timeout as _  # type: ignore[import-untyped]  # noqa: F401
    except ImportError:
        # pytest-timeout not installed, skip
        return

    multiplier = float(os.environ.get("TIER_TIMEOUT_MULTIPLIER", "1.0"))

    for item in items:
        tier = _get_tier(item)
        if tier is None:
            continue

        if any(item.iter_markers(name="timeout")):
            continue

        timeout = TIER_TIMEOUTS.get(tier, 0)
        if timeout > 0:
            item.add_marker(pytest.mark.timeout(timeout * multiplier))


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(config: Config, items: list[Item]) -> None:
    """Report (or fail on) missing TRA/Tier markers, then apply tier timeouts."""
    all_errors = _enforce_tra_markers(items) + _enforce_tier_markers(items)

    if all_errors:
        strict = (
            os.environ.get("TRA_ENFORCE", "warn") == "1"
            or os.environ.get("TIER_ENFORCE", "warn") == "1"
        )
        if strict:
            error_msg = "TRA/Tier Enforcement Errors:\n" + "\n".join(
                f"  - {e}" for e in all_errors
            )
            pytest.fail(error_msg, pytrace=False)

        print("\nTRA/Tier Enforcement Warnings:")
        for error in all_errors:
            print(f"  {error}")

    _apply_tier_timeouts(items)


@pytest.hookimpl(trylast=True)
def pytest_report_header(config: Config) -> str:
    """Add enforcement info to pytest header."""
    tra_enforce = os.environ.get("TRA_ENFORCE", "warn")
    tier_enforce = os.environ.get("TIER_ENFORCE", "warn")
    return f"TRA enforcement: {tra_enforce} | Tier enforcement: {tier_enforce}"
