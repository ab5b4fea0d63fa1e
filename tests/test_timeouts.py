from pathlib import Path

import pytest

from bash_runner import TimeoutPolicy, resolve_timeout
from bash_runner.timeouts import (
    DEFAULT_BACKGROUND_SECONDS,
    DEFAULT_FAST_SECONDS,
    DEFAULT_SLOW_SECONDS,
)


def test_default_tiers() -> None:
    assert DEFAULT_FAST_SECONDS == 30
    assert DEFAULT_SLOW_SECONDS == 15 * 60
    assert DEFAULT_BACKGROUND_SECONDS == 24 * 60 * 60

    assert resolve_timeout(background=False, slow_ok=False) == 30
    assert resolve_timeout(background=False, slow_ok=True) == 900
    assert resolve_timeout(background=True, slow_ok=False) == 86400


def test_background_ignores_slow_ok() -> None:
    policy = TimeoutPolicy(slow=60, background=3600)

    assert resolve_timeout(background=True, slow_ok=True) == DEFAULT_BACKGROUND_SECONDS
    assert resolve_timeout(background=True, slow_ok=True, policy=policy) == 3600


def test_none_policy_matches_empty_policy() -> None:
    empty = TimeoutPolicy()
    for background in (False, True):
        for slow_ok in (False, True):
            assert resolve_timeout(background=background, slow_ok=slow_ok, policy=None) == resolve_timeout(
                background=background, slow_ok=slow_ok, policy=empty
            )


def test_policy_field_overrides_only_its_own_tier() -> None:
    policy = TimeoutPolicy(fast=5)

    assert policy.resolve(background=False, slow_ok=False) == 5
    assert policy.resolve(background=False, slow_ok=True) == DEFAULT_SLOW_SECONDS
    assert policy.resolve(background=True, slow_ok=False) == DEFAULT_BACKGROUND_SECONDS


def test_custom_policy_all_tiers() -> None:
    policy = TimeoutPolicy(fast=5, slow=120, background=3600)

    assert policy.resolve(background=False, slow_ok=False) == 5
    assert policy.resolve(background=False, slow_ok=True) == 120
    assert policy.resolve(background=True, slow_ok=False) == 3600


@pytest.mark.parametrize("bad", [0, -1, "30", True])
def test_policy_rejects_invalid_durations(bad: object) -> None:
    with pytest.raises(ValueError):
        TimeoutPolicy(fast=bad)  # type: ignore[arg-type]


def test_policy_from_file_reads_timeouts_table(tmp_path: Path) -> None:
    config = tmp_path / "timeouts.toml"
    config.write_text(
        "[timeouts]\nfast_seconds = 2\nbackground_seconds = 7200.5\n",
        encoding="utf-8",
    )

    policy = TimeoutPolicy.from_file(config)

    assert policy == TimeoutPolicy(fast=2.0, background=7200.5)
    assert policy.slow is None


def test_policy_from_file_accepts_top_level_keys(tmp_path: Path) -> None:
    config = tmp_path / "timeouts.toml"
    config.write_text("slow_seconds = 45\n", encoding="utf-8")

    assert TimeoutPolicy.from_file(str(config)).resolve(background=False, slow_ok=True) == 45


def test_policy_from_missing_file_fails(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="not found"):
        TimeoutPolicy.from_file(tmp_path / "missing.toml")
