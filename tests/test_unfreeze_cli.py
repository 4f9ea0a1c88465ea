"""
Tests for the heatwave-unfreeze command line: argument handling and exit codes.
The run itself is replaced so no network is touched.
"""

from __future__ import annotations

import pytest

from heatwave.tools import unfreeze as cli
from heatwave.unfreeze.microwave import DEFAULT_TARGET_BALANCE
from heatwave.unfreeze.models import TransactionId
from heatwave.unfreeze.pipeline import UnfreezeSummary
from heatwave.utils.address_utils import Address

from conftest import ADDR_A, ADDR_B, GIVER_ADDR

GIVER = str(GIVER_ADDR)


@pytest.fixture
def captured_run(monkeypatch):
    """Replace the async run; record the config it was given."""
    calls = []

    async def fake_run(config, signer):
        calls.append((config, signer))
        return UnfreezeSummary(
            total=2,
            unfrozen=[(ADDR_A, TransactionId(lt="1", hash="ab" * 32))],
            skipped=[(ADDR_B, "Account is not frozen")],
        )

    monkeypatch.setattr(cli, "_run", fake_run)
    return calls


def _args(keys_file, *extra):
    return ["accounts.txt", f"--giver={GIVER}", f"--sign={keys_file}", *extra]


def test_parse_defaults(keys_file):
    args = cli.parse_args(_args(keys_file))
    assert args.path == "accounts.txt"
    assert args.giver == GIVER
    assert args.target_balance == DEFAULT_TARGET_BALANCE
    assert args.ignore_cache is False
    assert args.dry_run is False


@pytest.mark.parametrize(
    "extra,expected",
    [
        (["--ignore-cache"], True),
        (["--ignore-cache=true"], True),
        (["--ignore-cache=false"], False),
        (["--ignore-cache=TRUE"], True),
        (["--ignore-cache=false", "--ignore-cache"], True),
    ],
)
def test_parse_ignore_cache(keys_file, extra, expected):
    args = cli.parse_args(_args(keys_file, *extra))
    assert args.ignore_cache is expected


def test_parse_target_balance(keys_file):
    args = cli.parse_args(_args(keys_file, "--target-balance=2500"))
    assert args.target_balance == 2500


@pytest.mark.parametrize("argv", [["-h"], ["--help"], ["accounts.txt", "--help"]])
def test_help_exits_one(argv, capsys, captured_run):
    assert cli.main(argv) == 1
    assert "heatwave-unfreeze" in capsys.readouterr().out
    assert captured_run == []


@pytest.mark.parametrize(
    "extra",
    [
        ["--ignore-cache=maybe"],
        ["--target-balance=-5"],
        ["--target-balance=lots"],
        ["--unknown-flag"],
    ],
)
def test_bad_options_exit_one(keys_file, extra, captured_run):
    assert cli.main(_args(keys_file, *extra)) == 1
    assert captured_run == []


def test_missing_required_args_exit_one(captured_run):
    assert cli.main(["accounts.txt"]) == 1
    assert cli.main([]) == 1
    assert captured_run == []


def test_bad_giver_exits_one(keys_file, capsys, captured_run):
    argv = ["accounts.txt", "--giver=0:xyz", f"--sign={keys_file}"]
    assert cli.main(argv) == 1
    assert "Invalid giver address" in capsys.readouterr().err
    assert captured_run == []


def test_bad_keys_exit_one(tmp_path, capsys, captured_run):
    keys = tmp_path / "keys.json"
    keys.write_text("{}", encoding="utf-8")
    assert cli.main(_args(keys)) == 1
    assert "Invalid keys" in capsys.readouterr().err
    assert captured_run == []


def test_run_completes_with_summary(keys_file, capsys, captured_run):
    assert cli.main(_args(keys_file, "--ignore-cache", "--dry-run", "--target-balance=7")) == 0

    config, signer = captured_run[0]
    assert config.giver == Address.parse(GIVER)
    assert config.public_key == signer.public_key
    assert config.target_balance == 7
    assert config.ignore_cache is True
    assert config.dry_run is True

    out = capsys.readouterr().out
    assert "Unfrozen:        1" in out
    assert "Skipped:         1" in out
    assert f"{ADDR_B}: Account is not frozen" in out


def test_run_failure_exits_one(keys_file, monkeypatch, capsys):
    async def failing_run(config, signer):
        raise RuntimeError("Giver account not found")

    monkeypatch.setattr(cli, "_run", failing_run)
    assert cli.main(_args(keys_file)) == 1
    assert "Giver account not found" in capsys.readouterr().err


def test_bare_ignore_cache_before_path(keys_file):
    """The bare switch never swallows the positional path that follows it."""
    args = cli.parse_args([f"--giver={GIVER}", f"--sign={keys_file}", "--ignore-cache", "accounts.txt"])
    assert args.ignore_cache is True
    assert args.path == "accounts.txt"


def test_main_accepts_ignore_cache_before_path(keys_file, captured_run):
    argv = [f"--giver={GIVER}", f"--sign={keys_file}", "--ignore-cache", "accounts.txt"]
    assert cli.main(argv) == 0
    config, _ = captured_run[0]
    assert config.ignore_cache is True
    assert str(config.path) == "accounts.txt"


def test_ignore_cache_value_must_be_boolean(keys_file):
    with pytest.raises(cli.UsageError, match="Expected a boolean value"):
        cli.parse_args(_args(keys_file, "--ignore-cache=yes"))


def test_dry_run_summary_reports_prepared(keys_file, monkeypatch, capsys):
    async def dry_run(config, signer):
        return UnfreezeSummary(total=1, prepared=[ADDR_A])

    monkeypatch.setattr(cli, "_run", dry_run)
    assert cli.main(_args(keys_file, "--dry-run")) == 0
    out = capsys.readouterr().out
    assert "Unfrozen:        0" in out
    assert "Prepared (dry run): 1" in out
