#!/usr/bin/env python3
"""
Unfreeze Everscale accounts listed in a file.

For each address: find the freeze transaction, fetch the pre-freeze state from
the state archive (cached under the temp dir), compute storage-fee debt and
redeploy the state through the microwave relay, funded by the giver.

Usage:
  heatwave-unfreeze accounts.txt --giver=0:... --sign=keys.json [--target-balance=1000000000] [--ignore-cache]
  python -m heatwave.tools.unfreeze accounts.txt --giver=0:... --sign=keys.json

Exit code: 0 when the batch ran to the end (skipped accounts included),
1 on setup errors or --help.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from heatwave.chain.keystore import Signer, load_keys
from heatwave.config.env import get_jrpc_url, load_heatwave_env, print_heatwave_startup
from heatwave.core.exceptions import InvalidAddress
from heatwave.heatwave_logging import get_logger
from heatwave.unfreeze.microwave import DEFAULT_TARGET_BALANCE
from heatwave.unfreeze.pipeline import UnfreezeConfig, UnfreezeSummary, run_unfreeze
from heatwave.utils.address_utils import Address

logger = get_logger(__name__)

SEP = "=" * 60


IGNORE_CACHE_FLAG = "--ignore-cache"


class UsageError(Exception):
    """Command line could not be parsed."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def _parse_switch(value: str) -> bool:
    raw = value.strip().lower()
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise UsageError("Expected a boolean value for `ignore-cache`")


def _expand_switches(raw_args: list[str]) -> list[str]:
    """
    Rewrite --ignore-cache=<true|false> into the bare flag (or drop it), so the
    switch never consumes the following positional argument.
    """
    out: list[str] = []
    for arg in raw_args:
        if arg.startswith(IGNORE_CACHE_FLAG + "="):
            if _parse_switch(arg.split("=", 1)[1]):
                out.append(IGNORE_CACHE_FLAG)
            continue
        out.append(arg)
    return out


def _parse_target_balance(value: str) -> int:
    try:
        amount = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("Expected a number value for `target-balance`")
    if amount < 0:
        raise argparse.ArgumentTypeError("Expected a non-negative value for `target-balance`")
    return amount


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="heatwave-unfreeze",
        description="A tool for unfreezing Everscale accounts.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("path", help="path to the file with accounts list")
    parser.add_argument("--giver", required=True, help="giver contract address")
    parser.add_argument("--sign", required=True, help="path to keys.json")
    parser.add_argument(
        "--target-balance",
        type=_parse_target_balance,
        default=DEFAULT_TARGET_BALANCE,
        help=f"target balance in nano EVERs; default: {DEFAULT_TARGET_BALANCE}",
    )
    parser.add_argument(
        IGNORE_CACHE_FLAG,
        action="store_true",
        help="ignore computed states cache (also --ignore-cache=true|false)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="prepare states and log redeploy amounts without sending anything",
    )
    parser.add_argument("-h", "--help", action="store_true", help="display usage information")
    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse the command line; raises UsageError."""
    return build_parser().parse_args(_expand_switches(argv))


def _make_provider(signer: Signer):
    from heatwave.chain.nekoton_provider import NekotonProvider

    return NekotonProvider(get_jrpc_url(), signer)


async def _run(config: UnfreezeConfig, signer: Signer) -> UnfreezeSummary:
    provider = _make_provider(signer)
    try:
        return await run_unfreeze(config, provider)
    finally:
        await provider.aclose()


def _print_summary(summary: UnfreezeSummary) -> None:
    print(SEP)
    print("SUMMARY")
    print(SEP)
    print(f"  Input accounts:  {summary.total}")
    print(f"  Unfrozen:        {len(summary.unfrozen)}")
    if summary.prepared:
        print(f"  Prepared (dry run): {len(summary.prepared)}")
    print(f"  Skipped:         {len(summary.skipped)}")
    for address, reason in summary.skipped:
        print(f"    {address}: {reason}")
    print(SEP)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    raw_args = sys.argv[1:] if argv is None else argv
    if "-h" in raw_args or "--help" in raw_args:
        parser.print_help()
        return 1
    try:
        args = parse_args(raw_args)
    except UsageError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    load_heatwave_env()
    try:
        try:
            giver = Address.parse(args.giver)
        except InvalidAddress:
            raise InvalidAddress("Invalid giver address") from None
        signer = load_keys(args.sign)
        config = UnfreezeConfig(
            path=Path(args.path),
            giver=giver,
            public_key=signer.public_key,
            target_balance=args.target_balance,
            ignore_cache=args.ignore_cache,
            dry_run=args.dry_run,
        )
        print_heatwave_startup("unfreeze")
        summary = asyncio.run(_run(config, signer))
    except Exception as e:
        logger.exception("unfreeze_failed", error=str(e))
        print("ERROR:", e, file=sys.stderr)
        return 1

    _print_summary(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
