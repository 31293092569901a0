"""Ask a human from the command line and print the answer.

Usage:
    waithuman "Deploy to production?" --choice yes --choice no --timeout 600
    waithuman "Which branch should I rebase onto?" --body "CI is red on main"

The API key comes from WAITHUMAN_API_KEY (a .env file in the current
directory is loaded first).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Iterable

from waithuman.config import WaitHumanConfig, load_env
from waithuman.errors import WaitHumanException
from waithuman.models import AskOptions
from waithuman.wait_human import WaitHuman


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _parse_args(argv: Iterable[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="waithuman", description="Ask a human a question and wait for the answer"
    )
    parser.add_argument("subject")
    parser.add_argument("--body", default=None)
    parser.add_argument(
        "--choice",
        dest="choices",
        action="append",
        default=[],
        help="Answer option; repeat for each option (omit for free text)",
    )
    parser.add_argument(
        "--timeout", type=float, default=None, help="Give up after this many seconds"
    )
    parser.add_argument("--endpoint", default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(list(argv))


async def _ask(client: WaitHuman, args: argparse.Namespace) -> str:
    options = AskOptions(timeout_seconds=args.timeout)
    if args.choices:
        return await client.ask_multiple_choice(
            args.subject, args.choices, body=args.body, options=options
        )
    return await client.ask_free_text(args.subject, body=args.body, options=options)


def main(argv: Iterable[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    _configure_logging(args.verbose)
    load_env()

    try:
        client = WaitHuman(config=WaitHumanConfig(endpoint=args.endpoint))
        answer = asyncio.run(_ask(client, args))
    except (ValueError, WaitHumanException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(answer)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
