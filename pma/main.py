"""Entry point: runs the pipeline or a guided session from the terminal and writes the plan."""

import argparse
import asyncio
import os
import sys

from pma.config import get_config
from pma.errors import ConfigError, PMAError
from pma.graph import run_pipeline
from pma.llm import api_key_env, get_api_key
from pma.session import AwaitingStackSelection, Complete, advance, start_guided_session
from pma.utils.formatter import write_guided_plan, write_plan


def _read_idea(args_idea: list[str]) -> str:
    if args_idea:
        return " ".join(args_idea)
    print("Enter your product idea (Ctrl+D / Ctrl+Z to submit):")
    return sys.stdin.read()


def generate(idea: str, depth: int, output: str | None = None) -> None:
    """Run the linear pipeline and write the plan unless the input was chit-chat."""
    get_api_key()
    result = asyncio.run(run_pipeline(idea, depth))

    if result.is_simple_response:
        print(result.simple_response)
        return

    output_path = write_plan(result, output)
    print(f"[PMA] Output written to: {output_path}")


async def _guided_loop(idea: str) -> Complete:
    session, message = await start_guided_session(idea)
    print(f"\n{message}\n")

    while not isinstance(session, Complete):
        prompt = "Your choice: " if isinstance(session, AwaitingStackSelection) else "Your answer: "
        user_input = input(prompt)
        try:
            session, message = await advance(session, user_input)
        except PMAError as exc:
            # Session is unchanged; the same turn can be retried
            print(f"[PMA] Error: {exc}", file=sys.stderr)
            continue
        if not isinstance(session, Complete):
            print(f"\n{message}\n")

    return session


def guided(idea: str) -> None:
    """Drive a guided session in the terminal and write the final plan."""
    get_api_key()
    session = asyncio.run(_guided_loop(idea))
    output_path = write_guided_plan(session.final_plan)
    print(f"[PMA] Output written to: {output_path}")


def check() -> None:
    """Report whether the API key is configured and which models each stage uses."""
    config = get_config()
    env_name = api_key_env()
    has_key = bool(os.environ.get(env_name, "").strip())

    print(f"Provider: {config.get('provider', 'openrouter')}")
    print(f"{env_name}: {'found' if has_key else 'missing'}")
    print("Models:")
    for stage, entry in config.get("models", {}).items():
        print(f"  - {stage}: {entry['model']} (temperature {entry.get('temperature', 0.7)})")

    if not has_key:
        raise ConfigError(f"Missing {env_name}. Set it in the environment or a .env file.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pm-assist",
        description="Transform rough ideas into comprehensive product plans.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    gen = commands.add_parser("generate", help="Generate a product plan from your idea")
    gen.add_argument("idea", nargs="*", help="Your rough product idea (read from stdin if omitted)")
    gen.add_argument(
        "-d", "--depth", type=int, choices=(1, 2, 3),
        default=get_config().get("default_depth", 3),
        help="1 = expand only, 2 = expand + critique, 3 = full structured plan",
    )
    gen.add_argument("-o", "--output", default=None, help="Output filename (default: auto-generated)")

    guide = commands.add_parser("guided", help="Build a plan step by step: pick a stack, answer questions")
    guide.add_argument("idea", nargs="*", help="Your rough product idea (prompted for if omitted)")

    commands.add_parser("check", help="Check the API key and configured models")
    return parser


def main() -> None:
    """CLI entry point."""
    args = _build_parser().parse_args()

    try:
        if args.command == "generate":
            generate(_read_idea(args.idea), args.depth, args.output)
        elif args.command == "guided":
            guided(" ".join(args.idea) or input("Your product idea: "))
        else:
            check()
    except (PMAError, ValueError) as exc:
        print(f"[PMA] Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
