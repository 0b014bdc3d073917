"""CLI entry point for ask."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from . import __version__, history
from .args import ClassifiedArgs, classify, first_positional
from .config import Config, config_path, load_config, load_env, write_default_config
from .engine import run_api, run_claude
from .errors import AskError, CanceledError, ExitError
from .llm.registry import ProviderRegistry, build_registry
from .output import OutputCoordinator
from .prompt import build_prompt, is_piped, read_interactive_prompt, read_pipe

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

EXIT_INTERRUPTED = 130
EXIT_SIGNAL_BASE = 128

SUBCOMMANDS = {
    ("history",),
    ("history", "clear"),
    ("config",),
    ("config", "init"),
    ("providers",),
}
PARSER_ONLY = (["-h"], ["--help"], ["--version"])

USAGE = """\
usage: ask [-m MODEL] [--raw] [--dry-run] [backend flags...] prompt...
       ask history [clear]
       ask config [init [--force]]
       ask providers

Any other flag (and its value) is passed through to the claude CLI.
Piped stdin is added to the prompt as input data."""


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
    )


def is_subcommand(argv: list[str]) -> bool:
    """True when argv names a subcommand rather than a prompt."""
    if argv in PARSER_ONLY:
        return True
    if "--" in argv:
        return False
    if first_positional(argv) not in {name for name, *_ in SUBCOMMANDS}:
        return False
    classified = classify(argv)
    words = tuple(classified.positional)
    if classified.tool_flags or words not in SUBCOMMANDS:
        return False
    if words == ("config", "init"):
        return all(token == "--force" for token in classified.passthrough)
    return not classified.passthrough


def exit_status(code: int) -> int:
    """Shell-style status for a child return code (negative means killed by signal)."""
    return EXIT_SIGNAL_BASE - code if code < 0 else code


def gather_prompt(classified: ClassifiedArgs) -> str:
    """Prompt from words, piped stdin, or the interactive editor."""
    piped = read_pipe() if is_piped() else ""
    text = classified.prompt_text
    if not text and not piped:
        text = read_interactive_prompt()
    return build_prompt(text, piped)


def execute(
    prompt: str,
    classified: ClassifiedArgs,
    config: Config,
    registry: ProviderRegistry,
) -> int:
    """Run one query through the configured backend. Returns the exit status."""
    model = classified.model or config.default_model
    if not classified.dry_run:
        history.append(prompt)

    output = OutputCoordinator(raw=classified.raw or config.raw_output, theme=config.theme)
    logger.debug("execution path: %s", config.mode)
    if config.mode == "api":
        if classified.passthrough:
            logger.debug("api mode ignores passthrough flags: %s", classified.passthrough)
        coro = run_api(
            prompt, model, registry, config.provider, output,
            base_url=config.base_url, dry_run=classified.dry_run,
        )
    else:
        coro = run_claude(
            prompt, model, classified.passthrough, output,
            dry_run=classified.dry_run, binary=config.claude_path,
        )

    try:
        asyncio.run(coro)
    except ExitError as e:
        print(f"ask: {e}", file=sys.stderr)
        return exit_status(e.code)
    except AskError as e:
        print(f"ask: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    return 0


def cmd_history(args: argparse.Namespace, config: Config, registry: ProviderRegistry) -> int:
    """Browse past queries and re-run the selected one."""
    if args.action == "clear":
        try:
            history.clear()
        except OSError as e:
            print(f"ask: failed to clear history: {e}", file=sys.stderr)
            return 1
        print("History cleared.")
        return 0

    entries = history.load_all()
    if not entries:
        print("No history yet.")
        return 0
    selected = history.browse(entries)
    if not selected:
        return 0
    return execute(selected, classify([]), config, registry)


def cmd_config(args: argparse.Namespace, config: Config, registry: ProviderRegistry) -> int:
    """Show the effective config, or write the default file."""
    path = config_path()
    if args.action == "init":
        try:
            write_default_config(path, force=args.force)
        except FileExistsError:
            print(f"{path} already exists. Use --force to overwrite.")
            return 1
        print(f"Created {path}")
        return 0

    suffix = "" if path.exists() else " (not found, using defaults)"
    print(f"Config file: {path}{suffix}\n")
    for key, value in vars(config).items():
        print(f"  {key}: {value}")
    return 0


def cmd_providers(args: argparse.Namespace, config: Config, registry: ProviderRegistry) -> int:
    """List registered providers and their model aliases."""
    for provider in registry:
        mark = "*" if provider.name == config.provider else " "
        key = provider.env_key or "(no key)"
        aliases = ", ".join(provider.model_aliases())
        print(f"{mark} {provider.name:<10} {key:<18} default: {provider.default_model:<7} aliases: {aliases}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ask",
        usage=USAGE,
        description="Ask Claude (or another LLM) a question from the terminal",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    history_parser = subparsers.add_parser("history", help="Browse and re-run past queries")
    history_parser.add_argument("action", nargs="?", choices=["clear"], help="Delete all history")

    config_parser = subparsers.add_parser("config", help="Show or create the config file")
    config_parser.add_argument("action", nargs="?", choices=["init"], help="Write the default config")
    config_parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    subparsers.add_parser("providers", help="List API providers and model aliases")
    return parser


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    path = config_path()
    load_env(path)
    config = load_config(path)
    configure_logging(config.log_level)
    registry = build_registry()

    if is_subcommand(argv):
        args = build_parser().parse_args(argv)
        commands = {
            "history": cmd_history,
            "config": cmd_config,
            "providers": cmd_providers,
        }
        return commands[args.command](args, config, registry)

    classified = classify(argv)
    try:
        prompt = gather_prompt(classified)
    except CanceledError:
        return EXIT_INTERRUPTED
    if not prompt:
        print("ask: no prompt given", file=sys.stderr)
        return 1
    return execute(prompt, classified, config, registry)


def run() -> None:
    sys.exit(main())
