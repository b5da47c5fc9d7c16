"""Command-line entry points for rendering heatmaps."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import Callable

# Allow `python cli/main.py ...` execution from IDEs by adding repo root to sys.path.
if __package__ in {None, ""}:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from configs.loader import ConfigLoader, ConfigValidationError, HeatmapConfig
from main import run_heatmap
from visualization.image_writer import ImageWriteError

LOGGER = logging.getLogger(__name__)

_COMMANDS = {"run"}


def confirm_large_run(config: HeatmapConfig, input_fn: Callable[[str], str] = input) -> bool:
    """Ask before running at 4K size or larger; anything but ``y...`` declines."""
    print(
        "The dimensions entered are equal to or larger than 4K. "
        "This may use lots of CPU usage and time."
    )
    try:
        answer = input_fn("Continue? [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower().startswith("y")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gol-heatmap",
        description="Render a Game of Life visitation heatmap as a grayscale PNG.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log every generation")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="simulate and write a heatmap image (default)")
    run_cmd.add_argument(
        "values",
        nargs="*",
        type=int,
        metavar="N",
        help="DEPTH | WIDTH HEIGHT | WIDTH HEIGHT DEPTH",
    )
    run_cmd.add_argument("--seed", type=int)
    run_cmd.add_argument("--strength", type=int)
    run_cmd.add_argument("--out-dir", dest="output_dir")
    run_cmd.add_argument("-y", "--yes", action="store_true", help="skip the large-size prompt")
    return parser


def _resolve_config(args: argparse.Namespace) -> HeatmapConfig:
    config = HeatmapConfig()
    overrides = {
        key: getattr(args, key)
        for key in ("seed", "strength", "output_dir")
        if getattr(args, key) is not None
    }
    if overrides:
        config = config.replace(**overrides)
    return ConfigLoader.from_args(args.values, base=config)


def _run(args: argparse.Namespace, input_fn: Callable[[str], str]) -> int:
    if len(args.values) > 3:
        print("Arguments exceeded 3. Usage: run [DEPTH | WIDTH HEIGHT | WIDTH HEIGHT DEPTH]")
        return 2
    if not args.values:
        print("No arguments passed. Using default values")

    try:
        config = _resolve_config(args)
    except ConfigValidationError as exc:
        print(exc)
        print("Exiting...")
        return 1

    if config.needs_confirmation and not args.yes and not confirm_large_run(config, input_fn):
        print("Exiting...")
        return 1

    print(f"Using values width={config.width} height={config.height} depth={config.depth}")

    try:
        path = run_heatmap(config)
    except ImageWriteError as exc:
        LOGGER.exception("Heatmap image could not be written")
        print(f"[FAILURE] {exc}")
        return 1

    print(f'[SUCCESS]\nImage written to "{path}"')
    return 0


def run_cli(argv: list[str] | None = None, input_fn: Callable[[str], str] = input) -> int:
    raw = list(sys.argv[1:] if argv is None else argv)
    first = next((token for token in raw if token not in {"-v", "--verbose"}), None)
    if first is None or (first not in _COMMANDS and first not in {"-h", "--help"}):
        # Bare positionals behave like `run`.
        flags = [token for token in raw if token in {"-v", "--verbose"}]
        raw = flags + ["run"] + [token for token in raw if token not in {"-v", "--verbose"}]

    parser = _build_parser()
    args = parser.parse_args(raw)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "run":
        return _run(args, input_fn)
    return 1


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
