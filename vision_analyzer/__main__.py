"""Command line entry point for the Vision Analyzer project."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from . import AppConfig, SettingsStore, build_service
from .config import LOG_LEVELS
from .services.controller import ImageAnalysisController
from .services.tools import ToolDispatcher
from .utils.logs import configure_logging


def _load_config(config_path: Path | None) -> AppConfig:
    if config_path is not None:
        return AppConfig.from_env(base=AppConfig.load(config_path))
    return SettingsStore().load()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Vision Analyzer")
    parser.add_argument(
        "--source",
        "-s",
        help="Image file path or HTTP(S) URL to analyze.",
    )
    parser.add_argument(
        "--model",
        help="Override the configured default model identifier.",
    )
    parser.add_argument(
        "--prompt",
        help="Custom analysis prompt.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML or JSON settings file to use instead of the settings store.",
    )
    parser.add_argument(
        "--log-level",
        choices=[*LOG_LEVELS, "warn"],
        help="Override the configured log level.",
    )
    parser.add_argument(
        "--list-models",
        action="store_true",
        help="Print the default model and exit.",
    )
    parser.add_argument(
        "--list-tools",
        action="store_true",
        help="Print the tool definitions and exit.",
    )

    args = parser.parse_args(argv)

    try:
        config = _load_config(args.config)
    except (OSError, ValueError) as exc:
        parser.error(str(exc))
    if args.log_level:
        config.log_level = "warning" if args.log_level == "warn" else args.log_level
    configure_logging(config.log_level)

    dispatcher = ToolDispatcher(ImageAnalysisController(build_service(config)))

    if args.list_tools:
        json.dump(dispatcher.list_tools(), sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 0

    if args.list_models:
        response = dispatcher.call_tool("list_models", {})
    else:
        if not args.source:
            parser.error("--source is required unless --list-models or --list-tools is given.")
        try:
            config.require_api_key()
        except ValueError as exc:
            parser.error(str(exc))
        arguments = {"source": args.source, "model": args.model, "prompt": args.prompt}
        response = dispatcher.call_tool("analyze_image", arguments)

    for item in response["content"]:
        sys.stdout.write(item["text"])
        sys.stdout.write("\n")
    return 1 if response["isError"] else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
