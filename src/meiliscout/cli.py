"""CLI entry point for meiliscout index maintenance."""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from meiliscout.config.settings import Settings
from meiliscout.deps import get_registry, set_registry
from meiliscout.engines.base.registry import EngineRegistry
from meiliscout.engines.meilisearch.engine import MeiliSearchEngine
from meiliscout.models.searchable import Searchable
from meiliscout.observability.logging import setup_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meiliscout",
        description="meiliscout — Keep searchable models in sync with Meilisearch",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"meiliscout {_get_version()}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    index = sub.add_parser("index", help="Create (or delete) an index")
    index.add_argument("name", help="Index name")
    index.add_argument("--key", "-k", default=None, help="Primary key of the index")
    index.add_argument("--delete", "-d", action="store_true", help="Delete the index instead")

    imp = sub.add_parser("import", help="Import all records of a searchable model")
    imp.add_argument("model", help="Model class as 'package.module:ClassName'")
    imp.add_argument("--chunk", type=int, default=None, help="Records per batch (overrides config)")

    flush = sub.add_parser("flush", help="Remove all records of a searchable model from its index")
    flush.add_argument("model", help="Model class as 'package.module:ClassName'")

    sub.add_parser("sync-index-settings", help="Push scout.index_settings to Meilisearch")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = _build_parser().parse_args(argv)

    try:
        settings = _load_settings(args.config)
    except _UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.log_level:
        settings.observability.log_level = args.log_level

    setup_logging(settings.observability)
    set_registry(EngineRegistry(settings))

    try:
        return _COMMANDS[args.command](args)
    except _UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


class _UsageError(Exception):
    pass


def _load_settings(config: str | None) -> Settings:
    """Settings from ``config`` (YAML) or the environment."""
    try:
        if not config:
            return Settings()
        config_path = Path(config)
        if not config_path.exists():
            raise _UsageError(f"Config file not found: {config_path}")
        return Settings.from_yaml(config_path)
    except (ValidationError, yaml.YAMLError) as e:
        raise _UsageError(f"Invalid configuration: {e}") from e


def _load_model(path: str) -> type[Searchable]:
    """Resolve ``package.module:ClassName`` to a searchable model class."""
    module_name, _, class_name = path.partition(":")
    if not module_name or not class_name:
        raise _UsageError(f"Model must be given as 'package.module:ClassName', got '{path}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise _UsageError(f"Cannot import module '{module_name}': {e}") from e

    model_class = getattr(module, class_name, None)
    if not isinstance(model_class, type) or not issubclass(model_class, Searchable):
        raise _UsageError(f"'{path}' is not a Searchable model class")
    return model_class


def _cmd_index(args: argparse.Namespace) -> int:
    engine = get_registry().engine()
    if args.delete:
        engine.delete_index(args.name)
        print(f'Index "{args.name}" deleted.')
        return 0

    options = {"primaryKey": args.key} if args.key else {}
    engine.create_index(args.name, options)
    print(f'Index "{args.name}" created.')
    return 0


def _cmd_import(args: argparse.Namespace) -> int:
    model_class = _load_model(args.model)
    total = model_class.make_all_searchable(chunk_size=args.chunk)
    print(f"All [{model_class.__name__}] records have been imported ({total}).")
    return 0


def _cmd_flush(args: argparse.Namespace) -> int:
    model_class = _load_model(args.model)
    model_class.remove_all_from_search()
    print(f"All [{model_class.__name__}] records have been flushed.")
    return 0


def _cmd_sync_index_settings(args: argparse.Namespace) -> int:
    registry = get_registry()
    engine = registry.engine()
    if not isinstance(engine, MeiliSearchEngine):
        raise _UsageError(f"Engine '{registry.settings.scout.driver}' does not support index settings")

    index_settings = registry.settings.scout.index_settings
    if not index_settings:
        print("No index settings found in scout.index_settings.")
        return 0

    prefix = registry.settings.scout.prefix
    for name, settings in index_settings.items():
        engine.sync_index_settings(f"{prefix}{name}", settings)
        print(f'Settings for the "{prefix}{name}" index synced successfully.')
    return 0


_COMMANDS = {
    "index": _cmd_index,
    "import": _cmd_import,
    "flush": _cmd_flush,
    "sync-index-settings": _cmd_sync_index_settings,
}


def _get_version() -> str:
    """Get the package version."""
    try:
        from meiliscout import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    sys.exit(main())
