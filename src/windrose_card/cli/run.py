from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import Any, Mapping, Sequence

import structlog
import yaml

from windrose_card.core import config_loader
from windrose_card.core.errors import ConfigValidationError
from windrose_card.core.log_bridge import check_log_level, configure_logging
from windrose_card.core.migration import ConfigMigrator, MigrationReport, backup_file
from windrose_card.core.version import get_version_info


def _logger() -> Any:
    return structlog.get_logger("windrose.cli")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="windrose-config",
        description="Validate a wind rose card configuration and print the resolved settings.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to the card configuration (defaults to $WINDROSE_CONFIG or ./windrose.yaml).",
    )
    parser.add_argument(
        "--example",
        action="store_true",
        help="Print an example card configuration with every option at its default and exit.",
    )
    parser.add_argument(
        "--migrate",
        action="store_true",
        help="Rewrite deprecated options in the configuration file before validating it.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="With --migrate: show the changes without writing the file.",
    )
    parser.add_argument(
        "--no-backup",
        action="store_true",
        help="With --migrate: don't create a backup of the original file.",
    )
    parser.add_argument(
        "--log-format",
        choices=("json", "console"),
        default="json",
        help="Log output format (default: json).",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print the version and the versions of the config libraries, then exit.",
    )
    return parser.parse_args(argv)


def _plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {item.name: _plain(getattr(value, item.name)) for item in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def summarize(config: config_loader.CardConfigWrapper) -> dict[str, Any]:
    """Plain-data view of a validated config, including the derived entity lists."""
    summary = _plain(config)
    summary["derived"] = {
        "wind_bar_count": config.wind_bar_count(),
        "raw_entities": config.create_raw_entities_array(),
        "statistics_entities": config.create_statistics_entities_array(),
        "attributes_configured": config.attributes_configured(),
    }
    return summary


def _initial_log_level(raw: Mapping[str, Any]) -> str:
    try:
        return check_log_level(raw.get("log_level"), config_loader.DEFAULTS.log_level)
    except ConfigValidationError:
        return config_loader.DEFAULTS.log_level


def _migrate(config_path: Path, *, dry_run: bool, no_backup: bool) -> int:
    try:
        original = config_loader.read_yaml_mapping(config_path)
    except ConfigValidationError as exc:
        _logger().error("config-parse-failed", path=str(config_path), error=exc.message)
        return 1

    report = MigrationReport()
    migrated = ConfigMigrator(report).migrate_config(original)
    for line in report.lines():
        print(line)
    if not report.has_changes():
        print("No migration needed - configuration is up to date.")
        return 0
    if dry_run:
        print("Dry run: no changes were written.")
        return 0

    if not no_backup:
        backup_path = backup_file(config_path)
        if backup_path:
            _logger().info("config-backup-created", path=str(backup_path))
    config_path.write_text(
        yaml.safe_dump(migrated, default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )
    _logger().info("config-migrated", path=str(config_path), changes=len(report.changes))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    if args.version:
        versions = get_version_info()
        print(f"windrose-config {versions.pop('windrose_card_config')}")
        for library, version in versions.items():
            print(f"{library} {version}")
        return 0
    if args.example:
        print(yaml.safe_dump(config_loader.CardConfigWrapper.example_config(), sort_keys=False), end="")
        return 0

    configure_logging(config_loader.DEFAULTS.log_level, args.log_format)
    try:
        if args.migrate:
            status = _migrate(
                config_loader.resolve_config_path(args.config),
                dry_run=args.dry_run,
                no_backup=args.no_backup,
            )
            if status != 0 or args.dry_run:
                return status
        raw = config_loader.load_raw_config(args.config)
    except FileNotFoundError as exc:
        _logger().error("config-not-found", path=str(exc))
        return 2
    except ConfigValidationError as exc:
        _logger().error("config-invalid", **exc.to_dict())
        return 1

    configure_logging(_initial_log_level(raw), args.log_format)
    result = config_loader.check_config(raw)
    if not result.ok:
        _logger().error("config-invalid", **result.error.to_dict())
        return 1

    print(yaml.safe_dump(summarize(result.config), sort_keys=False), end="")
    return 0


__all__ = ["main", "summarize"]


if __name__ == "__main__":
    sys.exit(main())
