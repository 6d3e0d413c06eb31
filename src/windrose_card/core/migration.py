"""Rewrite deprecated wind rose card options into their current form."""

from __future__ import annotations

import copy
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping

from .checks import is_present


class MigrationReport:
    """Track migration changes and issues."""

    def __init__(self) -> None:
        self.changes: List[str] = []
        self.warnings: List[str] = []

    def add_change(self, message: str) -> None:
        self.changes.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def has_changes(self) -> bool:
        return bool(self.changes)

    def lines(self) -> List[str]:
        output = [f"changed: {change}" for change in self.changes]
        output.extend(f"warning: {warning}" for warning in self.warnings)
        return output


class ConfigMigrator:
    """Migrate a raw card configuration from deprecated to current options."""

    # Top-level keys that moved into a nested section
    MOVED_PARAMS = {
        "hours_to_show": ("data_period", "hours_to_show"),
        "cardinal_direction_letters": ("direction_labels", "cardinal_direction_letters"),
    }

    def __init__(self, report: MigrationReport):
        self.report = report

    def migrate_config(self, config: Mapping[str, Any]) -> Dict[str, Any]:
        migrated = copy.deepcopy(dict(config))

        for old_key, new_path in self.MOVED_PARAMS.items():
            self._move_parameter(migrated, old_key, new_path)

        self._migrate_direction_entity(migrated)
        return migrated

    def _move_parameter(self, config: Dict[str, Any], old_key: str, new_path: tuple[str, str]) -> None:
        if old_key not in config:
            return
        value = config.pop(old_key)
        section_key, new_key = new_path
        if not is_present(value):
            self.report.add_change(f"Removed empty {old_key}")
            return

        section = config.get(section_key)
        if section is None:
            section = {}
        if not isinstance(section, dict):
            config[old_key] = value
            self.report.add_warning(f"{section_key} is not a mapping, {old_key} left in place")
            return

        if section_key == "data_period":
            # The deprecated value replaced the nested window fields.
            dropped = [key for key in ("hours_to_show", "from_hour_of_day") if is_present(section.get(key))]
            for key in dropped:
                section.pop(key)
                self.report.add_warning(f"Dropped data_period.{key}, it was overridden by {old_key}")
        elif is_present(section.get(new_key)):
            self.report.add_warning(f"{section_key}.{new_key} already set, dropped {old_key}")
            return

        section[new_key] = value
        config[section_key] = section
        self.report.add_change(f"Moved {old_key} → {section_key}.{new_key}")

    def _migrate_direction_entity(self, config: Dict[str, Any]) -> None:
        value = config.get("wind_direction_entity")
        if isinstance(value, str) and value.strip():
            config["wind_direction_entity"] = {"entity": value.strip()}
            self.report.add_change("Converted wind_direction_entity to an object with an entity key")


def backup_file(file_path: Path) -> Path | None:
    """Create timestamped backup of file."""
    if not file_path.exists():
        return None

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = file_path.with_suffix(f".{timestamp}.bak")
    shutil.copy2(file_path, backup_path)
    return backup_path
