"""Configuration management for DeskHive."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DESKHIVE_HOME = Path(os.environ.get("DESKHIVE_HOME", Path.home() / "deskhive"))
CONFIG_FILE = DESKHIVE_HOME / "config" / "deskhive.conf"
DATA_DIR = DESKHIVE_HOME / "data"


@dataclass
class Config:
    """DeskHive configuration."""

    data_file: str = ""
    locale: str = "en"
    default_group_name: str = "Default"
    # Timeline view sorts by deadline first, else by creation time
    timeline_deadline_priority: bool = True
    # Deadline reminders
    enable_deadline_notification: bool = False
    notification_minutes_before: int = 30
    reminder_interval_seconds: int = 60

    @property
    def data_path(self) -> Path:
        """Resolved path of the todo data file."""
        if self.data_file:
            return Path(self.data_file).expanduser()
        return DATA_DIR / "todo_list.json"


def _parse_bool(value: str) -> bool | None:
    lowered = value.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return None


def _parse_positive_int(key: str, value: str, default: int) -> int:
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Invalid {key.upper()} value {value!r}, using {default}")
        return default
    if parsed <= 0:
        logger.warning(f"{key.upper()} must be positive, using {default}")
        return default
    return parsed


def _strip_value(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from deskhive.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        match key:
            case "data_file":
                config.data_file = value
            case "locale":
                if value in ("en", "zh"):
                    config.locale = value
                else:
                    logger.warning(f"Unsupported LOCALE {value!r}, using {config.locale}")
            case "default_group_name":
                if value:
                    config.default_group_name = value
            case "enable_deadline_notification":
                enabled = _parse_bool(value)
                if enabled is None:
                    logger.warning(f"Invalid ENABLE_DEADLINE_NOTIFICATION value {value!r}")
                else:
                    config.enable_deadline_notification = enabled
            case "timeline_deadline_priority":
                deadline_first = _parse_bool(value)
                if deadline_first is None:
                    logger.warning(f"Invalid TIMELINE_DEADLINE_PRIORITY value {value!r}")
                else:
                    config.timeline_deadline_priority = deadline_first
            case "notification_minutes_before":
                config.notification_minutes_before = _parse_positive_int(
                    key, value, config.notification_minutes_before
                )
            case "reminder_interval_seconds":
                config.reminder_interval_seconds = _parse_positive_int(
                    key, value, config.reminder_interval_seconds
                )

    return config
