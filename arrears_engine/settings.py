"""
Configuration for the Arrears Engine

Values come from environment variables with production defaults.
"""

import os
from dataclasses import dataclass, field


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {value!r}") from None


@dataclass
class NotificationSettings:
    """When reminders and charges become due."""

    reminder_days_before: int = 3
    charge_days_after: int = 1

    @classmethod
    def from_env(cls) -> "NotificationSettings":
        return cls(
            reminder_days_before=_env_int("REMINDER_DAYS_BEFORE", 3),
            charge_days_after=_env_int("CHARGE_DAYS_AFTER", 1),
        )


@dataclass
class AppSettings:
    """Entry-point configuration."""

    environment: str = "dev"
    port: int = 8080
    notifications: NotificationSettings = field(default_factory=NotificationSettings)

    @classmethod
    def from_env(cls) -> "AppSettings":
        return cls(
            environment=os.environ.get("ENVIRONMENT", "dev"),
            port=_env_int("PORT", 8080),
            notifications=NotificationSettings.from_env(),
        )
