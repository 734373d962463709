#!/usr/bin/env python3
"""
config.py

Configuration for the Mailchimp subscribe function.

Values are read from the process environment on every invocation so a warm
function container picks up rotated secrets. A local .env file is loaded once
at import for manual runs (see main.py); the real environment always wins.

    MAILCHIMP_API_KEY   required, formatted as <key>-<datacenter>
    MAILCHIMP_DC        optional, only used when the key has no datacenter suffix
    LOG_LEVEL           optional, defaults to INFO
    TEAMS_WEBHOOK_URL   optional, failure alerts are disabled when empty
"""
import os
from typing import List, Optional

from dotenv import load_dotenv

from .errors import ConfigError

load_dotenv()

MAILCHIMP_API_VERSION = "3.0"
SUBSCRIBED_STATUS = "subscribed"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings:
    """Snapshot of the environment taken at the start of an invocation"""

    def __init__(self,
                 mailchimp_api_key: str = "",
                 mailchimp_dc: str = "",
                 log_level: str = "INFO",
                 teams_webhook_url: str = ""):
        self.mailchimp_api_key = mailchimp_api_key
        self.mailchimp_dc = mailchimp_dc
        self.log_level = log_level
        self.teams_webhook_url = teams_webhook_url

    def __repr__(self) -> str:
        # Never print the key itself
        key_state = "set" if self.mailchimp_api_key else "missing"
        return (f"Settings(mailchimp_api_key=<{key_state}>, mailchimp_dc={self.mailchimp_dc!r}, "
                f"log_level={self.log_level!r}, alerts={'on' if self.teams_webhook_url else 'off'})")


def get_mailchimp_datacenter(api_key: str, fallback: str = "") -> str:
    """
    Extract datacenter from Mailchimp API key.

    Mailchimp API keys are formatted as: <key>-<datacenter>
    Falls back to MAILCHIMP_DC when the key has no suffix.
    """
    if api_key and "-" in api_key:
        return api_key.rsplit("-", 1)[-1].strip()
    return fallback.strip()


def load_settings(environ: Optional[dict] = None) -> Settings:
    """Read settings from the environment (os.environ unless given)."""
    env = os.environ if environ is None else environ

    api_key = env.get("MAILCHIMP_API_KEY", "").strip()
    log_level = env.get("LOG_LEVEL", "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        log_level = "INFO"
    return Settings(
        mailchimp_api_key=api_key,
        mailchimp_dc=get_mailchimp_datacenter(api_key, env.get("MAILCHIMP_DC", "")),
        log_level=log_level,
        teams_webhook_url=env.get("TEAMS_WEBHOOK_URL", "").strip(),
    )


def validate_environment(settings: Settings) -> None:
    """Raise ConfigError listing every missing required value."""
    missing: List[str] = []
    if not settings.mailchimp_api_key:
        missing.append("MAILCHIMP_API_KEY")
    elif not settings.mailchimp_dc:
        # Key present but we cannot tell which datacenter to call
        missing.append("MAILCHIMP_DC")
    if missing:
        raise ConfigError(f"Missing required config values: {', '.join(missing)}")
