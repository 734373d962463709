#!/usr/bin/env python3
"""
notifications.py

Teams alerts for failed subscribe invocations.
Issues are tracked during an invocation and sent as a single MessageCard at
the end of it. Sending never raises; if the webhook is unavailable a summary
is printed to the console (captured by the function's log stream).
"""

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

# Alerts are sent before the response is returned
WEBHOOK_TIMEOUT = 5


class NotificationLevel(Enum):
    """Notification severity levels"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class TeamsNotifier:
    """Collects warnings/errors for one invocation and posts them to Teams"""

    def __init__(self, webhook_url: str, fallback_to_console: bool = True):
        self.webhook_url = webhook_url
        self.fallback_to_console = fallback_to_console
        self.session_warnings: List[Dict] = []
        self.session_errors: List[Dict] = []

    def _track(self, bucket: List[Dict], message: str, details: Optional[Dict]):
        bucket.append({
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "message": message,
            "details": details or {}
        })

    def add_warning(self, message: str, details: Optional[Dict] = None):
        """Track a warning-level issue"""
        self._track(self.session_warnings, message, details)
        logger.warning(f"📨 NOTIFICATION TRACKED: {message}")

    def add_error(self, message: str, details: Optional[Dict] = None):
        """Track an error-level issue"""
        self._track(self.session_errors, message, details)
        logger.error(f"📨 NOTIFICATION TRACKED: {message}")

    def should_send_notification(self) -> bool:
        return bool(self.session_warnings or self.session_errors)

    def get_notification_level(self) -> NotificationLevel:
        if self.session_errors:
            return NotificationLevel.ERROR
        if self.session_warnings:
            return NotificationLevel.WARNING
        return NotificationLevel.INFO

    def _format_issues(self, issues: List[Dict]) -> str:
        text = ""
        for i, issue in enumerate(issues[-5:], 1):  # Show last 5
            text += f"**{i}.** {issue['message']}\n"
            if issue["details"]:
                text += f"   *Details:* {json.dumps(issue['details'], indent=2)}\n"
            text += f"   *Time:* {issue['timestamp']}\n\n"
        return text[:1000] + ("..." if len(text) > 1000 else "")

    def build_card(self, title: str) -> Dict:
        """Build the Teams MessageCard for the tracked issues"""
        level = self.get_notification_level()
        sections = [{
            "activityTitle": title,
            "facts": [
                {"name": "Timestamp", "value": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")},
                {"name": "Severity", "value": level.value.upper()},
                {"name": "Errors", "value": str(len(self.session_errors))},
                {"name": "Warnings", "value": str(len(self.session_warnings))}
            ]
        }]
        if self.session_errors:
            sections.append({"activityTitle": "❌ Errors",
                             "text": self._format_issues(self.session_errors)})
        if self.session_warnings:
            sections.append({"activityTitle": "⚠️ Warnings",
                             "text": self._format_issues(self.session_warnings)})
        return {
            "@type": "MessageCard",
            "@context": "http://schema.org/extensions",
            "themeColor": self._get_theme_color(level),
            "summary": title,
            "sections": sections
        }

    def send_notification(self, title: str = "Mailchimp Subscribe Alert", force_send: bool = False) -> bool:
        """Send Teams notification with collected issues"""
        if not force_send and not self.should_send_notification():
            logger.debug("No issues to report - skipping notification")
            return True

        level = self.get_notification_level()
        try:
            response = requests.post(
                self.webhook_url,
                headers={"Content-Type": "application/json"},
                json=self.build_card(title),
                timeout=WEBHOOK_TIMEOUT
            )
            if response.status_code in [200, 202]:  # Teams often returns 202 (Accepted)
                logger.info(f"✅ Teams notification sent successfully ({level.value.upper()})")
                return True
            logger.error(f"❌ Teams notification failed: {response.status_code} - {response.text}")
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Error sending Teams notification: {e}")

        if self.fallback_to_console:
            self._fallback_to_console(title, level)
        return False

    def _fallback_to_console(self, title: str, level: NotificationLevel):
        """Fallback to console output when Teams webhook is unavailable"""
        print(f"\n{'='*60}")
        print(f"📨 NOTIFICATION FALLBACK - {level.value.upper()}")
        print(f"📋 {title}")
        print(f"{'='*60}")
        if self.session_errors:
            print(f"\n❌ ERRORS ({len(self.session_errors)}):")
            for i, error in enumerate(self.session_errors[-5:], 1):
                print(f"   {i}. {error['message']}")
                if error.get("details"):
                    print(f"      Details: {error['details']}")
        if self.session_warnings:
            print(f"\n⚠️  WARNINGS ({len(self.session_warnings)}):")
            for i, warning in enumerate(self.session_warnings[-3:], 1):
                print(f"   {i}. {warning['message']}")
        print(f"{'='*60}\n")

    def _get_theme_color(self, level: NotificationLevel) -> str:
        """Get Teams card color based on severity"""
        colors = {
            NotificationLevel.INFO: "28a745",      # Green
            NotificationLevel.WARNING: "ffc107",   # Yellow
            NotificationLevel.ERROR: "dc3545",     # Red
        }
        return colors.get(level, "17a2b8")

    def clear_session(self):
        self.session_warnings = []
        self.session_errors = []


# Global notifier, one per warm container
_notifier: Optional[TeamsNotifier] = None


def initialize_notifier(webhook_url: str) -> TeamsNotifier:
    """Create (or replace) the global notifier for the given webhook"""
    global _notifier
    if _notifier is None or _notifier.webhook_url != webhook_url:
        _notifier = TeamsNotifier(webhook_url)
    return _notifier


def get_notifier() -> Optional[TeamsNotifier]:
    return _notifier


def disable_notifier():
    global _notifier
    _notifier = None


def notify_error(message: str, details: Optional[Dict] = None):
    if _notifier:
        _notifier.add_error(message, details)
    else:
        logger.error(message)


def send_final_notification(title: str = "Mailchimp Subscribe Alert") -> bool:
    """Send whatever was tracked this invocation and reset the session"""
    if not _notifier:
        return True
    try:
        return _notifier.send_notification(title)
    finally:
        _notifier.clear_session()
