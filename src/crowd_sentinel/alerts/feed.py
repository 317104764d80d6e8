"""
Alert Feed
==========

UI-facing list of alerts across analysis cycles.

Rules:
    - A new alert is skipped when an active (not dismissed) alert of the
      same type was created within the dedupe window (default 30 s)
    - Dismissal replaces the alert with a dismissed copy; nothing is
      removed except by clear()
    - Accepted critical alerts are logged at ERROR, warnings at WARNING
"""

import logging
import threading
import time
from typing import Iterable, List, Optional

from crowd_sentinel.models.alert import AlertSeverity, CrowdAlert


logger = logging.getLogger(__name__)


DEFAULT_DEDUPE_SECONDS = 30.0


class AlertFeed:
    """
    Ordered alert list with per-type deduplication and dismissal.

    Example:
        feed = AlertFeed()
        accepted = feed.merge(engine.analyze(snapshot))
        feed.dismiss(accepted[0].id)
        print(len(feed.active()))
    """

    def __init__(self, dedupe_seconds: float = DEFAULT_DEDUPE_SECONDS) -> None:
        if dedupe_seconds < 0:
            raise ValueError("dedupe_seconds must be non-negative")
        self.dedupe_seconds = dedupe_seconds
        self._alerts: List[CrowdAlert] = []
        self._lock = threading.Lock()
        self._suppressed_count: int = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._alerts)

    @property
    def suppressed_count(self) -> int:
        """Alerts skipped as duplicates."""
        return self._suppressed_count

    def merge(
        self,
        new_alerts: Iterable[CrowdAlert],
        now: Optional[float] = None,
    ) -> List[CrowdAlert]:
        """
        Append new alerts, skipping recent duplicates by type.

        Args:
            new_alerts: Alerts from one analysis cycle
            now: Reference time for the dedupe window (defaults to time.time())

        Returns:
            Alerts actually appended
        """
        if now is None:
            now = time.time()
        cutoff = now - self.dedupe_seconds

        with self._lock:
            recent_types = {
                a.type for a in self._alerts
                if a.timestamp > cutoff and not a.dismissed
            }
            accepted = []
            for alert in new_alerts:
                if alert.type in recent_types:
                    self._suppressed_count += 1
                    continue
                accepted.append(alert)
            self._alerts.extend(accepted)

        for alert in accepted:
            if alert.severity == AlertSeverity.CRITICAL:
                logger.error(f"{alert.title}: {alert.message}")
            elif alert.severity == AlertSeverity.WARNING:
                logger.warning(f"{alert.title}: {alert.message}")
        return accepted

    def dismiss(self, alert_id: str) -> bool:
        """
        Mark one alert dismissed.

        Returns:
            False if no alert has this id
        """
        with self._lock:
            for i, alert in enumerate(self._alerts):
                if alert.id == alert_id:
                    self._alerts[i] = alert.dismiss()
                    return True
        return False

    def dismiss_all(self) -> int:
        """
        Mark every alert dismissed.

        Returns:
            Number of alerts that were active
        """
        with self._lock:
            active = sum(1 for a in self._alerts if not a.dismissed)
            self._alerts = [a if a.dismissed else a.dismiss() for a in self._alerts]
        return active

    def get(self, alert_id: str) -> Optional[CrowdAlert]:
        with self._lock:
            return next((a for a in self._alerts if a.id == alert_id), None)

    def all(self) -> List[CrowdAlert]:
        """Every alert, oldest first."""
        with self._lock:
            return list(self._alerts)

    def active(self) -> List[CrowdAlert]:
        """Alerts not yet dismissed, oldest first."""
        with self._lock:
            return [a for a in self._alerts if not a.dismissed]

    def has_active_critical(self) -> bool:
        with self._lock:
            return any(
                a.severity == AlertSeverity.CRITICAL and not a.dismissed
                for a in self._alerts
            )

    def clear(self) -> int:
        """Remove every alert. Returns the number removed."""
        with self._lock:
            cleared = len(self._alerts)
            self._alerts = []
        return cleared
