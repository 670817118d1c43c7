from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .models import SignalReport

logger = logging.getLogger(__name__)

STRONG_ENTRY_MIN_SIGNALS = 3
STRONG_ENTRY_MIN_SCORE = 75
EXIT_MAX_SCORE = 40


@dataclass(frozen=True)
class Alert:
    kind: str            # "entry" | "exit"
    ticker: str
    message: str
    signals: List[str]
    ts: float

    def as_dict(self) -> Dict[str, object]:
        return {
            "type": self.kind,
            "ticker": self.ticker,
            "message": self.message,
            "signals": list(self.signals),
            "timestamp": datetime.fromtimestamp(self.ts, tz=timezone.utc).isoformat(),
        }


@dataclass
class AlertBook:
    """Strong-entry / exit alerts for top opportunities with a per-(ticker, kind) cooldown."""

    cooldown_sec: float = 30.0
    max_alerts: int = 20
    alerts: List[Alert] = field(default_factory=list)
    last_alert_ts: Dict[str, float] = field(default_factory=dict)

    def should_alert(self, key: str, now: float) -> bool:
        last = self.last_alert_ts.get(key)
        if last is None:
            return True
        return (now - last) >= self.cooldown_sec

    def mark_alert(self, key: str, now: float) -> None:
        self.last_alert_ts[key] = now

    def _push(self, alert: Alert) -> None:
        self.alerts.insert(0, alert)
        del self.alerts[self.max_alerts:]
        logger.info("[alert] %s", alert.message)

    def evaluate(self, ticker: str, report: SignalReport, now: Optional[float] = None) -> List[Alert]:
        """Record and return the alerts `report` triggers for `ticker`."""
        now = time.time() if now is None else float(now)
        fired: List[Alert] = []

        if len(report.entry) >= STRONG_ENTRY_MIN_SIGNALS and report.score >= STRONG_ENTRY_MIN_SCORE:
            key = f"{ticker}:entry"
            if self.should_alert(key, now):
                fired.append(Alert("entry", ticker, f"STRONG OPPORTUNITY: {ticker} - score {report.score}/100", list(report.entry), now))
                self.mark_alert(key, now)

        if report.exit and report.score < EXIT_MAX_SCORE:
            key = f"{ticker}:exit"
            if self.should_alert(key, now):
                fired.append(Alert("exit", ticker, f"SELL ALERT: {ticker} - score {report.score}/100", list(report.exit), now))
                self.mark_alert(key, now)

        for alert in fired:
            self._push(alert)
        return fired
