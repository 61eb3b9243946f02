import logging
from typing import Protocol

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Messenger(Protocol):
    def send(self, recipient: str, report: BaseModel, public: bool = False) -> None:
        """Deliver a structured report. Rendering is entirely up to the implementation."""
        ...


class RecordingMessenger:
    """Keeps every delivered report in order"""

    def __init__(self):
        self.sent: list[tuple[str, BaseModel, bool]] = []

    def send(self, recipient: str, report: BaseModel, public: bool = False) -> None:
        logger.debug("-> %s: %s", recipient, report.kind if hasattr(report, "kind") else type(report).__name__)
        self.sent.append((recipient, report, public))

    def reports_for(self, recipient: str) -> list[BaseModel]:
        return [report for to, report, _ in self.sent if to == recipient]

    def kinds_for(self, recipient: str) -> list[str]:
        return [getattr(report, "kind", "") for report in self.reports_for(recipient)]

    def clear(self) -> None:
        self.sent.clear()
