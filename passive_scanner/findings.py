"""
Finding model and the deduplicated findings store.

A finding is identified by (url, title, category). The same issue retriggered
by repeated traffic is stored and announced only once per session.
"""
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Tuple

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

CATEGORY_HEADERS = "Headers"
CATEGORY_LIBRARIES = "Libraries"
CATEGORY_CODE_QUALITY = "Code Quality"
CATEGORY_CREDENTIALS = "Credentials"


class Severity(Enum):
    """Finding severity, ordered HIGH > MEDIUM > LOW > INFO."""

    HIGH = ("High", "#FF4444", 3)
    MEDIUM = ("Medium", "#FFA500", 2)
    LOW = ("Low", "#FFD700", 1)
    INFO = ("Info", "#4169E1", 0)

    def __init__(self, label, color, rank):
        self.label = label
        self.color = color
        self.rank = rank

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def from_label(cls, text: str) -> "Severity":
        """
        Parse a severity from its name or label, case-insensitively.

        Raises:
            ValidationError: If the text names no severity
        """
        value = str(text or "").strip().upper()
        for member in cls:
            if member.name == value:
                return member
        raise ValidationError(
            f"Unknown severity '{text}' (expected one of: "
            f"{', '.join(m.name.lower() for m in cls)})"
        )


@dataclass(frozen=True)
class Finding:
    """
    A single reported security observation.

    Equality and hashing only consider url, title and category, so
    evidence and capture time never split one issue into two.
    """

    url: str
    title: str
    description: str = field(compare=False)
    severity: Severity = field(compare=False)
    evidence: str = field(compare=False)
    category: str
    found_at: datetime = field(default_factory=datetime.now, compare=False)

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.url, self.title, self.category)

    def formatted_time(self) -> str:
        return self.found_at.strftime("%Y-%m-%d %H:%M:%S")

    def to_dict(self) -> Dict[str, str]:
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "severity": self.severity.name,
            "evidence": self.evidence,
            "category": self.category,
            "found_at": self.found_at.isoformat(),
        }

    def __str__(self):
        return f"[{self.severity.label}] {self.title} - {self.url}"


Listener = Callable[[Finding], None]


class FindingsStore:
    """
    Thread-safe, deduplicated collection of findings with change notification.

    Scan workers call add() concurrently. Insertion is a check-and-set under
    a single lock, so exactly one caller wins per identity key. Listeners run
    synchronously on the winning caller's thread, outside the lock. A listener
    that raises is logged and does not stop the others.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._findings: Dict[Tuple[str, str, str], Finding] = {}
        self._listeners: List[Listener] = []

    def add(self, finding: Finding) -> bool:
        """
        Insert a finding unless one with the same identity is already stored.

        Args:
            finding: Finding produced by a rule engine

        Returns:
            bool: True if the finding was newly inserted
        """
        with self._lock:
            if finding.key in self._findings:
                return False
            self._findings[finding.key] = finding
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(finding)
            except Exception:
                logger.exception("Listener failed for finding: %s", finding)
        return True

    def add_listener(self, callback: Listener) -> None:
        """Register a callback invoked for every future successful insert."""
        with self._lock:
            self._listeners.append(callback)

    def all(self) -> List[Finding]:
        with self._lock:
            return list(self._findings.values())

    def by_severity(self, severity: Severity) -> List[Finding]:
        return [f for f in self.all() if f.severity == severity]

    def counts_by_category(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for finding in self.all():
            counts[finding.category] = counts.get(finding.category, 0) + 1
        return counts

    def counts_by_severity(self) -> Dict[Severity, int]:
        counts = {severity: 0 for severity in Severity}
        for finding in self.all():
            counts[finding.severity] += 1
        return counts

    def clear(self) -> None:
        """Drop every stored finding. Listeners are not notified."""
        with self._lock:
            self._findings.clear()

    def count(self) -> int:
        with self._lock:
            return len(self._findings)

    def __len__(self):
        return self.count()
