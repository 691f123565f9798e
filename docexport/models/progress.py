"""Progress state reported by the export orchestrator."""

from dataclasses import dataclass
from enum import Enum


class ExportPhase(str, Enum):
    """Phases of one export run."""

    IDLE = "idle"
    PREPARING = "preparing"
    FETCHING = "fetching"
    PROCESSING = "processing"
    DOWNLOADING = "downloading"
    COMPLETE = "complete"
    ERROR = "error"


ACTIVE_PHASES = frozenset(
    {
        ExportPhase.PREPARING,
        ExportPhase.FETCHING,
        ExportPhase.PROCESSING,
        ExportPhase.DOWNLOADING,
    }
)

TERMINAL_PHASES = frozenset({ExportPhase.COMPLETE, ExportPhase.ERROR})


@dataclass(frozen=True)
class ProgressState:
    """Snapshot of an export's progress.

    Only the orchestrator creates new snapshots; observers receive them
    read-only.
    """

    phase: ExportPhase = ExportPhase.IDLE
    percent: int = 0
    message: str = ""

    @property
    def is_active(self) -> bool:
        return self.phase in ACTIVE_PHASES

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES

    @property
    def tone(self) -> str:
        """Display tone for the status message."""
        if self.phase is ExportPhase.ERROR or "error" in self.message.lower():
            return "critical"
        return "positive"
