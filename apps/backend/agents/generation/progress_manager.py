"""
Progress tracking for deck generation.

The phases are advisory: they exist to show the user what the pipeline is
waiting on, nothing enforces their order.
"""

from typing import Any, Callable, Dict, List, Optional
from datetime import datetime
from enum import Enum

from setup_logging_optimized import get_logger

logger = get_logger(__name__)


class GenerationPhase(Enum):
    """Standardized phase names for deck generation."""
    STRUCTURE = "structure"
    VISUALS = "visuals"
    FINALIZATION = "finalization"
    COMPLETE = "generation_complete"
    FAILED = "failed"


PHASE_MESSAGES = {
    GenerationPhase.STRUCTURE: "Generating presentation structure...",
    GenerationPhase.VISUALS: "Generating visuals...",
    GenerationPhase.FINALIZATION: "Finalizing presentation...",
    GenerationPhase.COMPLETE: "Presentation ready",
}

# Phase progress (percent at phase start)
PHASE_PROGRESS = {
    GenerationPhase.STRUCTURE: 0,
    GenerationPhase.VISUALS: 60,
    GenerationPhase.FINALIZATION: 90,
    GenerationPhase.COMPLETE: 100,
}


class DeckGenerationProgress:
    """
    Records the phases of one generation run and forwards each status
    string to an optional callback (a UI status line, a log, a stream).
    """

    def __init__(self, on_progress: Optional[Callable[[str], None]] = None):
        self.on_progress = on_progress
        self.current_phase: Optional[GenerationPhase] = None
        self.progress = 0
        self.history: List[str] = []
        self.started_at = datetime.now()

    def start_phase(self, phase: GenerationPhase) -> Dict[str, Any]:
        self.current_phase = phase
        self.progress = PHASE_PROGRESS.get(phase, self.progress)
        return self._emit(PHASE_MESSAGES[phase])

    def complete(self, deck_id: str) -> Dict[str, Any]:
        event = self.start_phase(GenerationPhase.COMPLETE)
        event['data']['deckId'] = deck_id
        elapsed = (datetime.now() - self.started_at).total_seconds()
        logger.info(f"Deck {deck_id} generated in {elapsed:.1f}s")
        return event

    def error(self, error_message: str) -> Dict[str, Any]:
        """Record a failure; the status line becomes the error text."""
        failed_in = self.current_phase.value if self.current_phase else None
        self.current_phase = GenerationPhase.FAILED
        event = self._emit(f"Error: {error_message}")
        event['type'] = 'error'
        event['data']['failedPhase'] = failed_in
        return event

    @property
    def status(self) -> str:
        return self.history[-1] if self.history else ""

    def _emit(self, message: str) -> Dict[str, Any]:
        self.history.append(message)
        if self.on_progress:
            self.on_progress(message)
        return {
            'type': 'progress',
            'data': {
                'phase': self.current_phase.value if self.current_phase else None,
                'progress': self.progress,
                'message': message,
                'timestamp': datetime.now().isoformat(),
            },
        }
