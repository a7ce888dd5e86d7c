"""
Deck orchestrator.

Runs one generation request end to end:
- Ask the chat completion endpoint for the deck structure
- Parse and validate the reply
- Enrich all slides concurrently (theme, image references, markup)
- Assemble the deck

Either the whole deck is produced or a GenerationError propagates; there
are no partial decks.
"""

import uuid
from typing import Callable, Optional, Union

from agents import config as global_config
from agents.generation.config import GeneratorConfig, get_config
from agents.generation.exceptions import GenerationError
from agents.generation.progress_manager import DeckGenerationProgress, GenerationPhase
from agents.generation.response_parser import parse
from agents.generation.slide_enricher import enrich_all
from agents.prompts.generation.deck_prompts import build_deck_messages
from models.deck import PresentationDeck
from models.requests import DocumentInput
from services.chat_completion_service import ChatCompletionService
from services.image_service import ImageService
from setup_logging_optimized import deck_id_var, get_logger

logger = get_logger(__name__)


class DeckOrchestrator:
    """
    Orchestrates deck generation.

    Collaborators are injectable so the pipeline can run against stubs.
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        chat_service: Optional[ChatCompletionService] = None,
        image_service: Optional[ImageService] = None,
    ):
        self.config = config or get_config()
        self.chat_service = chat_service or ChatCompletionService(self.config.ai)
        self.image_service = image_service or ImageService(self.config.media)

    async def generate(
        self,
        source: Union[str, DocumentInput],
        on_progress: Optional[Callable[[str], None]] = None,
        progress: Optional[DeckGenerationProgress] = None,
    ) -> PresentationDeck:
        """
        Generate a deck from a prompt or an uploaded document.

        Args:
            source: Prompt text or document
            on_progress: Receives advisory status strings
            progress: Tracker to record into (created when omitted)

        Raises:
            ConfigurationError, NetworkError, UpstreamError, FormatError
        """
        if isinstance(source, str) and not source.strip():
            raise ValueError("A prompt or document is required")

        progress = progress or DeckGenerationProgress(on_progress)
        deck_id = uuid.uuid4().hex
        token = deck_id_var.set(deck_id)

        try:
            self.config.validate()
            kind = 'document' if isinstance(source, DocumentInput) else 'text prompt'
            logger.info(f"Generating deck from {kind}")

            progress.start_phase(GenerationPhase.STRUCTURE)
            raw_text = await self.chat_service.complete(
                build_deck_messages(source),
                top_p=global_config.DECK_TOP_P,
                stream=False,
            )
            raw_deck = parse(raw_text)
            logger.info(f"Parsed deck '{raw_deck.title}' with {len(raw_deck.slides)} slides")

            progress.start_phase(GenerationPhase.VISUALS)
            slides = await enrich_all(raw_deck, self.image_service)

            progress.start_phase(GenerationPhase.FINALIZATION)
            deck = PresentationDeck(id=deck_id, title=raw_deck.title, slides=slides)
            progress.complete(deck.id)
            return deck
        except GenerationError as e:
            logger.error(f"Deck generation failed: {e.message}")
            progress.error(e.message)
            raise
        finally:
            deck_id_var.reset(token)


async def generate_presentation(
    source: Union[str, DocumentInput],
    on_progress: Optional[Callable[[str], None]] = None,
    config: Optional[GeneratorConfig] = None,
) -> PresentationDeck:
    """Convenience entry point using the environment configuration."""
    return await DeckOrchestrator(config=config).generate(source, on_progress=on_progress)
