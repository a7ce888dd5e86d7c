"""
Presentation endpoints: generate a deck from a prompt or document, and
download a deck as JSON.
"""

from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from agents.generation.deck_orchestrator import DeckOrchestrator
from agents.generation.exceptions import GenerationError
from agents.generation.progress_manager import DeckGenerationProgress
from api.middleware import generation_error_response
from models.deck import PresentationDeck
from models.requests import ErrorResponse, GeneratePresentationRequest, GeneratePresentationResponse
from setup_logging_optimized import get_logger
from utils.json_safe import export_deck_json, export_filename

router = APIRouter(prefix="/api/presentations", tags=["presentations"])

logger = get_logger(__name__)


def get_orchestrator() -> DeckOrchestrator:
    return DeckOrchestrator()


def _content_disposition(filename: str) -> str:
    try:
        filename.encode('latin-1')
        return f'attachment; filename="{filename}"'
    except UnicodeEncodeError:
        return f"attachment; filename*=UTF-8''{quote(filename)}"


@router.post(
    "",
    response_model=GeneratePresentationResponse,
    responses={status: {"model": ErrorResponse} for status in (500, 502, 504)},
)
async def create_presentation(
    request: GeneratePresentationRequest,
    orchestrator: DeckOrchestrator = Depends(get_orchestrator),
):
    """Generate a full deck. An uploaded document takes precedence over the prompt."""
    progress = DeckGenerationProgress()
    has_document = bool(request.document and request.document.content.strip())
    source = request.document if has_document else request.prompt

    try:
        deck = await orchestrator.generate(source, progress=progress)
    except GenerationError as e:
        return generation_error_response(e, status=progress.status)

    return GeneratePresentationResponse(deck=deck, status=progress.status, progress=progress.history)


@router.post("/export")
async def export_presentation(deck: PresentationDeck):
    filename = export_filename(deck)
    logger.info(f"Exporting deck {deck.id} as {filename}")
    return Response(
        content=export_deck_json(deck),
        media_type="application/json",
        headers={"Content-Disposition": _content_disposition(filename)},
    )
