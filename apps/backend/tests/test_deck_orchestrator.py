import asyncio

import pytest

from agents.generation.deck_orchestrator import DeckOrchestrator
from agents.generation.exceptions import FormatError, MissingConfigError, NetworkError
from agents.generation.progress_manager import DeckGenerationProgress, GenerationPhase
from agents.prompts.generation.deck_prompts import DECK_SYSTEM_PROMPT, DOCUMENT_PROMPT_PREFIX
from models.deck import SlideType
from models.requests import DocumentInput
from fakes import QUARTERLY_REPLY, StubChatService, make_config


def _orchestrator(chat, config=None):
    return DeckOrchestrator(config=config or make_config(), chat_service=chat)


def test_quarterly_sales_results_end_to_end():
    chat = StubChatService(reply=QUARTERLY_REPLY)
    statuses = []

    deck = asyncio.run(_orchestrator(chat).generate("quarterly sales results", on_progress=statuses.append))

    assert deck.title == "Quarterly Sales Results"
    assert deck.id
    assert [s.id for s in deck.slides] == [f"slide-{i}" for i in range(5)]
    assert [s.type for s in deck.slides] == [
        SlideType.TITLE, SlideType.OVERVIEW, SlideType.BULLETS, SlideType.IMAGE, SlideType.CONTENT,
    ]
    assert deck.slides[2].bullets == ["Revenue up 12%", "EMEA grew fastest", "Churn down to 3%"]
    assert deck.slides[3].imageUrl.split("?")[0].endswith("bar%20chart%20of%20regional%20sales%20growth")
    assert [bool(s.iconUrl) for s in deck.slides] == [True, False, False, True, True]
    assert all(s.html and s.css for s in deck.slides)
    assert deck.theme.primary == "#9333EA"

    assert statuses == [
        "Generating presentation structure...",
        "Generating visuals...",
        "Finalizing presentation...",
        "Presentation ready",
    ]

    messages = chat.calls[0]['messages']
    assert messages[0] == {'role': 'system', 'content': DECK_SYSTEM_PROMPT}
    assert messages[1] == {'role': 'user', 'content': "quarterly sales results"}
    assert chat.calls[0]['stream'] is False


def test_each_run_gets_a_new_deck_id():
    orchestrator = _orchestrator(StubChatService(reply=QUARTERLY_REPLY))

    first = asyncio.run(orchestrator.generate("quarterly sales results"))
    second = asyncio.run(orchestrator.generate("quarterly sales results"))

    assert first.id != second.id


def test_document_input_is_wrapped():
    chat = StubChatService(reply=QUARTERLY_REPLY)
    document = DocumentInput(content="Revenue grew 12% in Q3.", type="text/plain", name="q3.txt")

    asyncio.run(_orchestrator(chat).generate(document))

    assert chat.calls[0]['messages'][1]['content'] == DOCUMENT_PROMPT_PREFIX + "Revenue grew 12% in Q3."


def test_missing_configuration_fails_before_the_chat_call():
    chat = StubChatService(reply=QUARTERLY_REPLY)
    statuses = []

    with pytest.raises(MissingConfigError):
        asyncio.run(_orchestrator(chat, make_config(api_key=None)).generate("anything", on_progress=statuses.append))

    assert chat.calls == []
    assert statuses[-1] == "Error: API key not configured"


def test_empty_prompt_is_rejected():
    with pytest.raises(ValueError):
        asyncio.run(_orchestrator(StubChatService(reply=QUARTERLY_REPLY)).generate("   "))


@pytest.mark.parametrize("chat,error_type", [
    (StubChatService(error=NetworkError("Failed after 3 attempts. Last error: boom")), NetworkError),
    (StubChatService(reply="I cannot help with that."), FormatError),
    (StubChatService(reply='{"title": "T", "slides": [{"type": "bullets", "title": "x"}]}'), FormatError),
])
def test_failures_propagate_without_partial_deck(chat, error_type):
    progress = DeckGenerationProgress()

    with pytest.raises(error_type) as exc_info:
        asyncio.run(_orchestrator(chat).generate("quarterly sales results", progress=progress))

    assert progress.current_phase == GenerationPhase.FAILED
    assert progress.status == f"Error: {exc_info.value.message}"
