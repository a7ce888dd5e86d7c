"""
AI proxy endpoint.

Forwards a message list (or a bare prompt) to the chat completion endpoint
with the server-side credentials and returns the upstream JSON untouched.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from agents import config as global_config
from agents.generation.exceptions import GenerationError, UpstreamError
from api.middleware import generation_error_response, unexpected_error_response
from models.requests import AIProxyRequest, ErrorResponse
from services.chat_completion_service import ChatCompletionService
router = APIRouter(prefix="/api", tags=["ai"])


def get_chat_service() -> ChatCompletionService:
    return ChatCompletionService()


async def process_ai_proxy(request: AIProxyRequest, chat_service: ChatCompletionService) -> JSONResponse:
    response = await chat_service.create(
        request.to_messages(),
        temperature=global_config.PROXY_TEMPERATURE,
        max_tokens=global_config.PROXY_MAX_TOKENS,
        top_p=global_config.DECK_TOP_P,
        stream=False,
    )
    if not response.ok:
        raise UpstreamError(response.status, response.text, message=f"API error: {response.text}")
    return JSONResponse(status_code=response.status, content=response.json())


@router.post("/ai", responses={500: {"model": ErrorResponse}})
async def ai_proxy(
    request: AIProxyRequest,
    chat_service: ChatCompletionService = Depends(get_chat_service),
):
    try:
        return await process_ai_proxy(request, chat_service)
    except GenerationError as e:
        return generation_error_response(e)
    except Exception as e:
        return unexpected_error_response(e)
