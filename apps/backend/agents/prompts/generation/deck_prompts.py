"""
Deck Generation Prompts

This module contains the prompts sent to the chat completion endpoint when
generating a deck, and the helpers that build the per-slide image prompts.
"""

from typing import Dict, List, Optional, Union

from models.requests import DocumentInput

BULLET_MARKER = "•"

DECK_SYSTEM_PROMPT = f"""You are a professional presentation creator specializing in creating engaging, visually appealing presentations. Create a comprehensive presentation following these rules:

1. Content Requirements:
  - Create at least 8-12 slides for comprehensive coverage
  - Each slide must be detailed and informative
  - Include relevant statistics, facts, or data points
  - Add engaging bullet points and key takeaways
  - Suggest relevant image descriptions for each slide

2. Slide Structure:
  - Start with an attention-grabbing title slide
  - Include an agenda/overview slide
  - Main content slides with clear headings
  - End with a strong conclusion/summary slide

3. Format the response as a JSON object with:
  - title: string (make it catchy and professional)
  - slides: array of slides, each with:
    - type: 'title' | 'content' | 'image' | 'bullets' | 'overview' | 'text'
    - title: string (clear and descriptive)
    - content: string (detailed content with bullet points using {BULLET_MARKER} for bullets)
    - imagePrompt?: string (detailed description for slide visual)

4. Visual Guidelines:
  - Each slide should have a suggested image prompt
  - Image prompts should be detailed and specific
  - Ensure visual continuity throughout the presentation

Make the presentation engaging, professional, and visually appealing. Respond with the JSON object only."""

DOCUMENT_PROMPT_PREFIX = "Generate presentation from this document: "


def build_user_prompt(source: Union[str, DocumentInput]) -> str:
    """Turn a text prompt or an uploaded document into the user message."""
    if isinstance(source, DocumentInput):
        return f"{DOCUMENT_PROMPT_PREFIX}{source.content}"
    return source


def build_deck_messages(source: Union[str, DocumentInput]) -> List[Dict[str, str]]:
    return [
        {'role': 'system', 'content': DECK_SYSTEM_PROMPT},
        {'role': 'user', 'content': build_user_prompt(source)},
    ]


def build_image_prompt(title: Optional[str], content: Optional[str], image_prompt: Optional[str] = None) -> str:
    """Prompt for the visual of an image slide; the model's own suggestion wins."""
    if image_prompt and image_prompt.strip():
        return image_prompt.strip()
    return f"Create a professional, modern business presentation visual for: {title or ''}. {content or ''}".strip()


def build_icon_prompt(title: Optional[str]) -> str:
    return f"Minimal flat vector icon representing {title or 'presentation'}, simple shapes, transparent background"
