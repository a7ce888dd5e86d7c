import os
import sys
import asyncio
import argparse
from html import escape
from pathlib import Path

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from agents.generation.deck_orchestrator import generate_presentation
from agents.generation.exceptions import GenerationError
from agents.generation.navigation import DeckNavigator
from models.deck import PresentationDeck, Slide
from models.requests import DocumentInput
from setup_logging_optimized import setup_logging, get_logger
from utils.json_safe import export_deck_json, export_filename

logger = get_logger(__name__)


def slide_page(deck: PresentationDeck, slide: Slide) -> str:
    return (
        "<!DOCTYPE html>\n"
        f"<html><head><meta charset=\"utf-8\"><title>{escape(deck.title)}</title>\n"
        f"<style>{slide.css}</style></head>\n"
        f"<body>{slide.html}</body></html>\n"
    )


def write_outputs(deck: PresentationDeck, out_dir: Path) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    export_path = out_dir / export_filename(deck)
    export_path.write_text(export_deck_json(deck), encoding="utf-8")
    for idx, slide in enumerate(deck.slides):
        (out_dir / f"slide_{idx + 1:02d}.html").write_text(slide_page(deck, slide), encoding="utf-8")
    return export_path


def browse(deck: PresentationDeck) -> None:
    """Step through slide titles: n/p or arrow names to move, a number to jump, q to quit."""
    navigator = DeckNavigator.for_deck(deck)
    while True:
        slide = navigator.current_slide(deck)
        print(f"[{navigator.position_label()}] ({slide.type.value}) {slide.title}")
        key = input("> ").strip()
        if key == "q":
            return
        if key.isdigit():
            navigator.jump(int(key) - 1)
        elif navigator.handle_key(key or "n") is None:
            print(f"Unknown key: {key}")


def main():
    parser = argparse.ArgumentParser(description="Generate a presentation deck from a prompt or a text document")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("prompt", nargs="?", help="Prompt describing the presentation")
    source.add_argument("--file", help="Path to a text document to build the deck from")
    parser.add_argument("--out", default="./deck_out", help="Output directory")
    parser.add_argument("--browse", action="store_true", help="Step through the slides after generation")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
    args = parser.parse_args()

    setup_logging(args.log_level)

    if args.file:
        path = Path(args.file)
        request = DocumentInput(content=path.read_text(encoding="utf-8"), name=path.name, type="text/plain")
    else:
        request = args.prompt

    try:
        deck = asyncio.run(generate_presentation(request, on_progress=print))
    except GenerationError as e:
        logger.error(f"Generation failed: {e}")
        sys.exit(1)

    export_path = write_outputs(deck, Path(args.out).resolve())
    print(f"Wrote {len(deck.slides)} slides and {export_path}")

    if args.browse:
        browse(deck)


if __name__ == "__main__":
    main()
