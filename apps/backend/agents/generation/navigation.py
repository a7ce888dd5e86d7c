"""
Deck navigation state machine.

Holds the current slide index of a deck and moves it with clamped
next/previous and bounds-checked jumps. The index never leaves
[0, slide_count - 1] and there is no terminal state.
"""

from typing import Optional

from models.deck import PresentationDeck, Slide

NEXT_KEYS = frozenset({'ArrowRight', 'Right', 'PageDown', 'n', ' '})
PREVIOUS_KEYS = frozenset({'ArrowLeft', 'Left', 'PageUp', 'p'})


class DeckNavigator:
    """Current-slide cursor over an ordered deck"""

    def __init__(self, slide_count: int):
        if slide_count < 1:
            raise ValueError(f"Cannot navigate a deck with {slide_count} slides")
        self.slide_count = slide_count
        self.current_index = 0

    @classmethod
    def for_deck(cls, deck: PresentationDeck) -> 'DeckNavigator':
        return cls(len(deck.slides))

    @property
    def is_first(self) -> bool:
        return self.current_index == 0

    @property
    def is_last(self) -> bool:
        return self.current_index == self.slide_count - 1

    def next(self) -> int:
        self.current_index = min(self.current_index + 1, self.slide_count - 1)
        return self.current_index

    def previous(self) -> int:
        self.current_index = max(self.current_index - 1, 0)
        return self.current_index

    def jump(self, index: int) -> int:
        """Move to ``index`` if it is a valid position; otherwise stay put."""
        if 0 <= index < self.slide_count:
            self.current_index = index
        return self.current_index

    def handle_key(self, key: str) -> Optional[int]:
        """Keyboard adapter: arrow keys map to next/previous. Unknown keys return None."""
        if key in NEXT_KEYS:
            return self.next()
        if key in PREVIOUS_KEYS:
            return self.previous()
        return None

    def current_slide(self, deck: PresentationDeck) -> Slide:
        return deck.slides[self.current_index]

    def position_label(self) -> str:
        return f"{self.current_index + 1} / {self.slide_count}"
