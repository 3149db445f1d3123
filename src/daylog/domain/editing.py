"""Cursor-aware text buffer used while composing an entry."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_CURSOR_MARKER = "█"


class EditField(Enum):
    """Which of the three entry buffers receives input."""

    CONTENT = "content"
    WEIGHT = "weight"
    WAIST = "waist"

    def next(self) -> "EditField":
        """Return the next field in the content, weight, waist cycle."""
        order = list(EditField)
        return order[(order.index(self) + 1) % len(order)]

    @property
    def is_numeric(self) -> bool:
        return self is not EditField.CONTENT


@dataclass
class EditBuffer:
    """Text split at the cursor.

    The logical text is ``before_cursor + after_cursor`` and the cursor sits at
    ``len(before_cursor)``. Every operation is total: out-of-range requests are
    no-ops or clamped.
    """

    before_cursor: str = ""
    after_cursor: str = ""

    @classmethod
    def create_empty(cls) -> "EditBuffer":
        return cls()

    @classmethod
    def create_from(cls, text: str, cursor_index: int = 0) -> "EditBuffer":
        """Hydrate a buffer from existing text.

        A ``cursor_index`` of 0 resumes editing at the end of the text, as does
        any index past the end or below zero.
        """
        if cursor_index <= 0 or cursor_index >= len(text):
            return cls(before_cursor=text)
        return cls(before_cursor=text[:cursor_index], after_cursor=text[cursor_index:])

    @property
    def cursor(self) -> int:
        return len(self.before_cursor)

    def __len__(self) -> int:
        return len(self.before_cursor) + len(self.after_cursor)

    def insert_char(self, char: str) -> None:
        self.before_cursor += char

    def delete_before(self) -> None:
        if self.before_cursor:
            self.before_cursor = self.before_cursor[:-1]

    def move_cursor_forward(self) -> None:
        if self.after_cursor:
            self.before_cursor += self.after_cursor[0]
            self.after_cursor = self.after_cursor[1:]

    def move_cursor_backward(self) -> None:
        if self.before_cursor:
            self.after_cursor = self.before_cursor[-1] + self.after_cursor
            self.before_cursor = self.before_cursor[:-1]

    def to_text(self) -> str:
        """Return the committed value."""
        return self.before_cursor + self.after_cursor

    def to_display_text(self, marker: str = DEFAULT_CURSOR_MARKER) -> str:
        """Return the text with ``marker`` drawn over the character under the cursor."""
        return self.before_cursor + marker + self.after_cursor[1:]
