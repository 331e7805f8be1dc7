# # Cursor

# The marker returned when there are no more characters to read.
END = ""

WHITESPACE = " \t\r\n"


def is_alpha(c: str) -> bool:
    """Is this character a letter that can start an identifier"""
    return "a" <= c <= "z"


def is_digit(c: str) -> bool:
    """Is this character a decimal digit"""
    return "0" <= c <= "9"


class Cursor:
    """A read position over an immutable source string.

    `peek` and `advance` skip whitespace before looking at the next character,
    while the `_raw` variants read the character at the exact position so that
    numbers and identifiers end at the first space."""

    text: str
    index: int

    def __init__(self, text: str):
        self.text = text
        self.index = 0

    @property
    def position(self) -> int:
        """The current offset into the source text."""
        return self.index

    def skip_whitespace(self) -> None:
        while self.index < len(self.text) and self.text[self.index] in WHITESPACE:
            self.index += 1

    def peek(self) -> str:
        """Return the next non-whitespace character without consuming it, or
        `END` if the input is exhausted."""
        self.skip_whitespace()
        return self.peek_raw()

    def advance(self) -> str:
        """Consume and return the next non-whitespace character."""
        self.skip_whitespace()
        return self.advance_raw()

    def peek_raw(self) -> str:
        if self.index >= len(self.text):
            return END
        return self.text[self.index]

    def advance_raw(self) -> str:
        ch = self.peek_raw()
        if ch != END:
            self.index += 1
        return ch

    def at_end(self) -> bool:
        return self.peek() == END

    def __str__(self):
        return "[position={}],[text={}]".format(self.index, self.text)
