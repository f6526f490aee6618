"""Style options shared by rule parameters."""

from enum import Enum


class CodeBlockStyle(str, Enum):
    CONSISTENT = "consistent"
    FENCED = "fenced"
    INDENTED = "indented"

    @property
    def description(self) -> str:
        return self.name.capitalize()


class UnorderedListStyle(str, Enum):
    CONSISTENT = "consistent"
    ASTERISK = "asterisk"
    PLUS = "plus"
    DASH = "dash"

    @property
    def symbol(self) -> str | None:
        return _SYMBOLS.get(self)

    @property
    def description(self) -> str:
        if self is UnorderedListStyle.CONSISTENT:
            return "Consistent"
        return f"{self.name.capitalize()} '{self.symbol}'"

    @classmethod
    def from_marker(cls, marker: str) -> "UnorderedListStyle":
        for style, symbol in _SYMBOLS.items():
            if symbol == marker:
                return style
        raise ValueError(f"Not an unordered list marker: {marker!r}")


_SYMBOLS = {
    UnorderedListStyle.ASTERISK: "*",
    UnorderedListStyle.PLUS: "+",
    UnorderedListStyle.DASH: "-",
}
