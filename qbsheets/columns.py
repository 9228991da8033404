"""Spreadsheet column addresses from A to ZZ."""

from dataclasses import dataclass

STARTING_COLUMN = 'A'
ALPHABET_LENGTH = 26
MAXIMUM_COLUMN_NUMBER = ALPHABET_LENGTH * ALPHABET_LENGTH + ALPHABET_LENGTH


@dataclass(frozen=True, order=True)
class ColumnAddress:
    """
    A spreadsheet column from A to ZZ.

    Stored as a 0-based index. The column number seen by callers is 1-based,
    so column A is number 1 and column ZZ is number 702.

    Example:
        ColumnAddress(3)                  # C
        ColumnAddress.from_letter('C')    # C
        ColumnAddress(26).add(1)          # AA
    """

    index: int

    def __init__(self, number: int):
        if number < 1:
            raise ValueError(f'Column number must be >= 1, got {number}')
        if number > MAXIMUM_COLUMN_NUMBER:
            raise ValueError(f'Column number must be <= {MAXIMUM_COLUMN_NUMBER}, got {number}')

        object.__setattr__(self, 'index', number - 1)

    @classmethod
    def from_letter(cls, letter: str) -> 'ColumnAddress':
        """Create a column from a single letter (A-Z)."""
        if len(letter) != 1 or not ('A' <= letter.upper() <= 'Z'):
            raise ValueError(f'Expected a single letter from A to Z, got {letter!r}')

        return cls(ord(letter.upper()) - ord(STARTING_COLUMN) + 1)

    @classmethod
    def parse(cls, text: str) -> 'ColumnAddress':
        """
        Parse the printed form of a column ("C", "AB", "ZZ").

        Raises:
            ValueError: If text isn't one or two letters
        """
        text = text.strip().upper()
        if len(text) == 1:
            return cls.from_letter(text)
        if len(text) != 2 or not text.isalpha() or not text.isascii():
            raise ValueError(f'Expected one or two letters, got {text!r}')

        leading = ord(text[0]) - ord(STARTING_COLUMN) + 1
        trailing = ord(text[1]) - ord(STARTING_COLUMN) + 1
        return cls(leading * ALPHABET_LENGTH + trailing)

    @property
    def number(self) -> int:
        """1-based column number."""
        return self.index + 1

    def add(self, value: int) -> 'ColumnAddress':
        """Return the column `value` places to the right."""
        return ColumnAddress(self.number + value)

    def subtract(self, value: int) -> 'ColumnAddress':
        """Return the column `value` places to the left."""
        return ColumnAddress(self.number - value)

    def __str__(self) -> str:
        if self.index < ALPHABET_LENGTH:
            return chr(ord(STARTING_COLUMN) + self.index)

        # index >= 26, so the leading letter starts at A for index 26
        leading_offset = self.index // ALPHABET_LENGTH - 1
        trailing_offset = self.index % ALPHABET_LENGTH
        return f'{chr(ord(STARTING_COLUMN) + leading_offset)}{chr(ord(STARTING_COLUMN) + trailing_offset)}'

    def __repr__(self) -> str:
        return f'ColumnAddress({self.number}) <{self}>'
