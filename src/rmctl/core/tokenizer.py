"""Split operator input into words.

Words are separated by whitespace. A double or single quote opens a
quoted run that only the same kind of quote closes; whitespace inside the
run belongs to the word and the quote characters themselves are dropped:

    >>> split_words('update NodeName=lx01 Reason="fan failure"')
    ['update', 'NodeName=lx01', 'Reason=fan failure']

Each word is a ``Word``, a ``str`` that also records whether any part of
it was quoted, so ``Reason=""`` can still be told apart from ``Reason=``.

The ``Tokenizer`` also remembers the last line it was given so that the
line ``!!`` can replay it.
"""

from __future__ import annotations

import logging

from rmctl.core.errors import TooManyWordsError

logger = logging.getLogger(__name__)

MAX_INPUT_FIELDS = 128

REPEAT_LAST = "!!"

QUOTES = ("'", '"')


class Word(str):
    """One word of input.

    Attributes:
        quoted: True if the word contained a quoted run.
    """

    quoted: bool

    def __new__(cls, text: str, quoted: bool = False) -> Word:
        word = super().__new__(cls, text)
        word.quoted = quoted
        return word


def split_words(line: str, max_words: int = MAX_INPUT_FIELDS) -> list[Word]:
    """Split one line into words, honoring quotes.

    A word made only of an empty quoted run (``""``) carries no text and is
    dropped; it does not count toward ``max_words``.

    Args:
        line: Raw input line.
        max_words: Maximum number of words accepted.

    Returns:
        List of non-empty words.

    Raises:
        TooManyWordsError: If the line holds more than ``max_words`` words.
    """
    words: list[Word] = []
    current: list[str] = []
    in_word = False
    quoted = False
    quote: str | None = None

    def finish() -> None:
        text = "".join(current)
        if not text:
            return
        if len(words) >= max_words:
            raise TooManyWordsError(max_words)
        words.append(Word(text, quoted))

    for ch in line:
        if quote is not None:
            if ch == quote:
                quote = None
            else:
                current.append(ch)
            continue

        if ch.isspace():
            if in_word:
                finish()
                current = []
                in_word = False
                quoted = False
            continue

        in_word = True
        if ch in QUOTES:
            quote = ch
            quoted = True
        else:
            current.append(ch)

    if in_word:
        finish()

    return words


class Tokenizer:
    """Line splitter with ``!!`` replay.

    The replay source is a snapshot of the last line as typed. It is kept
    apart from anything the splitting produces, so replaying it any number
    of times gives the same words.
    """

    def __init__(self, max_words: int = MAX_INPUT_FIELDS):
        self.max_words = max_words
        self._last_line: str | None = None

    @property
    def last_line(self) -> str | None:
        """Line that ``!!`` would replay."""
        return self._last_line

    def tokenize(self, line: str) -> list[Word]:
        """Split ``line`` into words, replaying the previous line for ``!!``.

        Raises:
            TooManyWordsError: If the line holds too many words.
        """
        if line == REPEAT_LAST:
            line = self._last_line or ""
            logger.debug("replay_line: line=%r", line)
        else:
            self._last_line = line
        return split_words(line, self.max_words)
