"""Lexer for neumalang notation.

Turns raw notation text into an ordered list of `Token` objects. Every token
records the UTF-8 byte offset of its first character so that later stages
can report errors against the encoded source.

**Token spellings:**

- `SEPARATOR` - runs of whitespace and ``,``.
- `NUMBER` - a scale degree with accidental suffixes (``0``, ``2#``, ``6b``).
  A leading sign makes it a step from the previous note (``+2``, ``-1``).
- `NOTE_NAME` - a note letter with accidentals and an optional octave
  (``C``, ``F#``, ``Bb4``, ``C-1``).
- `REST` - ``~``.
- `DURATION` - ``:1/2`` (absolute beats), ``*2`` / ``/2`` (relative to the
  beat length) and dots ``.`` / ``..``.
- `MODIFIER` - ``@mf``, ``@staccato``, octave shifts ``o1`` / ``o-2`` and
  octaves relative to the previous note ``+o1`` / ``-o1``.
- `DELIMITER` - ``(`` ``)`` ``[`` ``]`` ``|``.
"""

import dataclasses
import enum
import logging
import re
import typing

import neumalang.errors


logger = logging.getLogger(__name__)


class TokenKind (enum.Enum):

	"""Lexical categories of the notation."""

	SEPARATOR = "separator"
	NUMBER = "number"
	NOTE_NAME = "note-name"
	REST = "rest"
	DURATION = "duration-mark"
	MODIFIER = "modifier"
	DELIMITER = "delimiter"


@dataclasses.dataclass (frozen=True)
class Token:

	"""
	A single lexeme and the UTF-8 byte offset where it starts.
	"""

	kind: TokenKind
	text: str
	offset: int


# Alternatives are tried in this order at every position.
_TOKEN_PATTERNS: typing.List[typing.Tuple[TokenKind, str]] = [
	(TokenKind.SEPARATOR, r"[\s,]+"),
	(TokenKind.DURATION, r":\d+(?:/\d+)?|\*\d+(?:/\d+)?|/\d+|\.+"),
	(TokenKind.MODIFIER, r"@[A-Za-z]+|[+-]o\d+|o-?\d+"),
	(TokenKind.NOTE_NAME, r"[A-G](?:#+|b+)?(?:-?\d+)?"),
	(TokenKind.NUMBER, r"[+-]?\d+(?:#+|b+)?"),
	(TokenKind.REST, r"~"),
	(TokenKind.DELIMITER, r"[()\[\]|]"),
]

_TOKEN_REGEX = re.compile("|".join(f"(?P<{kind.name}>{pattern})" for kind, pattern in _TOKEN_PATTERNS))


def tokenize (text: str) -> typing.List[Token]:

	"""
	Split notation text into tokens.

	Parameters:
		text: The notation source.

	Returns:
		Every token in source order, separators included.

	Raises:
		LexError: If a character cannot start any token. The offset is in
			UTF-8 bytes, like every token offset.

	Example:
		```python
		[t.text for t in tokenize("C:2 (D E)")]
		# → ["C", ":2", " ", "(", "D", " ", "E", ")"]
		```
	"""

	tokens: typing.List[Token] = []
	position = 0
	byte_offset = 0

	while position < len(text):

		match = _TOKEN_REGEX.match(text, position)

		if match is None:
			raise neumalang.errors.LexError(f"Unrecognised character {text[position]!r}", byte_offset)

		kind = TokenKind[typing.cast(str, match.lastgroup)]
		tokens.append(Token(kind, match.group(), byte_offset))
		position = match.end()
		byte_offset += len(match.group().encode("utf-8"))

	logger.debug(f"Tokenized {len(text)} characters into {len(tokens)} tokens")

	return tokens
