"""Recursive-descent parser for neumalang notation.

**Grammar** (separators are skipped between any two tokens):

	sequence  := element*
	element   := note | rest | group | parallel
	note      := (NUMBER | NOTE_NAME) suffix*
	suffix    := DURATION | MODIFIER
	rest      := "~" DURATION*
	group     := "(" element+ ")" DURATION*
	parallel  := "[" element+ ("|" element+)* "]"

A note or rest takes at most one value mark (``:n``, ``*n``, ``/n``) and one
run of dots. A note takes at most one relative octave (``+o1``, ``-o2``).
Signed degrees (``+2``, ``-1``) become relative pitches. The parser either
returns a complete tree or raises; it never hands back a partial result.
"""

import fractions
import logging
import re
import typing

import neumalang.constants.velocity
import neumalang.errors
import neumalang.nodes
import neumalang.tokenizer


logger = logging.getLogger(__name__)

TokenKind = neumalang.tokenizer.TokenKind

DYNAMICS: typing.Tuple[str, ...] = tuple(neumalang.constants.velocity.DYNAMIC_LEVELS)

ARTICULATIONS: typing.Tuple[str, ...] = ("staccato", "legato", "tenuto", "accent")

_DEGREE_REGEX = re.compile(r"(?P<sign>[+-]?)(?P<degree>\d+)(?P<accidentals>#*|b*)")
_NOTE_NAME_REGEX = re.compile(r"(?P<name>[A-G](?:#*|b*))(?P<octave>(?:-?\d+)?)")


def parse (text: str) -> neumalang.nodes.Sequence:

	"""
	Parse notation text into a `Sequence` tree.

	Parameters:
		text: Notation source, e.g. ``"C D (E F G):2 [C | E]"``.

	Returns:
		The root `Sequence`.

	Raises:
		LexError: On an unrecognised character.
		ParseError: On a grammar violation.

	Example:
		```python
		tree = parse("0 2 ~ 4:2")
		len(tree.elements)  # → 4
		```
	"""

	return parse_tokens(neumalang.tokenizer.tokenize(text), len(text.encode("utf-8")))


def parse_tokens (tokens: typing.Sequence[neumalang.tokenizer.Token], source_length: int = 0) -> neumalang.nodes.Sequence:

	"""
	Parse an already tokenized stream.

	``source_length`` (in UTF-8 bytes) is reported as the error offset when
	input ends early.
	"""

	parser = _Parser(tokens, source_length)
	tree = parser.parse_root()

	logger.debug(f"Parsed {len(tree.elements)} top-level elements")

	return tree


class _Parser:

	"""Cursor over the significant tokens of one parse call."""

	def __init__ (self, tokens: typing.Sequence[neumalang.tokenizer.Token], source_length: int) -> None:

		self.tokens = [token for token in tokens if token.kind is not TokenKind.SEPARATOR]
		self.position = 0

		if self.tokens:
			last = self.tokens[-1]
			source_length = max(source_length, last.offset + len(last.text.encode("utf-8")))

		self.end_offset = source_length


	def _peek (self) -> typing.Optional[neumalang.tokenizer.Token]:

		if self.position < len(self.tokens):
			return self.tokens[self.position]

		return None


	def _advance (self) -> neumalang.tokenizer.Token:

		token = self.tokens[self.position]
		self.position += 1
		return token


	def _error (self, token: typing.Optional[neumalang.tokenizer.Token], expected: str) -> neumalang.errors.ParseError:

		if token is None:
			return neumalang.errors.ParseError("Unexpected end of input", self.end_offset, expected)

		return neumalang.errors.ParseError(f"Unexpected {token.kind.value} {token.text!r}", token.offset, expected)


	def _at_delimiter (self, text: str) -> bool:

		token = self._peek()
		return token is not None and token.kind is TokenKind.DELIMITER and token.text == text


	def parse_root (self) -> neumalang.nodes.Sequence:

		elements = self._parse_elements(closers=())

		return neumalang.nodes.Sequence(tuple(elements), 0)


	def _parse_elements (self, closers: typing.Tuple[str, ...]) -> typing.List[neumalang.nodes.Element]:

		"""
		Collect elements until a closing delimiter in ``closers`` or end of input.
		"""

		elements: typing.List[neumalang.nodes.Element] = []

		while True:

			token = self._peek()

			if token is None:
				return elements

			if token.kind is TokenKind.DELIMITER and token.text in closers:
				return elements

			elements.append(self._parse_element())


	def _parse_element (self) -> neumalang.nodes.Element:

		token = self._peek()

		if token is None:
			raise self._error(token, "element")

		if token.kind in (TokenKind.NUMBER, TokenKind.NOTE_NAME):
			return self._parse_note()

		if token.kind is TokenKind.REST:
			return self._parse_rest()

		if token.kind is TokenKind.DELIMITER and token.text == "(":
			return self._parse_group()

		if token.kind is TokenKind.DELIMITER and token.text == "[":
			return self._parse_parallel()

		raise self._error(token, "element")


	def _parse_pitch (self, token: neumalang.tokenizer.Token) -> neumalang.nodes.Pitch:

		if token.kind is TokenKind.NUMBER:
			match = _DEGREE_REGEX.fullmatch(token.text)

			if match is None:
				raise self._error(token, "scale degree")

			accidentals = match.group("accidentals")
			sharps = accidentals.count("#") - accidentals.count("b")
			degree = int(match.group("degree"))

			if match.group("sign") == "-":
				degree = -degree

			return neumalang.nodes.Pitch(degree=degree, sharps=sharps, relative=bool(match.group("sign")))

		match = _NOTE_NAME_REGEX.fullmatch(token.text)

		if match is None:
			raise self._error(token, "note name")

		octave = int(match.group("octave")) if match.group("octave") else None
		return neumalang.nodes.Pitch(name=match.group("name"), octave=octave)


	def _parse_duration (self, allow_modifiers: bool) -> typing.Tuple[typing.Optional[neumalang.nodes.Duration], typing.List[neumalang.tokenizer.Token]]:

		"""
		Consume trailing duration marks (and modifiers, when allowed).

		Returns the combined duration (None if no mark was written) and the
		modifier tokens in source order.
		"""

		value: typing.Optional[fractions.Fraction] = None
		relative = True
		dots: typing.Optional[int] = None
		modifiers: typing.List[neumalang.tokenizer.Token] = []

		while True:

			token = self._peek()

			if token is None:
				break

			if token.kind is TokenKind.MODIFIER and allow_modifiers:
				modifiers.append(self._advance())
				continue

			if token.kind is not TokenKind.DURATION:
				break

			if token.text.startswith("."):

				if dots is not None:
					raise self._error(token, "a single run of dots")

				dots = len(token.text)
				self._advance()
				continue

			if value is not None:
				raise self._error(token, "a single duration mark")

			mark, amount = token.text[0], token.text[1:]

			try:
				number = fractions.Fraction(amount)
			except ZeroDivisionError:
				raise self._error(token, "positive duration") from None

			if number <= 0:
				raise self._error(token, "positive duration")

			if mark == ":":
				value, relative = number, False
			elif mark == "*":
				value = number
			else:
				value = 1 / number

			self._advance()

		if value is None and dots is None:
			return None, modifiers

		return neumalang.nodes.Duration(value if value is not None else fractions.Fraction(1), relative, dots or 0), modifiers


	def _parse_note (self) -> neumalang.nodes.Note:

		token = self._advance()
		pitch = self._parse_pitch(token)
		duration, modifiers = self._parse_duration(allow_modifiers=True)

		octave_shift = 0
		octave_delta: typing.Optional[int] = None
		dynamic: typing.Optional[str] = None
		articulations: typing.List[str] = []

		for modifier in modifiers:

			if modifier.text.startswith("o"):
				octave_shift += int(modifier.text[1:])
				continue

			if modifier.text[0] in "+-":
				if octave_delta is not None:
					raise self._error(modifier, "a single relative octave")
				octave_delta = int(modifier.text[0] + modifier.text[2:])
				continue

			word = modifier.text[1:]

			if word in DYNAMICS:
				if dynamic is not None:
					raise self._error(modifier, "a single dynamic")
				dynamic = word

			elif word in ARTICULATIONS:
				if word not in articulations:
					articulations.append(word)

			else:
				raise self._error(modifier, "dynamic or articulation")

		return neumalang.nodes.Note(
			pitch = pitch,
			duration = duration,
			octave_shift = octave_shift,
			dynamic = dynamic,
			articulations = tuple(articulations),
			offset = token.offset,
			octave_delta = octave_delta
		)


	def _parse_rest (self) -> neumalang.nodes.Rest:

		token = self._advance()
		duration, _ = self._parse_duration(allow_modifiers=False)

		return neumalang.nodes.Rest(duration, token.offset)


	def _parse_group (self) -> neumalang.nodes.Group:

		opener = self._advance()
		elements = self._parse_elements(closers=(")",))

		if not elements:
			raise self._error(self._peek(), "element")

		if not self._at_delimiter(")"):
			raise self._error(self._peek(), "')'")

		self._advance()
		duration, _ = self._parse_duration(allow_modifiers=False)

		return neumalang.nodes.Group(tuple(elements), duration, opener.offset)


	def _parse_parallel (self) -> neumalang.nodes.Parallel:

		opener = self._advance()
		voices: typing.List[neumalang.nodes.Sequence] = []

		while True:

			voice_token = self._peek()
			elements = self._parse_elements(closers=("|", "]"))

			if not elements:
				raise self._error(self._peek(), "element")

			voices.append(neumalang.nodes.Sequence(tuple(elements), voice_token.offset if voice_token else opener.offset))

			if self._at_delimiter("|"):
				self._advance()
				continue

			if self._at_delimiter("]"):
				self._advance()
				break

			raise self._error(self._peek(), "'|' or ']'")

		return neumalang.nodes.Parallel(tuple(voices), opener.offset)
