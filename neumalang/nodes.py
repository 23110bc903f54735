"""Syntax tree for neumalang notation.

The parser produces a closed set of node types:

- `Sequence` - ordered elements played one after another.
- `Group` - a parenthesised run of elements squeezed (or stretched) into the
  group's own duration.
- `Parallel` - voices that all start at the same offset.
- `Note` - a pitch with optional duration and modifiers.
- `Rest` - silence with an optional duration.

All nodes are frozen and hold tuples, so a parsed tree can be decoded any
number of times (and shared) without copying. Durations stay symbolic until
decode time because relative marks depend on the beat length chosen there.
"""

import dataclasses
import fractions
import typing

import neumalang.errors


@dataclasses.dataclass (frozen=True)
class Duration:

	"""
	A duration mark as written.

	``relative`` marks multiply the inherited beat length; absolute marks are
	already in beats. Each dot adds half of the previous extension.
	"""

	value: fractions.Fraction
	relative: bool = True
	dots: int = 0


	def resolve (self, base_duration: fractions.Fraction) -> fractions.Fraction:

		"""Return the length in beats for the given beat length."""

		length = self.value * base_duration if self.relative else self.value
		extension = length

		for _ in range(self.dots):
			extension /= 2
			length += extension

		return length


@dataclasses.dataclass (frozen=True)
class Pitch:

	"""
	Either a scale degree or a note name.

	Exactly one of ``degree`` and ``name`` is set. ``name`` is the pitch class
	spelling (e.g. ``"F#"``) and ``octave`` its written octave, if any.
	``sharps`` counts accidentals on a degree (negative for flats). A
	``relative`` degree counts scale steps from the previous note.
	"""

	degree: typing.Optional[int] = None
	name: typing.Optional[str] = None
	octave: typing.Optional[int] = None
	sharps: int = 0
	relative: bool = False

	def __post_init__ (self) -> None:

		if (self.degree is None) == (self.name is None):
			raise neumalang.errors.ConfigError("Pitch needs exactly one of degree and name")

		if self.relative and self.degree is None:
			raise neumalang.errors.ConfigError("Only a degree can be relative")


@dataclasses.dataclass (frozen=True)
class Note:

	"""
	A pitch with its marks.

	``octave_shift`` moves the note by whole octaves of the scale.
	``octave_delta``, when set, places the note in the previous note's octave
	plus that many octaves.
	"""

	pitch: Pitch
	duration: typing.Optional[Duration] = None
	octave_shift: int = 0
	dynamic: typing.Optional[str] = None
	articulations: typing.Tuple[str, ...] = ()
	offset: int = 0
	octave_delta: typing.Optional[int] = None


@dataclasses.dataclass (frozen=True)
class Rest:

	duration: typing.Optional[Duration] = None
	offset: int = 0


@dataclasses.dataclass (frozen=True)
class Sequence:

	elements: typing.Tuple["Element", ...] = ()
	offset: int = 0


@dataclasses.dataclass (frozen=True)
class Group:

	"""
	Elements sharing the group's duration.

	Each child keeps its natural duration as a weight; the whole group is then
	scaled to ``duration`` (or one beat when unmarked).
	"""

	elements: typing.Tuple["Element", ...]
	duration: typing.Optional[Duration] = None
	offset: int = 0

	def __post_init__ (self) -> None:

		if not self.elements:
			raise neumalang.errors.ConfigError("A group needs at least one element")


@dataclasses.dataclass (frozen=True)
class Parallel:

	voices: typing.Tuple[Sequence, ...]
	offset: int = 0

	def __post_init__ (self) -> None:

		if not self.voices or not all(voice.elements for voice in self.voices):
			raise neumalang.errors.ConfigError("A parallel block needs at least one voice and no empty voices")


Element = typing.Union[Note, Rest, Group, Parallel]
Node = typing.Union[Sequence, Note, Rest, Group, Parallel]
