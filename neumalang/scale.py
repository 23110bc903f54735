"""Scales and degree-to-pitch resolution.

A `Scale` is a root pitch (MIDI note number, C4 = 60), an ordered list of
positive interval steps and a mode label. Resolution wraps any integer degree
over the step count and carries the quotient into the octave, so every
degree is valid:

	resolve(degree + len(intervals), octave) == resolve(degree, octave) + span

where ``span`` is the sum of the steps (12 for the usual heptatonic modes).

Module-level helpers:
- `NOTE_NAME_TO_PC`: note spellings to pitch classes (0-11).
- `SCALE_STEPS`: named interval-step lists, extendable with `register_scale()`.
- `note_name_to_pitch()`: ``"C4"`` → 60, ``"F#"`` → 66 (default octave 4).
"""

import dataclasses
import logging
import re
import typing

import neumalang.errors


logger = logging.getLogger(__name__)

DEFAULT_OCTAVE = 4


NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"D": 2,
	"E": 4,
	"F": 5,
	"G": 7,
	"A": 9,
	"B": 11,
}


SCALE_STEPS: typing.Dict[str, typing.List[int]] = {
	"major": [2, 2, 1, 2, 2, 2, 1],
	"ionian": [2, 2, 1, 2, 2, 2, 1],
	"dorian": [2, 1, 2, 2, 2, 1, 2],
	"phrygian": [1, 2, 2, 2, 1, 2, 2],
	"lydian": [2, 2, 2, 1, 2, 2, 1],
	"mixolydian": [2, 2, 1, 2, 2, 1, 2],
	"minor": [2, 1, 2, 2, 1, 2, 2],
	"aeolian": [2, 1, 2, 2, 1, 2, 2],
	"locrian": [1, 2, 2, 1, 2, 2, 2],
	"harmonic_minor": [2, 1, 2, 2, 1, 3, 1],
	"melodic_minor": [2, 1, 2, 2, 2, 2, 1],
	"harmonic_major": [2, 2, 1, 2, 1, 3, 1],
	"major_pentatonic": [2, 2, 3, 2, 3],
	"minor_pentatonic": [3, 2, 2, 3, 2],
	"blues": [3, 2, 1, 1, 3, 2],
	"whole_tone": [2, 2, 2, 2, 2, 2],
	"diminished_hw": [1, 2, 1, 2, 1, 2, 1, 2],
	"diminished_wh": [2, 1, 2, 1, 2, 1, 2, 1],
	"double_harmonic": [1, 3, 1, 2, 1, 3, 1],
	"hungarian_minor": [2, 1, 3, 1, 1, 3, 1],
	"phrygian_dominant": [1, 3, 1, 2, 1, 2, 2],
	"chromatic": [1] * 12,
}


_NOTE_REGEX = re.compile(r"(?P<letter>[A-G])(?P<accidentals>#*|b*)(?P<octave>-?\d+)?")


def note_name_to_pitch (name: str, default_octave: int = DEFAULT_OCTAVE) -> int:

	"""Convert a note spelling to a MIDI note number.

	Parameters:
		name: Note letter with optional accidentals and octave
			(``"C"``, ``"F#3"``, ``"Bb4"``).
		default_octave: Octave used when ``name`` has none.

	Returns:
		MIDI note number with C4 = 60. Accidentals may cross the octave
		boundary (``"B#4"`` → 72, ``"Cb4"`` → 59).

	Raises:
		ConfigError: If the spelling is not recognised.
	"""

	match = _NOTE_REGEX.fullmatch(name)

	if match is None:
		raise neumalang.errors.ConfigError(f"Unknown note name: {name!r}. Expected e.g. 'C', 'F#3', 'Bb4'.")

	accidentals = match.group("accidentals")
	octave = int(match.group("octave")) if match.group("octave") is not None else default_octave
	pitch_class = NOTE_NAME_TO_PC[match.group("letter")] + accidentals.count("#") - accidentals.count("b")

	return (octave + 1) * 12 + pitch_class


def register_scale (name: str, intervals: typing.Sequence[int]) -> None:

	"""
	Add (or replace) a named interval-step list.

	Example:
		```python
		register_scale("hirajoshi", [2, 1, 4, 1, 4])
		Scale.from_mode("D", "hirajoshi")
		```
	"""

	_validate_intervals(intervals)

	SCALE_STEPS[name] = list(intervals)

	logger.debug(f"Registered scale {name!r} with steps {list(intervals)}")


def get_intervals (name: str) -> typing.List[int]:

	"""
	Return a named interval-step list from the registry.
	"""

	if name not in SCALE_STEPS:
		raise neumalang.errors.ConfigError(f"Unknown scale: {name!r}. Available: {sorted(SCALE_STEPS)}")

	return list(SCALE_STEPS[name])


def _validate_intervals (intervals: typing.Sequence[int]) -> None:

	if len(intervals) == 0:
		raise neumalang.errors.ConfigError("Scale needs at least one interval step")

	for step in intervals:
		if isinstance(step, bool) or not isinstance(step, int) or step <= 0:
			raise neumalang.errors.ConfigError(f"Interval steps must be positive integers, got {step!r}")


@dataclasses.dataclass (frozen=True)
class Scale:

	"""
	An immutable interval structure anchored at a root pitch.

	Parameters:
		root: MIDI note number of degree 0 in octave 0, or a note spelling
			(``"C"`` is C4 = 60).
		intervals: Ordered positive semitone steps, one per degree. The steps
			of a heptatonic mode add up to 12.
		mode: Free-form label (``"major"``, ``"dorian"`` ...).

	Example:
		```python
		c_major = Scale(60, [2, 2, 1, 2, 2, 2, 1], "major")
		c_major.resolve(2)       # → 64 (E4)
		c_major.resolve(7)       # → 72 (C5)
		c_major.resolve(-1)      # → 59 (B3)
		c_major.resolve(0, 1)    # → 72
		```
	"""

	root: int
	intervals: typing.Tuple[int, ...]
	mode: str = "custom"
	_offsets: typing.Tuple[int, ...] = dataclasses.field(default=(), init=False, repr=False, compare=False)

	def __post_init__ (self) -> None:

		if isinstance(self.root, str):
			object.__setattr__(self, "root", note_name_to_pitch(self.root))

		_validate_intervals(self.intervals)

		object.__setattr__(self, "intervals", tuple(self.intervals))

		# Offset of every degree from the root within one span.
		offsets = [0]
		for step in self.intervals[:-1]:
			offsets.append(offsets[-1] + step)

		object.__setattr__(self, "_offsets", tuple(offsets))


	@classmethod
	def from_mode (cls, root: typing.Union[int, str], mode: str = "major") -> "Scale":

		"""
		Build a scale from a registered mode name.
		"""

		return cls(typing.cast(int, root), tuple(get_intervals(mode)), mode)


	@property
	def span (self) -> int:

		"""Semitones covered by one full cycle of the steps."""

		return sum(self.intervals)


	def __len__ (self) -> int:

		return len(self.intervals)


	def resolve (self, degree: int, octave: int = 0) -> int:

		"""
		Return the absolute pitch of ``degree`` shifted by ``octave`` spans.

		Degrees outside ``0 .. len - 1`` wrap, carrying into the octave.
		"""

		wraps, index = divmod(degree, len(self.intervals))

		return self.root + (octave + wraps) * self.span + self._offsets[index]


	def locate (self, pitch: int) -> typing.Tuple[int, int]:

		"""
		Find the degree at or below ``pitch`` and the remaining alteration.

		Returns ``(degree, alteration)`` such that
		``resolve(degree) + alteration == pitch`` and ``alteration`` is zero
		whenever ``pitch`` belongs to the scale.
		"""

		wraps, remainder = divmod(pitch - self.root, self.span)
		offsets = self._offsets

		index = 0
		for i, offset in enumerate(offsets):
			if offset <= remainder:
				index = i

		return wraps * len(offsets) + index, remainder - offsets[index]
