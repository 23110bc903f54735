"""Decode a parsed tree into timed pitch events.

`decode()` walks a tree against a `Scale` and returns a finite, ordered list
of `PitchEvent`. It keeps no state between calls: the same tree, scale,
start offset and beat length always give an identical list.

**Timing rules** (all arithmetic in exact fractions of a beat):

- A note or rest lasts its own mark, or one beat length when unmarked.
- A sequence places each element where the previous one ended. Rests emit
  nothing but still move the cursor.
- A group lasts its own mark (or one beat length). Its children keep their
  relative lengths and are scaled so they fill the group exactly.
- A parallel block starts every voice at the same offset and lasts as long
  as its longest voice.

**Relative pitches** (``+2``, ``-1``, ``+o1``) are measured from the last
note decoded before them, starting from degree 0 in octave 0 at the top of
each `decode()` call. Groups pass that position straight through. Every
parallel voice starts from the position before the block, and the first
voice's last note is the one that follows it.
"""

import dataclasses
import fractions
import logging
import typing

import neumalang.constants.velocity
import neumalang.errors
import neumalang.nodes
import neumalang.scale


logger = logging.getLogger(__name__)

Number = typing.Union[int, fractions.Fraction, str]

# (degree, octave) of the last decoded note.
Position = typing.Tuple[int, int]

START_POSITION: Position = (0, 0)


@dataclasses.dataclass (frozen=True)
class PitchEvent:

	"""
	A concrete note: absolute pitch, placement in beats and expression.
	"""

	pitch: int
	start: fractions.Fraction
	duration: fractions.Fraction
	velocity: int = neumalang.constants.velocity.DEFAULT_VELOCITY
	articulations: typing.Tuple[str, ...] = ()

	@property
	def end (self) -> fractions.Fraction:

		return self.start + self.duration


def _to_fraction (value: Number, name: str) -> fractions.Fraction:

	try:
		return fractions.Fraction(value)
	except (TypeError, ValueError, ZeroDivisionError):
		raise neumalang.errors.ConfigError(f"{name} must be a rational number, got {value!r}") from None


def decode (
	tree: neumalang.nodes.Node,
	scale: neumalang.scale.Scale,
	start_offset: Number = 0,
	base_duration: Number = 1
) -> typing.List[PitchEvent]:

	"""
	Turn a parsed tree into pitch events.

	Parameters:
		tree: Any node, usually the `Sequence` returned by `parse()`.
		scale: Scale used to resolve degrees and note names.
		start_offset: Beat at which the tree starts (default 0).
		base_duration: Length in beats of an unmarked note, rest or group
			(default 1).

	Returns:
		Events sorted by start. Events that start together keep source order.

	Raises:
		ConfigError: If ``start_offset`` is negative, ``base_duration`` is
			not positive or a group's children have no length to share.

	Example:
		```python
		scale = Scale.from_mode("C", "major")
		events = decode(parse("C D E"), scale)
		[e.pitch for e in events]   # → [60, 62, 64]
		[e.start for e in events]   # → [0, 1, 2]
		```
	"""

	start = _to_fraction(start_offset, "start_offset")
	base = _to_fraction(base_duration, "base_duration")

	if start < 0:
		raise neumalang.errors.ConfigError(f"start_offset cannot be negative, got {start}")

	if base <= 0:
		raise neumalang.errors.ConfigError(f"base_duration must be positive, got {base}")

	events, consumed, _ = _decode_node(tree, scale, start, base, fractions.Fraction(1), START_POSITION)

	logger.debug(f"Decoded {len(events)} events spanning {consumed} beats from offset {start}")

	return sorted(events, key=lambda event: event.start)


def natural_duration (node: neumalang.nodes.Node, base_duration: fractions.Fraction) -> fractions.Fraction:

	"""
	Length of ``node`` in beats before any enclosing group scales it.
	"""

	if isinstance(node, (neumalang.nodes.Note, neumalang.nodes.Rest, neumalang.nodes.Group)):
		if node.duration is None:
			return base_duration
		return node.duration.resolve(base_duration)

	if isinstance(node, neumalang.nodes.Parallel):
		return max(natural_duration(voice, base_duration) for voice in node.voices)

	if isinstance(node, neumalang.nodes.Sequence):
		return sum((natural_duration(element, base_duration) for element in node.elements), fractions.Fraction(0))

	raise TypeError(f"Cannot measure node of type {type(node).__name__}")


def _decode_node (
	node: neumalang.nodes.Node,
	scale: neumalang.scale.Scale,
	start: fractions.Fraction,
	base: fractions.Fraction,
	factor: fractions.Fraction,
	previous: Position
) -> typing.Tuple[typing.List[PitchEvent], fractions.Fraction, Position]:

	"""
	Decode one node starting at ``start`` with every length multiplied by ``factor``.

	``previous`` is the degree and octave of the last note before this node.
	Returns the node's events, the duration it consumed and the position of
	its last note.
	"""

	if isinstance(node, neumalang.nodes.Note):
		length = natural_duration(node, base) * factor
		position, alteration = _note_position(node, scale, previous)
		event = PitchEvent(
			pitch = scale.resolve(*position) + alteration,
			start = start,
			duration = length,
			velocity = _velocity(node),
			articulations = node.articulations
		)
		return [event], length, position

	if isinstance(node, neumalang.nodes.Rest):
		return [], natural_duration(node, base) * factor, previous

	if isinstance(node, neumalang.nodes.Sequence):
		return _decode_run(node.elements, scale, start, base, factor, previous)

	if isinstance(node, neumalang.nodes.Group):
		allotted = natural_duration(node, base) * factor
		weights = sum((natural_duration(element, base) for element in node.elements), fractions.Fraction(0))

		if weights <= 0:
			raise neumalang.errors.ConfigError(f"Group at offset {node.offset} has no positive duration to share")

		events, _, last = _decode_run(node.elements, scale, start, base, allotted / weights, previous)
		return events, allotted, last

	if isinstance(node, neumalang.nodes.Parallel):
		events: typing.List[PitchEvent] = []
		longest = fractions.Fraction(0)
		after = previous

		# Every voice starts from the same position; the first voice carries on.
		for index, voice in enumerate(node.voices):
			voice_events, consumed, last = _decode_node(voice, scale, start, base, factor, previous)
			events.extend(voice_events)
			longest = max(longest, consumed)

			if index == 0:
				after = last

		return events, longest, after

	raise TypeError(f"Cannot decode node of type {type(node).__name__}")


def _decode_run (
	elements: typing.Sequence[neumalang.nodes.Element],
	scale: neumalang.scale.Scale,
	start: fractions.Fraction,
	base: fractions.Fraction,
	factor: fractions.Fraction,
	previous: Position
) -> typing.Tuple[typing.List[PitchEvent], fractions.Fraction, Position]:

	events: typing.List[PitchEvent] = []
	cursor = start

	for element in elements:
		element_events, consumed, previous = _decode_node(element, scale, cursor, base, factor, previous)
		events.extend(element_events)
		cursor += consumed

	return events, cursor - start, previous


def _note_position (
	note: neumalang.nodes.Note,
	scale: neumalang.scale.Scale,
	previous: Position
) -> typing.Tuple[Position, int]:

	"""
	Degree, octave and chromatic alteration of ``note``.

	Relative degrees step from the previous degree and keep its octave. A
	relative octave mark puts any note in the previous octave plus the mark.
	"""

	pitch = note.pitch
	previous_degree, previous_octave = previous

	if pitch.name is not None:
		spelling = pitch.name if pitch.octave is None else f"{pitch.name}{pitch.octave}"
		target = neumalang.scale.note_name_to_pitch(spelling, default_octave=scale.root // 12 - 1)
		degree, alteration = scale.locate(target)

	elif pitch.degree is not None:
		degree, alteration = pitch.degree, pitch.sharps

		if pitch.relative:
			degree += previous_degree

	else:
		raise neumalang.errors.ConfigError(f"Note at offset {note.offset} has no pitch")

	octave = note.octave_shift

	if note.octave_delta is not None:
		octave += previous_octave + note.octave_delta

	elif pitch.relative:
		octave += previous_octave

	return (degree, octave), alteration


def resolve_pitch (
	note: neumalang.nodes.Note,
	scale: neumalang.scale.Scale,
	previous: Position = START_POSITION
) -> int:

	"""
	Absolute pitch of a note against ``scale``.

	Degrees resolve directly. Note names are located on the scale first, so
	their octave shift moves by whole scale spans just like a degree's.
	Relative marks are measured from ``previous`` (degree, octave).
	"""

	position, alteration = _note_position(note, scale, previous)

	return scale.resolve(*position) + alteration


def _velocity (note: neumalang.nodes.Note) -> int:

	levels = neumalang.constants.velocity.DYNAMIC_LEVELS
	dynamic = note.dynamic or neumalang.constants.velocity.DEFAULT_DYNAMIC
	level = levels.index(dynamic)

	if "accent" in note.articulations:
		level = min(level + 1, len(levels) - 1)

	return neumalang.constants.velocity.DYNAMIC_VELOCITIES[levels[level]]
