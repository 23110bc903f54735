"""Bind decoded pitch events to a `Clock` as MIDI messages.

The `Sequencer` converts each `PitchEvent` into a ``note_on`` / ``note_off``
pair, schedules both on the clock and sends the resulting `mido.Message`
objects to an output when the clock dispatches them. The output is anything
with a ``send(message)`` method: a mido port, a recorder in a test, or
None to discard the messages.
"""

import dataclasses
import fractions
import functools
import logging
import typing

import mido

import neumalang.clock
import neumalang.constants.pulses
import neumalang.decoder
import neumalang.errors


logger = logging.getLogger(__name__)

STACCATO_GATE = fractions.Fraction(1, 2)


class OutputLike (typing.Protocol):

	"""
	Protocol for objects that accept outgoing MIDI messages.
	"""

	def send (self, message: mido.Message) -> None:

		...


@dataclasses.dataclass (order=True)
class MidiEvent:

	"""
	Represents a note message scheduled at a specific tick.
	"""

	tick: int
	message_type: str = dataclasses.field(compare=False)
	channel: int = dataclasses.field(compare=False)
	note: int = dataclasses.field(compare=False, default=0)
	velocity: int = dataclasses.field(compare=False, default=0)


class Sequencer:

	"""
	Schedules decoded events on a clock and sends them as MIDI.

	Parameters:
		clock: The clock that will dispatch the messages.
		output: Destination for messages (default None - messages are dropped).
		ticks_per_beat: Clock ticks per beat (default 24, the MIDI clock rate).
		channel: MIDI channel 0-15 for every message (default 0).

	When the clock terminates, every note still sounding gets a ``note_off``.
	"""

	def __init__ (
		self,
		clock: neumalang.clock.Clock,
		output: typing.Optional[OutputLike] = None,
		ticks_per_beat: int = neumalang.constants.pulses.TICKS_PER_BEAT,
		channel: int = 0
	) -> None:

		if ticks_per_beat <= 0:
			raise neumalang.errors.ConfigError(f"ticks_per_beat must be positive, got {ticks_per_beat}")

		if not 0 <= channel <= 15:
			raise neumalang.errors.ConfigError(f"MIDI channel must be 0-15, got {channel}")

		self.clock = clock
		self.output = output
		self.ticks_per_beat = ticks_per_beat
		self.channel = channel
		self.active_notes: typing.Set[typing.Tuple[int, int]] = set()

		self.clock.on("terminate", self._on_terminate)


	def beats_to_ticks (self, beats: fractions.Fraction) -> int:

		"""Convert a beat position or length to whole ticks (truncating)."""

		return int(beats * self.ticks_per_beat)


	def play (self, events: typing.Iterable[neumalang.decoder.PitchEvent], start_tick: typing.Optional[int] = None) -> typing.List[MidiEvent]:

		"""
		Schedule note messages for ``events``.

		Parameters:
			events: Decoded events; beat 0 maps to ``start_tick``.
			start_tick: Clock tick for beat 0 (default: the clock's current tick).

		Returns:
			The scheduled messages in scheduling order. Empty when the clock
			has terminated.

		Raises:
			ConfigError: If ``start_tick`` is in the past, or any event has a
				pitch or velocity outside 0-127. Nothing is scheduled then.
		"""

		if start_tick is None:
			start_tick = self.clock.tick_count

		if start_tick < self.clock.tick_count:
			raise neumalang.errors.ConfigError(f"start_tick {start_tick} is before the clock's current tick {self.clock.tick_count}")

		events = list(events)

		for event in events:
			_check_midi_range(event)

		if self.clock.terminated:
			logger.debug("Clock terminated - nothing scheduled")
			return []

		scheduled: typing.List[MidiEvent] = []

		for event in events:

			on_tick = start_tick + self.beats_to_ticks(event.start)
			gate = STACCATO_GATE if "staccato" in event.articulations else 1
			length = max(1, self.beats_to_ticks(event.duration * gate))

			on_event = MidiEvent(
				tick = on_tick,
				message_type = 'note_on',
				channel = self.channel,
				note = event.pitch,
				velocity = event.velocity
			)

			off_event = MidiEvent(
				tick = on_tick + length,
				message_type = 'note_off',
				channel = self.channel,
				note = event.pitch,
				velocity = 0
			)

			for midi_event in (on_event, off_event):
				self.clock.schedule_at(midi_event.tick, functools.partial(self._dispatch, midi_event))
				scheduled.append(midi_event)

		logger.debug(f"Scheduled {len(scheduled)} messages from tick {start_tick}, queue size: {self.clock.pending}")

		return scheduled


	def _dispatch (self, event: MidiEvent, tick: int) -> None:

		"""
		Track sounding notes and send one scheduled message.
		"""

		if event.message_type == 'note_on' and event.velocity > 0:
			self.active_notes.add((event.channel, event.note))
		else:
			self.active_notes.discard((event.channel, event.note))

		self._send_midi(event)


	def _send_midi (self, event: MidiEvent) -> None:

		if self.output is None:
			return

		self.output.send(mido.Message(
			event.message_type,
			channel = event.channel,
			note = event.note,
			velocity = event.velocity
		))


	def panic (self) -> None:

		"""
		Send ``note_off`` for every note currently sounding.
		"""

		if self.active_notes:
			logger.info(f"Panic: releasing {len(self.active_notes)} sounding notes.")

		for channel, note in sorted(self.active_notes):
			self._send_midi(MidiEvent(tick=self.clock.tick_count, message_type='note_off', channel=channel, note=note))

		self.active_notes.clear()


	def _on_terminate (self, tick: int) -> None:

		self.panic()


def _check_midi_range (event: neumalang.decoder.PitchEvent) -> None:

	if not 0 <= event.pitch <= 127:
		raise neumalang.errors.ConfigError(f"Pitch {event.pitch} at beat {event.start} is outside the MIDI range 0-127")

	if not 0 <= event.velocity <= 127:
		raise neumalang.errors.ConfigError(f"Velocity {event.velocity} at beat {event.start} is outside the MIDI range 0-127")
