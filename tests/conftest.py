import typing

import mido
import pytest

import neumalang.scale


class FakeMidiOut:

	"""Minimal MIDI output stub that records everything sent to it."""

	def __init__ (self) -> None:

		self.messages: typing.List[mido.Message] = []

	def send (self, message: mido.Message) -> None:

		"""Store the outgoing message."""

		self.messages.append(message)


@pytest.fixture
def midi_out () -> FakeMidiOut:

	"""A fresh recording MIDI output."""

	return FakeMidiOut()


@pytest.fixture
def c_major () -> neumalang.scale.Scale:

	"""C major rooted at middle C (60)."""

	return neumalang.scale.Scale(60, (2, 2, 1, 2, 2, 2, 1), "major")
