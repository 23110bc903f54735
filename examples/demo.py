"""Play a short two-voice phrase through a MIDI port.

The host loop below is the only place wall-clock time exists: it sleeps
for one tick's worth of seconds and then calls ``clock.tick()``. The clock
itself never schedules anything on its own.

	python examples/demo.py "My Synth Port"

Without a port name the messages are printed instead.
"""

import logging
import sys
import time

import mido

import neumalang
import neumalang.constants.pulses


logging.basicConfig(level=logging.INFO)

BPM = 110
TICKS_PER_BEAT = neumalang.constants.pulses.TICKS_PER_BEAT

MELODY = "0 2 4 (5 4 2):2 [0:2 | 4:2 | 7@accent:2] ~ (0o1 -1 -1 -1)*2 2@staccato 0:3@p"


class PrintOutput:

	def send (self, message: mido.Message) -> None:

		print(message)


def main () -> None:

	scale = neumalang.Scale.from_mode("D3", "dorian")
	events = neumalang.decode(neumalang.parse(MELODY), scale, base_duration="1/2")

	output = mido.open_output(sys.argv[1]) if len(sys.argv) > 1 else PrintOutput()

	clock = neumalang.Clock()
	sequencer = neumalang.Sequencer(clock, output=output, ticks_per_beat=TICKS_PER_BEAT)
	sequencer.play(events)

	seconds_per_tick = 60.0 / BPM / TICKS_PER_BEAT

	clock.run()

	try:
		while clock.pending:
			clock.tick()
			time.sleep(seconds_per_tick)
	except KeyboardInterrupt:
		pass
	finally:
		clock.terminate()


if __name__ == "__main__":
	main()
