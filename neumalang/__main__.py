"""Decode neumalang notation from the command line.

	python -m neumalang "C D (E F G):2 [C | E]" --root D --mode dorian
	python -m neumalang --file theme.neuma --play

Settings are read from an optional YAML file (``config.yaml`` by default)::

	scale:
	  root: C
	  mode: major          # or: intervals: [2, 2, 1, 2, 2, 2, 1]
	decoder:
	  base_duration: 1/2
	sequencer:
	  ticks_per_beat: 24
	  channel: 0

Command-line flags override the file.
"""

import argparse
import logging
import os
import sys
import typing

import mido
import yaml

import neumalang.clock
import neumalang.constants.pulses
import neumalang.decoder
import neumalang.errors
import neumalang.parser
import neumalang.scale
import neumalang.sequencer


logger = logging.getLogger(__name__)


def load_config (config_path: str = 'config.yaml') -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		return yaml.safe_load(f) or {}


class _PrintOutput:

	"""Writes every dispatched message to stdout with its tick."""

	def __init__ (self, clock: neumalang.clock.Clock) -> None:

		self.clock = clock

	def send (self, message: mido.Message) -> None:

		print(f"{self.clock.tick_count:6d}  {message}")


def build_scale (scale_config: typing.Dict[str, typing.Any]) -> neumalang.scale.Scale:

	"""
	Build a scale from the ``scale`` config section.
	"""

	root = scale_config.get('root', 'C')
	mode = scale_config.get('mode', 'major')
	intervals = scale_config.get('intervals')

	if intervals is not None:
		return neumalang.scale.Scale(root, tuple(intervals), mode)

	return neumalang.scale.Scale.from_mode(root, mode)


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point for the neumalang command line.
	"""

	parser = argparse.ArgumentParser(prog="neumalang", description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
	parser.add_argument("notation",        nargs="?",                 help="Notation text (or use --file)")
	parser.add_argument("--file",          type=str,   default=None,  help="Read notation from a file")
	parser.add_argument("--config",        type=str,   default="config.yaml", help="YAML config file (default: config.yaml)")
	parser.add_argument("--root",          type=str,   default=None,  help="Scale root, e.g. C, F#3")
	parser.add_argument("--mode",          type=str,   default=None,  help="Scale mode, e.g. major, dorian")
	parser.add_argument("--base-duration", type=str,   default=None,  help="Beats per unmarked note (default: 1)")
	parser.add_argument("--play",          action="store_true",       help="Drive a clock and print the MIDI messages")
	parser.add_argument("--verbose",       action="store_true",       help="Enable debug logging")
	args = parser.parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	config = load_config(args.config)

	scale_config = dict(config.get('scale', {}))
	if args.root is not None:
		scale_config['root'] = args.root
	if args.mode is not None:
		scale_config['mode'] = args.mode
		scale_config.pop('intervals', None)

	base_duration = args.base_duration or config.get('decoder', {}).get('base_duration', 1)
	ticks_per_beat = config.get('sequencer', {}).get('ticks_per_beat', neumalang.constants.pulses.TICKS_PER_BEAT)
	channel = config.get('sequencer', {}).get('channel', 0)

	if args.file is not None:
		with open(args.file, 'r') as f:
			text = f.read()
	elif args.notation is not None:
		text = args.notation
	else:
		parser.error("notation text or --file is required")

	try:
		scale = build_scale(scale_config)
		events = neumalang.decoder.decode(neumalang.parser.parse(text), scale, base_duration=str(base_duration))
	except neumalang.errors.NeumalangError as e:
		logger.error(f"{e}")
		return 1

	for event in events:
		print(f"{str(event.start):>8}  {str(event.duration):>6}  pitch={event.pitch:3d}  velocity={event.velocity:3d}  {' '.join(event.articulations)}")

	if args.play:

		clock = neumalang.clock.Clock()

		try:
			sequencer = neumalang.sequencer.Sequencer(clock, output=_PrintOutput(clock), ticks_per_beat=ticks_per_beat, channel=channel)
			sequencer.play(events)

			clock.run()

			while clock.pending:
				clock.tick()
		except neumalang.errors.NeumalangError as e:
			logger.error(f"{e}")
			return 1
		finally:
			clock.terminate()

	return 0


if __name__ == "__main__":
	sys.exit(main())
