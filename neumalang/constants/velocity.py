"""Dynamics markings and MIDI velocities.

Velocity is the MIDI attack strength (0-127). Notation dynamics (``@p``,
``@ff`` ...) map onto eight evenly spaced levels from ppp = 16 to fff = 127.
"""

import typing


DYNAMIC_VELOCITIES: typing.Dict[str, int] = {
	"ppp": 16,
	"pp": 32,
	"p": 48,
	"mp": 64,
	"mf": 80,
	"f": 96,
	"ff": 112,
	"fff": 127,
}

# Ordered softest to loudest, used for one-step accents.
DYNAMIC_LEVELS: typing.List[str] = list(DYNAMIC_VELOCITIES)

DEFAULT_DYNAMIC = "mf"
DEFAULT_VELOCITY = DYNAMIC_VELOCITIES[DEFAULT_DYNAMIC]
