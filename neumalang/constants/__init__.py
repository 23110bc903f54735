"""Constants for neumalang.

- ``neumalang.constants.pulses`` - Tick resolution used when binding beats to the clock.
- ``neumalang.constants.velocity`` - Dynamics markings and their MIDI velocities.
"""
