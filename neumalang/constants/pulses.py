"""Tick-based timing constants.

The sequencer binds decoded beats to clock ticks at **24 ticks per quarter
note**, the MIDI clock resolution. A host driving `Clock.tick()` from a MIDI
clock input therefore advances one tick per incoming clock message.

These constants are the number of ticks in each standard note value.
"""

MIDI_THIRTYSECOND_NOTE = 3
MIDI_SIXTEENTH_NOTE = 6
MIDI_EIGHTH_NOTE = 12
MIDI_QUARTER_NOTE = 24
MIDI_HALF_NOTE = 48
MIDI_WHOLE_NOTE = 96

TICKS_PER_BEAT = MIDI_QUARTER_NOTE
