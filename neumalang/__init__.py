"""
neumalang - a notation, decoder and tick-driven scheduler for algorithmic music.

Neumalang is a compact text notation for melodic material. Text is parsed
into a tree, decoded against a scale into exact pitch/duration events, and
bound onto a logical clock that a host advances one tick at a time.

- **Notation.** Degrees (``0 2 4``) or note names (``C E G``), rests
  (``~``), absolute and relative durations (``:1/2``, ``*2``, ``/3``,
  dots), dynamics and articulations (``@ff``, ``@staccato``), octave
  shifts (``o1``), weighted groups (``(C:2 D E):3``) and parallel voices
  (``[C E | G B]``).
- **Scales.** Any root and positive interval steps. Degrees wrap with
  octave carry, so every integer degree resolves.
- **Exact timing.** All durations are fractions of a beat; groups divide
  their length with no rounding drift.
- **Deterministic clock.** No threads and no timers. Everything due runs
  inside the host's ``tick()`` call, in scheduling order.

Minimal example:

    ```python
    import neumalang

    scale = neumalang.Scale.from_mode("C", "major")
    events = neumalang.decode(neumalang.parse("C D (E F G):2 [C | E]"), scale)

    clock = neumalang.Clock()
    sequencer = neumalang.Sequencer(clock, output=port)
    sequencer.play(events)

    clock.run()
    for _ in range(6 * 24):
        clock.tick()
    ```

Package-level exports: ``parse``, ``tokenize``, ``decode``, ``PitchEvent``,
``Scale``, ``register_scale``, ``Clock``, ``ClockState``, ``Sequencer`` and
the error types.
"""

import neumalang.clock
import neumalang.decoder
import neumalang.errors
import neumalang.parser
import neumalang.scale
import neumalang.sequencer
import neumalang.tokenizer


parse = neumalang.parser.parse
tokenize = neumalang.tokenizer.tokenize
decode = neumalang.decoder.decode
PitchEvent = neumalang.decoder.PitchEvent
Scale = neumalang.scale.Scale
register_scale = neumalang.scale.register_scale
Clock = neumalang.clock.Clock
ClockState = neumalang.clock.ClockState
Sequencer = neumalang.sequencer.Sequencer

NeumalangError = neumalang.errors.NeumalangError
LexError = neumalang.errors.LexError
ParseError = neumalang.errors.ParseError
ConfigError = neumalang.errors.ConfigError
DispatchError = neumalang.errors.DispatchError
