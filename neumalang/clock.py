"""Externally driven logical clock and callback scheduler.

The `Clock` never generates time on its own. A host (an audio callback, a
MIDI clock input, a test) calls `tick()` once per logical step and every
callback that has come due runs inside that call, on the caller's thread.

**Lifecycle:**

	STOPPED --run()--> RUNNING --terminate()--> TERMINATED
	   |                                            ^
	   +------------------terminate()---------------+

- ``STOPPED`` is the initial state. Callbacks may be scheduled, but `tick()`
  does nothing.
- ``RUNNING``: each `tick()` dispatches every callback due at or before the
  current tick, in (due tick, scheduling order) order, then advances the
  counter by one. Calling `run()` again only adds its action.
- ``TERMINATED`` is final. The queue is discarded and every later `run()`,
  `tick()` or `schedule()` call is ignored.

**Failures** are fail-fast: if an action raises, `tick()` raises
`DispatchError` chained to the original exception. The failing action and
everything dispatched before it are gone from the queue and the counter has
still advanced; callbacks after it stay queued and run on the next tick.

Example:
	```python
	clock = Clock()
	fired = []

	def pulse (tick):
		fired.append(tick)
		clock.schedule(pulse, delay=1)

	clock.run(pulse)
	clock.tick()
	clock.tick()
	fired  # → [0, 1]
	```

The clock does no locking; a host that drives it from several threads must
serialise the calls itself.
"""

import dataclasses
import enum
import heapq
import itertools
import logging
import typing

import neumalang.errors
import neumalang.event_emitter


logger = logging.getLogger(__name__)

Action = typing.Callable[[int], typing.Any]


class ClockState (enum.Enum):

	STOPPED = "stopped"
	RUNNING = "running"
	TERMINATED = "terminated"


@dataclasses.dataclass
class ScheduledCallback:

	"""
	An action waiting in the clock queue.
	"""

	due_tick: int
	action: Action
	index: int


class Clock:

	"""
	A single-owner logical clock advanced only by `tick()`.

	Events (see `on()`):
		``"start"`` - entered RUNNING; listeners get the current tick.
		``"tick"`` - a tick was processed; listeners get that tick.
		``"terminate"`` - entered TERMINATED; listeners get the final tick.
	"""

	def __init__ (self) -> None:

		"""
		Create a stopped clock at tick 0 with an empty queue.
		"""

		self._state = ClockState.STOPPED
		self._tick_count = 0
		self._queue: typing.List[typing.Tuple[int, int, ScheduledCallback]] = []
		self._counter = itertools.count()
		self.events = neumalang.event_emitter.EventEmitter()


	@property
	def state (self) -> ClockState:

		return self._state


	@property
	def running (self) -> bool:

		return self._state is ClockState.RUNNING


	@property
	def terminated (self) -> bool:

		return self._state is ClockState.TERMINATED


	@property
	def tick_count (self) -> int:

		"""The tick the next `tick()` call will process."""

		return self._tick_count


	@property
	def pending (self) -> int:

		"""Number of queued callbacks."""

		return len(self._queue)


	def on (self, event_name: str, callback: typing.Callable[..., typing.Any]) -> None:

		"""
		Register a listener for a lifecycle event.
		"""

		self.events.on(event_name, callback)


	def schedule (self, action: Action, delay: int = 0) -> typing.Optional[ScheduledCallback]:

		"""
		Queue ``action`` to run ``delay`` ticks from now.

		A delay of 0 makes the action due on the next `tick()` call (or, when
		called from inside a dispatched action, later in the same tick).

		Returns:
			The queued entry, or None when the clock is terminated.

		Raises:
			ConfigError: If ``delay`` is negative.
		"""

		if delay < 0:
			raise neumalang.errors.ConfigError(f"Schedule delay cannot be negative, got {delay}")

		return self._push(self._tick_count + delay, action)


	def schedule_at (self, tick: int, action: Action) -> typing.Optional[ScheduledCallback]:

		"""
		Queue ``action`` for an absolute tick.

		Raises:
			ConfigError: If ``tick`` is already in the past.
		"""

		if tick < self._tick_count:
			raise neumalang.errors.ConfigError(f"Cannot schedule at tick {tick}, clock is already at tick {self._tick_count}")

		return self._push(tick, action)


	def _push (self, due_tick: int, action: Action) -> typing.Optional[ScheduledCallback]:

		if self._state is ClockState.TERMINATED:
			logger.debug(f"Clock terminated - ignoring callback scheduled for tick {due_tick}")
			return None

		scheduled = ScheduledCallback(due_tick=due_tick, action=action, index=next(self._counter))
		heapq.heappush(self._queue, (scheduled.due_tick, scheduled.index, scheduled))

		logger.debug(f"Scheduled callback for tick {due_tick}, queue size: {len(self._queue)}")

		return scheduled


	def run (self, action: typing.Optional[Action] = None) -> None:

		"""
		Start the clock, optionally queuing ``action`` for the next tick.

		When already running the state is left as it is and ``action`` is
		appended after everything already queued. Ignored once terminated.
		"""

		if self._state is ClockState.TERMINATED:
			logger.debug("Clock terminated - run() ignored")
			return

		if action is not None:
			self.schedule(action)

		if self._state is ClockState.RUNNING:
			return

		self._state = ClockState.RUNNING

		logger.info(f"Clock started at tick {self._tick_count}")

		self.events.emit("start", self._tick_count)


	def tick (self) -> None:

		"""
		Dispatch everything due now and advance the counter by one.

		Does nothing unless the clock is running.

		Raises:
			DispatchError: If a dispatched action raises.
		"""

		if self._state is not ClockState.RUNNING:
			return

		current = self._tick_count

		try:
			while self._queue and self._queue[0][0] <= current:

				_, _, scheduled = heapq.heappop(self._queue)

				try:
					scheduled.action(current)
				except Exception as exc:
					raise neumalang.errors.DispatchError(
						f"Action {scheduled.action!r} failed at tick {current}: {exc}",
						current,
						scheduled.action
					) from exc

				# An action may terminate the clock; its queue is already gone.
				if self._state is not ClockState.RUNNING:
					break

		finally:
			if self._state is ClockState.RUNNING:
				self._tick_count = current + 1

		if self._state is ClockState.RUNNING:
			self.events.emit("tick", current)


	def terminate (self) -> None:

		"""
		Enter the final state and drop every pending callback.
		"""

		if self._state is ClockState.TERMINATED:
			return

		dropped = len(self._queue)

		self._state = ClockState.TERMINATED
		self._queue = []

		logger.info(f"Clock terminated at tick {self._tick_count} ({dropped} pending callbacks dropped)")

		self.events.emit("terminate", self._tick_count)
