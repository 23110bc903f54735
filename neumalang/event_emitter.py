import typing


CallbackType = typing.Callable[..., typing.Any]


class EventEmitter:

	"""
	A synchronous event emitter for clock lifecycle notifications.

	The clock emits ``"start"``, ``"tick"`` and ``"terminate"`` with the
	current tick as the only argument.
	"""

	def __init__ (self) -> None:

		self._listeners: typing.Dict[str, typing.List[CallbackType]] = {}


	def on (self, event_name: str, callback: CallbackType) -> None:

		"""
		Add ``callback`` to the listeners for ``event_name``.

		The same callback may be added more than once and is then called once
		per registration.
		"""

		self._listeners.setdefault(event_name, []).append(callback)


	def off (self, event_name: str, callback: CallbackType) -> None:

		"""
		Remove one registration of ``callback`` from ``event_name``.

		Raises ``ValueError`` if ``callback`` is not listening to that event.
		"""

		listeners = self._listeners.get(event_name, [])

		if callback not in listeners:
			raise ValueError(f"Callback not registered for event {event_name!r}")

		listeners.remove(callback)


	def emit (self, event_name: str, *args: typing.Any, **kwargs: typing.Any) -> None:

		"""
		Call every listener for ``event_name`` in registration order.

		The listener list is copied before the first call, so listeners added
		or removed while emitting take effect from the next emit. Listener
		exceptions propagate to the caller and later listeners do not run.
		"""

		for callback in list(self._listeners.get(event_name, [])):
			callback(*args, **kwargs)
