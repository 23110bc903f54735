"""Exception hierarchy for neumalang.

Every error raised by the library derives from `NeumalangError`, so hosts can
catch the whole family with one clause:

- `LexError` - an unrecognised character in notation text.
- `ParseError` - a grammar violation, with the offending position and the
  construct the parser expected there.
- `ConfigError` - invalid construction or scheduling arguments (an empty
  scale, a negative schedule offset, a non-positive beat length).
- `DispatchError` - a scheduled clock action failed while `Clock.tick()` was
  dispatching it. The original exception is chained as ``__cause__``.
"""

import typing


class NeumalangError (Exception):

	"""Base class for all neumalang errors."""

	pass


class LexError (NeumalangError):

	"""
	Raised when the tokenizer meets a character it cannot start a token with.
	"""

	def __init__ (self, message: str, offset: int) -> None:

		super().__init__(f"{message} at offset {offset}")

		self.offset = offset


class ParseError (NeumalangError):

	"""
	Raised when a token stream does not match the notation grammar.

	Attributes:
		offset: UTF-8 byte offset of the offending token (the encoded length at end of input).
		expected: Human-readable name of the construct the parser was looking for.
	"""

	def __init__ (self, message: str, offset: int, expected: str) -> None:

		super().__init__(f"{message} at offset {offset} (expected {expected})")

		self.offset = offset
		self.expected = expected


class ConfigError (NeumalangError, ValueError):

	"""Invalid configuration or scheduling arguments."""

	pass


class DispatchError (NeumalangError):

	"""
	Raised out of `Clock.tick()` when a dispatched action fails.
	"""

	def __init__ (self, message: str, tick: int, action: typing.Callable[..., typing.Any]) -> None:

		super().__init__(message)

		self.tick = tick
		self.action = action
