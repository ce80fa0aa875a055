from __future__ import annotations

import io
import typing

from . import Exceptions
from . import Misc


class StreamError(IOError):
	pass


class ClosedPipeError(StreamError):
	pass


class Stream(io.BufferedIOBase):
	"""
	[Stream(io.BufferedIOBase)] - Base class for CommonMethods byte streams
	"""

	def __init__(self):
		"""
		[Stream(io.BufferedIOBase)] - Base class for CommonMethods byte streams
		- Constructor -
		"""

		super().__init__()
		self.__state__: bool = True

	def __enter__(self) -> Stream:
		return self

	def __exit__(self, exc_type, exc_val: typing.Any, exc_tb) -> None:
		self.close()

	def close(self) -> None:
		"""
		Closes the stream
		Closing an already closed stream does nothing
		"""

		if self.__state__:
			super().close()
			self.__state__ = False

	def flush(self) -> None:
		pass

	def readable(self) -> bool:
		return False

	def writable(self) -> bool:
		return False

	def seekable(self) -> bool:
		return False

	@property
	def closed(self) -> bool:
		return not self.__state__


class TeeStream(Stream):
	"""
	[TeeStream(Stream)] - Output stream simultaneously writing to two destination streams
	Either destination may be None, in which case it is skipped
	"""

	def __init__(self, first: typing.Optional[io.IOBase | typing.BinaryIO] = None, second: typing.Optional[io.IOBase | typing.BinaryIO] = None):
		"""
		[TeeStream(Stream)] - Output stream simultaneously writing to two destination streams
		- Constructor -
		:param first: (io.IOBase?) The first destination
		:param second: (io.IOBase?) The second destination
		"""

		super().__init__()
		self.first = first
		self.second = second

	def __targets__(self) -> tuple[io.IOBase, ...]:
		return tuple(target for target in (self.__first__, self.__second__) if target is not None)

	def write(self, data: bytes | bytearray | memoryview | int) -> int:
		"""
		Writes data to both destinations, first then second
		:param data: (bytes | int) The bytes (or single byte) to write
		:return: (int) The number of bytes written
		:raises StreamError: If this stream is closed
		"""

		if not self.__state__:
			raise StreamError('Stream is closed')

		data: bytes = Misc.to_bytes(TeeStream.write, data)

		for target in self.__targets__():
			target.write(data)

		return len(data)

	def flush(self) -> None:
		if not self.__state__:
			return

		for target in self.__targets__():
			target.flush()

	def close(self) -> None:
		"""
		Closes this stream and both destinations
		If closing the first destination fails, its error is raised after the second is closed
		"""

		if not self.__state__:
			return

		self.__state__ = False
		first_error: typing.Optional[BaseException] = None

		if self.__first__ is not None:
			try:
				self.__first__.close()
			except Exception as err:
				first_error = err

		try:
			if self.__second__ is not None:
				self.__second__.close()
		finally:
			# Destinations are not flushed here; each flushes on its own close
			io.BufferedIOBase.close(self)

		if first_error is not None:
			raise first_error

	def writable(self) -> bool:
		return True

	@property
	def first(self) -> typing.Optional[io.IOBase]:
		"""
		:return: (io.IOBase?) The first destination
		"""

		return self.__first__

	@first.setter
	def first(self, stream: typing.Optional[io.IOBase]) -> None:
		Misc.raise_ifn(stream is None or hasattr(stream, 'write'), Exceptions.InvalidArgumentException(TeeStream.__init__, 'first', type(stream), (io.IOBase,)))
		self.__first__ = stream

	@property
	def second(self) -> typing.Optional[io.IOBase]:
		"""
		:return: (io.IOBase?) The second destination
		"""

		return self.__second__

	@second.setter
	def second(self, stream: typing.Optional[io.IOBase]) -> None:
		Misc.raise_ifn(stream is None or hasattr(stream, 'write'), Exceptions.InvalidArgumentException(TeeStream.__init__, 'second', type(stream), (io.IOBase,)))
		self.__second__ = stream
