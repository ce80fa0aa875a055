from __future__ import annotations

import io
import typing

from . import Exceptions
from . import Logger
from . import Misc
from . import Stream


T = typing.TypeVar('T')


def close(*resources: typing.Any) -> None:
	"""
	Closes every given resource, skipping None
	Errors raised while closing are logged and suppressed, so every resource gets its close call
	:param resources: The objects to close; each must have a 'close' method
	"""

	for resource in resources:
		if resource is None:
			continue

		try:
			resource.close()
		except Exception as err:
			Logger.warn(f'Suppressed {type(err).__name__} while closing {resource!r}: {err}')


def __transfer__(source: typing.Any, destination: typing.Any, chunk_size: int) -> int:
	"""
	INTERNAL METHOD; DO NOT USE
	Moves chunks from source to destination until source reports end-of-stream
	"""

	count: int = 0

	while len(chunk := source.read(chunk_size)) > 0:
		destination.write(chunk)
		count += len(chunk)

	destination.flush()
	return count


def copy(source: typing.BinaryIO | typing.TextIO | io.IOBase, destination: typing.BinaryIO | typing.TextIO | io.IOBase, close_streams: bool = True, chunk_size: int = 2048) -> int:
	"""
	Copies a stream into another until end-of-stream
	Works for both byte and text streams, as long as both sides agree
	:param source: The readable stream
	:param destination: The writable stream
	:param close_streams: Whether both streams are closed afterwards; the destination is closed first and its close errors are raised
	:param chunk_size: The number of bytes (or characters) moved at a time
	:return: The number of bytes (or characters) copied
	:raises InvalidArgumentException: If 'chunk_size' is not an integer
	:raises ValueError: If 'chunk_size' is not positive
	"""

	Misc.check_type(copy, 'chunk_size', chunk_size, int)
	Misc.raise_ifn(chunk_size > 0, ValueError(f'Chunk size must be positive; got {chunk_size}'))

	if not close_streams:
		return __transfer__(source, destination, chunk_size)

	try:
		count: int = __transfer__(source, destination, chunk_size)
	except BaseException:
		close(destination, source)
		raise

	try:
		destination.close()
	finally:
		source.close()

	return count


class NullInputStream(Stream.Stream):
	"""
	[NullInputStream(Stream)] - Input stream that is always at end-of-stream
	"""

	def read(self, size: typing.Optional[int] = -1) -> bytes:
		if not self.__state__:
			raise Stream.StreamError('Stream is closed')

		return b''

	def read1(self, size: int = -1) -> bytes:
		return self.read(size)

	def readinto(self, buffer: bytearray | memoryview) -> int:
		self.read()
		return 0

	def readable(self) -> bool:
		return True


class NullOutputStream(Stream.Stream):
	"""
	[NullOutputStream(Stream)] - Output stream discarding everything written to it
	"""

	def write(self, data: bytes | bytearray | memoryview | int) -> int:
		if not self.__state__:
			raise Stream.StreamError('Stream is closed')

		return len(Misc.to_bytes(NullOutputStream.write, data))

	def writable(self) -> bool:
		return True


def null_input() -> NullInputStream:
	return NullInputStream()


def null_output() -> NullOutputStream:
	return NullOutputStream()


class ConnectedStream(Stream.Stream):
	"""
	[ConnectedStream(Stream)] - Pass-through stream that also closes a second stream when it is closed
	"""

	def __init__(self, primary: io.IOBase | typing.BinaryIO, secondary: typing.Any):
		"""
		[ConnectedStream(Stream)] - Pass-through stream that also closes a second stream when it is closed
		- Constructor -
		:param primary: (io.IOBase) The stream all reads and writes go to
		:param secondary: (ANY) The object closed together with the primary stream
		:raises InvalidArgumentException: If 'secondary' cannot be closed
		"""

		Misc.raise_ifn(hasattr(secondary, 'close'), Exceptions.InvalidArgumentException(ConnectedStream.__init__, 'secondary', type(secondary)))
		super().__init__()
		self.__primary__: io.IOBase = primary
		self.__secondary__: typing.Any = secondary

	def read(self, size: typing.Optional[int] = -1) -> bytes:
		return self.__primary__.read(size)

	def read1(self, size: int = -1) -> bytes:
		reader: typing.Callable = getattr(self.__primary__, 'read1', self.__primary__.read)
		return reader(size)

	def readinto(self, buffer: bytearray | memoryview) -> int:
		return self.__primary__.readinto(buffer)

	def write(self, data: bytes | bytearray | memoryview) -> int:
		return self.__primary__.write(data)

	def flush(self) -> None:
		if self.__state__:
			self.__primary__.flush()

	def close(self) -> None:
		"""
		Closes the secondary stream then the primary stream
		Errors from either are logged and suppressed
		"""

		if self.__state__:
			super().close()
			close(self.__secondary__, self.__primary__)

	def readable(self) -> bool:
		return self.__primary__.readable()

	def writable(self) -> bool:
		return self.__primary__.writable()


def connect(primary: io.IOBase | typing.BinaryIO, secondary: typing.Any) -> ConnectedStream:
	"""
	Wraps a stream so that closing it also closes another stream
	:param primary: The stream to wrap
	:param secondary: The stream closed along with it
	:return: The connected stream
	"""

	return ConnectedStream(primary, secondary)


def tee(first: typing.Optional[io.IOBase], second: typing.Optional[io.IOBase]) -> Stream.TeeStream:
	"""
	Creates an output stream that simultaneously writes to two streams
	:param first: The first destination
	:param second: The second destination
	:return: The tee stream
	"""

	return Stream.TeeStream(first, second)


class ResourceList(list):
	"""
	[ResourceList(list)] - List of closeable objects that are all closed when the list is closed
	Use as a context manager to close everything on every exit path
	"""

	def __enter__(self) -> ResourceList:
		return self

	def __exit__(self, exc_type, exc_val: typing.Any, exc_tb) -> None:
		self.close()

	def add(self, resource: T) -> T:
		"""
		Appends a resource to this list
		:param resource: The resource to track
		:return: The same resource
		:raises InvalidArgumentException: If 'resource' has no 'close' method
		"""

		Misc.raise_ifn(hasattr(resource, 'close'), Exceptions.InvalidArgumentException(ResourceList.add, 'resource', type(resource)))
		self.append(resource)
		return resource

	def close(self) -> None:
		"""
		Closes all elements, most recently added first, then empties the list
		Errors raised while closing an element are logged and suppressed
		"""

		close(*reversed(self))
		self.clear()
