from __future__ import annotations

import io
import threading
import typing

from . import Exceptions
from . import Logger
from . import Misc
from . import Stream


class PipeBuffer:
	"""
	[PipeBuffer] - Thread-safe FIFO byte buffer shared by one writing end and one reading end
	Bytes written on the sink side become readable on the source side in the same order
	The two ends close independently:
	 ... Closing the writer lets the reader drain what is buffered, then read end-of-stream (b'')
	 ... Closing the reader discards what is buffered and makes every write fail with ClosedPipeError
	"""

	DEFAULT_LENGTH: int = 8192
	MINIMUM_LENGTH: int = 64

	def __init__(self, max_length: int = DEFAULT_LENGTH):
		"""
		[PipeBuffer] - Thread-safe FIFO byte buffer shared by one writing end and one reading end
		- Constructor -
		:param max_length: (int) The capacity in bytes; negative for unbounded, raised to 64 if smaller
		:raises InvalidArgumentException: If 'max_length' is not an integer
		"""

		Misc.raise_if(isinstance(max_length, bool), Exceptions.InvalidArgumentException(PipeBuffer.__init__, 'max_length', type(max_length), (int,)))
		Misc.check_type(PipeBuffer.__init__, 'max_length', max_length, int)
		self.__max_len__: int = -1 if max_length < 0 else max(int(max_length), PipeBuffer.MINIMUM_LENGTH)
		self.__buffer__: bytearray = bytearray()
		self.__lock__: threading.Lock = threading.Lock()
		self.__not_empty__: threading.Condition = threading.Condition(self.__lock__)
		self.__not_full__: threading.Condition = threading.Condition(self.__lock__)
		self.__writer_closed__: bool = False
		self.__reader_closed__: bool = False
		self.__reusable__: bool = False
		self.__external__: typing.Optional[BaseException] = None

	def __repr__(self) -> str:
		capacity: str = 'unbounded' if self.__max_len__ < 0 else str(self.__max_len__)
		return f'<{type(self).__name__} buffered={len(self.__buffer__)} capacity={capacity} writer_closed={self.__writer_closed__} reader_closed={self.__reader_closed__}>'

	def __has_room__(self, count: int) -> bool:
		"""
		INTERNAL METHOD; DO NOT USE
		Lock must be held
		A write larger than the whole capacity fits once the buffer is empty
		"""

		return self.__max_len__ < 0 or len(self.__buffer__) + count <= self.__max_len__ or len(self.__buffer__) == 0

	def __reset__(self) -> None:
		"""
		INTERNAL METHOD; DO NOT USE
		Lock must be held
		Clears the buffer and reopens both ends (reusable mode)
		"""

		self.__buffer__.clear()
		self.__writer_closed__ = False
		self.__reader_closed__ = False
		self.__external__ = None
		self.__not_full__.notify_all()
		self.__not_empty__.notify_all()

	def write(self, data: bytes | bytearray | memoryview | int) -> int:
		"""
		Appends bytes to the buffer
		Blocks while a bounded buffer lacks room for all the bytes
		The bytes are appended all together or not at all
		:param data: (bytes | int) The bytes (or single byte) to append
		:return: (int) The number of bytes appended
		:raises ClosedPipeError: If either end of the pipe is closed, including while blocked
		:raises InvalidArgumentException: If 'data' is neither bytes-like nor an integer
		:raises ValueError: If an integer is outside the range of a byte
		"""

		data: bytes = Misc.to_bytes(PipeBuffer.write, data)

		with self.__lock__:
			while True:
				if self.__writer_closed__:
					raise Stream.ClosedPipeError('Pipe is closed for writing')
				elif self.__reader_closed__:
					raise Stream.ClosedPipeError('No consumer; the reading end of the pipe is closed')
				elif self.__has_room__(len(data)):
					break

				self.__not_full__.wait()

			if len(data) > 0:
				self.__buffer__.extend(data)
				self.__not_empty__.notify_all()

			return len(data)

	def read(self, max_bytes: typing.Optional[int] = -1) -> bytes:
		"""
		Removes and returns the next available bytes
		Blocks only while the buffer is empty and the writing end is open
		:param max_bytes: (int?) The most bytes to return; negative or None for everything currently buffered
		:return: (bytes) Between 1 and 'max_bytes' bytes, or b'' once the writing end is closed and the buffer is drained
		:raises ClosedPipeError: If the reading end of the pipe is closed
		:raises StreamError: If an external exception was attached to this pipe
		"""

		max_bytes = -1 if max_bytes is None else max_bytes

		with self.__lock__:
			while True:
				if self.__reader_closed__:
					raise Stream.ClosedPipeError('Pipe is closed for reading')
				elif self.__external__ is not None:
					raise Stream.StreamError(f'Pipe producer failed: {self.__external__}') from self.__external__
				elif max_bytes == 0 or len(self.__buffer__) > 0 or self.__writer_closed__:
					break

				self.__not_empty__.wait()

			count: int = len(self.__buffer__) if max_bytes < 0 else min(max_bytes, len(self.__buffer__))
			data: bytes = bytes(self.__buffer__[:count])
			del self.__buffer__[:count]

			if count > 0:
				self.__not_full__.notify_all()

			return data

	def close_writer(self) -> None:
		"""
		Marks that no more bytes will be written and wakes any blocked reader
		In reusable mode the pipe is reset instead
		Closing more than once does nothing
		"""

		with self.__lock__:
			if self.__reusable__:
				self.__reset__()
			elif not self.__writer_closed__:
				self.__writer_closed__ = True
				self.__not_empty__.notify_all()
				self.__not_full__.notify_all()

	def close_reader(self) -> None:
		"""
		Marks that no more bytes will be read, discards buffered bytes and wakes any blocked writer
		In reusable mode the pipe is reset instead
		Closing more than once does nothing
		"""

		with self.__lock__:
			if self.__reusable__:
				self.__reset__()
			elif not self.__reader_closed__:
				self.__reader_closed__ = True
				self.__buffer__.clear()
				self.__not_full__.notify_all()
				self.__not_empty__.notify_all()

	def abort(self) -> None:
		"""
		Closes both ends and leaves reusable mode
		The pipe cannot be used again
		"""

		with self.__lock__:
			if not (self.__writer_closed__ and self.__reader_closed__):
				Logger.debug(f'Aborting {self!r}')

			self.__reusable__ = False
			self.__writer_closed__ = True
			self.__reader_closed__ = True
			self.__buffer__.clear()
			self.__not_full__.notify_all()
			self.__not_empty__.notify_all()

	def set_external_exception(self, err: BaseException) -> None:
		"""
		Attaches an error that the reading end raises (as StreamError) on its next read
		:param err: The error to attach
		:raises InvalidArgumentException: If 'err' is not an exception
		"""

		Misc.check_type(PipeBuffer.set_external_exception, 'err', err, BaseException)

		with self.__lock__:
			self.__external__ = err
			self.__not_empty__.notify_all()

	def available(self) -> int:
		"""
		:return: (int) The number of bytes that can be read without blocking
		"""

		with self.__lock__:
			return len(self.__buffer__)

	@property
	def max_length(self) -> int:
		"""
		:return: (int) The capacity in bytes, or -1 if unbounded
		"""

		return self.__max_len__

	@property
	def writer_closed(self) -> bool:
		return self.__writer_closed__

	@property
	def reader_closed(self) -> bool:
		return self.__reader_closed__

	@property
	def reusable(self) -> bool:
		"""
		When reusable, closing either end clears the buffer and reopens both ends
		:return: (bool) Whether this pipe is in reusable mode
		"""

		return self.__reusable__

	@reusable.setter
	def reusable(self, reusable: bool) -> None:
		with self.__lock__:
			self.__reusable__ = bool(reusable)


class PipeSource(Stream.Stream):
	"""
	[PipeSource(Stream)] - The readable end of a PipeBuffer
	"""

	def __init__(self, pipe: PipeBuffer):
		"""
		[PipeSource(Stream)] - The readable end of a PipeBuffer
		- Constructor -
		:param pipe: (PipeBuffer) The shared pipe buffer
		:raises InvalidArgumentException: If 'pipe' is not a PipeBuffer
		"""

		Misc.check_type(PipeSource.__init__, 'pipe', pipe, PipeBuffer)
		super().__init__()
		self.__pipe__: PipeBuffer = pipe

	def __pull__(self, size: int) -> bytes:
		"""
		INTERNAL METHOD; DO NOT USE
		Every read on this stream goes through here
		"""

		return self.__pipe__.read(size)

	def read(self, size: typing.Optional[int] = -1) -> bytes:
		"""
		Reads the next available bytes, blocking while none are buffered and the writing end is open
		:param size: (int?) The most bytes to return; if negative or None, reads until end-of-stream
		:return: (bytes) The bytes read, or b'' at end-of-stream
		:raises ClosedPipeError: If this end has been closed
		"""

		if size is None or size < 0:
			return self.readall()

		return self.__pull__(size)

	def read1(self, size: int = -1) -> bytes:
		"""
		Reads the next available bytes with at most one wait
		:param size: (int) The most bytes to return; if negative, everything currently buffered
		:return: (bytes) The bytes read, or b'' at end-of-stream
		:raises ClosedPipeError: If this end has been closed
		"""

		return self.__pull__(-1 if size is None else size)

	def readall(self) -> bytes:
		"""
		Reads until end-of-stream
		:return: (bytes) Everything remaining in the stream
		:raises ClosedPipeError: If this end has been closed
		"""

		chunks: list[bytes] = []

		while len(chunk := self.__pull__(-1)) > 0:
			chunks.append(chunk)

		return b''.join(chunks)

	def readinto(self, buffer: bytearray | memoryview) -> int:
		view: memoryview = memoryview(buffer).cast('B')
		data: bytes = self.__pull__(len(view))
		view[:len(data)] = data
		return len(data)

	def readinto1(self, buffer: bytearray | memoryview) -> int:
		return self.readinto(buffer)

	def available(self) -> int:
		"""
		:return: (int) The number of bytes that can be read without blocking
		"""

		return self.__pipe__.available()

	def close(self) -> None:
		"""
		Closes the reading end
		Buffered bytes are discarded and the writing end starts failing with ClosedPipeError
		"""

		self.__pipe__.close_reader()

		if not self.__pipe__.reusable:
			super().close()

	def readable(self) -> bool:
		return True

	@property
	def closed(self) -> bool:
		return self.__pipe__.reader_closed

	@property
	def pipe(self) -> PipeBuffer:
		return self.__pipe__


class PipeSink(Stream.Stream):
	"""
	[PipeSink(Stream)] - The writable end of a PipeBuffer
	"""

	def __init__(self, pipe: PipeBuffer):
		"""
		[PipeSink(Stream)] - The writable end of a PipeBuffer
		- Constructor -
		:param pipe: (PipeBuffer) The shared pipe buffer
		:raises InvalidArgumentException: If 'pipe' is not a PipeBuffer
		"""

		Misc.check_type(PipeSink.__init__, 'pipe', pipe, PipeBuffer)
		super().__init__()
		self.__pipe__: PipeBuffer = pipe

	def __push__(self, data: bytes) -> int:
		"""
		INTERNAL METHOD; DO NOT USE
		Every write on this stream goes through here
		"""

		return self.__pipe__.write(data)

	def write(self, data: bytes | bytearray | memoryview | int) -> int:
		"""
		Writes bytes to the pipe, blocking while a bounded pipe lacks room
		:param data: (bytes | int) The bytes (or single byte) to write
		:return: (int) The number of bytes written
		:raises ClosedPipeError: If either end of the pipe is closed
		"""

		return self.__push__(Misc.to_bytes(PipeSink.write, data))

	def writelines(self, lines: typing.Iterable[bytes | bytearray | memoryview]) -> None:
		for line in lines:
			self.write(line)

	def close(self) -> None:
		"""
		Closes the writing end
		The reading end may still drain buffered bytes before seeing end-of-stream
		"""

		self.__pipe__.close_writer()

		if not self.__pipe__.reusable:
			super().close()

	def writable(self) -> bool:
		return True

	@property
	def closed(self) -> bool:
		return self.__pipe__.writer_closed

	@property
	def pipe(self) -> PipeBuffer:
		return self.__pipe__


class InputOutputStream:
	"""
	[InputOutputStream] - Pairs a readable and a writable stream over one pipe buffer
	One thread may write to 'output_stream' while another reads the same bytes from 'input_stream'
	"""

	def __init__(self, max_length: int = PipeBuffer.DEFAULT_LENGTH):
		"""
		[InputOutputStream] - Pairs a readable and a writable stream over one pipe buffer
		- Constructor -
		:param max_length: (int) The pipe capacity in bytes; negative for unbounded
		"""

		self.__pipe__: PipeBuffer = PipeBuffer(max_length)
		self.__source__: PipeSource = PipeSource(self.__pipe__)
		self.__sink__: PipeSink = PipeSink(self.__pipe__)

	def __enter__(self) -> InputOutputStream:
		return self

	def __exit__(self, exc_type, exc_val: typing.Any, exc_tb) -> None:
		self.abort()

	def abort(self) -> None:
		"""
		Closes both streams; this instance cannot be reused afterwards
		"""

		self.__pipe__.abort()

	def set_external_exception(self, err: BaseException) -> None:
		"""
		Attaches an error that the input stream raises on its next read
		:param err: The error to attach
		"""

		self.__pipe__.set_external_exception(err)

	def available(self) -> int:
		return self.__pipe__.available()

	@property
	def input_stream(self) -> PipeSource:
		return self.__source__

	@property
	def output_stream(self) -> PipeSink:
		return self.__sink__

	@property
	def reusable(self) -> bool:
		return self.__pipe__.reusable

	@reusable.setter
	def reusable(self, reusable: bool) -> None:
		self.__pipe__.reusable = reusable

	@property
	def pipe(self) -> PipeBuffer:
		return self.__pipe__


class InvertedInputStream(PipeSource):
	"""
	[InvertedInputStream(PipeSource)] - An input stream yielding whatever is written to its associated output stream
	The output stream should be written from a different thread than the one reading
	"""

	def __init__(self, max_length: int = PipeBuffer.DEFAULT_LENGTH):
		pipe: PipeBuffer = PipeBuffer(max_length)
		super().__init__(pipe)
		self.__sink__: PipeSink = PipeSink(pipe)

	@property
	def output_stream(self) -> PipeSink:
		"""
		:return: (PipeSink) The associated output stream
		"""

		return self.__sink__


class InvertedOutputStream(PipeSink):
	"""
	[InvertedOutputStream(PipeSink)] - An output stream whose written bytes appear in its associated input stream
	The input stream should be read from a different thread than the one writing
	"""

	def __init__(self, max_length: int = PipeBuffer.DEFAULT_LENGTH):
		pipe: PipeBuffer = PipeBuffer(max_length)
		super().__init__(pipe)
		self.__source__: PipeSource = PipeSource(pipe)

	@property
	def input_stream(self) -> PipeSource:
		"""
		:return: (PipeSource) The associated input stream
		"""

		return self.__source__


class InvertedWriter(io.TextIOWrapper):
	"""
	[InvertedWriter(io.TextIOWrapper)] - A text writer whose written text appears in its associated reader
	Writes pass straight through to the pipe; the reader should be used from a different thread
	"""

	def __init__(self, max_length: int = PipeBuffer.DEFAULT_LENGTH, encoding: str = 'utf-8'):
		"""
		[InvertedWriter(io.TextIOWrapper)] - A text writer whose written text appears in its associated reader
		- Constructor -
		:param max_length: (int) The pipe capacity in bytes; negative for unbounded
		:param encoding: (str) The text encoding used on both ends
		"""

		pipe: PipeBuffer = PipeBuffer(max_length)
		super().__init__(PipeSink(pipe), encoding=encoding, write_through=True)
		self.__reader__: io.TextIOWrapper = io.TextIOWrapper(PipeSource(pipe), encoding=encoding)

	@property
	def reader(self) -> io.TextIOWrapper:
		"""
		:return: (io.TextIOWrapper) The associated text reader
		"""

		return self.__reader__
