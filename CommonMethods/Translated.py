from __future__ import annotations

import io
import threading
import typing

from . import Concurrent
from . import IO
from . import Logger
from . import Pipe
from . import Stream


class Translation:
	"""
	[Translation] - Runs a stream translation once, on a daemon thread, the first time it is needed
	When the translation raises, the error is attached to the pipe so the consumer receives it
	The translation's input and output are closed when it ends, however it ends
	"""

	def __init__(self, pipe: Pipe.PipeBuffer, translate: typing.Callable[[], None], resources: typing.Callable[[], tuple[typing.Any, ...]]):
		"""
		[Translation] - Runs a stream translation once, on a daemon thread, the first time it is needed
		- Constructor -
		:param pipe: (PipeBuffer) The pipe bridging the translation and its consumer
		:param translate: (CALLABLE) The translation routine
		:param resources: (CALLABLE) Returns the streams to close once translation ends
		"""

		self.__pipe__: Pipe.PipeBuffer = pipe
		self.__translate__: typing.Callable[[], None] = translate
		self.__resources__: typing.Callable[[], tuple[typing.Any, ...]] = resources
		self.__lock__: threading.Lock = threading.Lock()
		self.__promise__: typing.Optional[Concurrent.ThreadedPromise] = None

	def __run__(self) -> None:
		"""
		INTERNAL METHOD; DO NOT USE
		Body of the translation thread
		"""

		try:
			self.__translate__()
		except Stream.ClosedPipeError as err:
			Logger.debug(f'Translation stopped; consumer went away: {err}')
			raise
		except Exception as err:
			Logger.error(f'Translation failed with {type(err).__name__}: {err}')
			self.__pipe__.set_external_exception(err)
			raise
		finally:
			IO.close(*self.__resources__())

	def start(self) -> Concurrent.ThreadedPromise:
		"""
		Starts the translation thread unless it was already started
		:return: (ThreadedPromise) The promise of the translation's completion
		"""

		with self.__lock__:
			if self.__promise__ is None:
				self.__promise__ = Concurrent.ThreadedFunction(self.__run__, daemon=True, name=f'Translation-{id(self):x}')()

			return self.__promise__

	def abandon(self) -> None:
		"""
		Closes the translation's streams if it was never started; afterwards it will not start
		"""

		with self.__lock__:
			if self.__promise__ is not None:
				return

			self.__promise__ = Concurrent.ThreadedPromise()
			self.__promise__.resolve(None)

		IO.close(*self.__resources__())

	def finish(self) -> None:
		"""
		Waits for the translation to end
		:raises StreamError: If the translation failed
		"""

		promise: Concurrent.ThreadedPromise = self.start()
		promise.wait(throw_err=False)

		if promise.has_erred():
			err: BaseException = promise.response(False)
			raise Stream.StreamError(f'Translation failed: {err}') from err

	@property
	def started(self) -> bool:
		return self.__promise__ is not None


class __TranslatedSource__(Pipe.PipeSource):
	"""
	[__TranslatedSource__(PipeSource)] - Pipe source that starts its translation on first read
	"""

	def __init__(self, pipe: Pipe.PipeBuffer, translation: Translation):
		super().__init__(pipe)
		self.__translation__: Translation = translation

	def __pull__(self, size: int) -> bytes:
		self.__translation__.start()
		return super().__pull__(size)

	def available(self) -> int:
		"""
		Starts the translation if needed
		:return: (int) The number of translated bytes that can be read without blocking
		"""

		self.__translation__.start()
		return super().available()

	def close(self) -> None:
		self.__translation__.abandon()
		super().close()


class __TranslatedSink__(Pipe.PipeSink):
	"""
	[__TranslatedSink__(PipeSink)] - Pipe sink that starts its translation on first write and waits for it on close
	"""

	def __init__(self, pipe: Pipe.PipeBuffer, translation: Translation):
		super().__init__(pipe)
		self.__translation__: Translation = translation

	def __push__(self, data: bytes) -> int:
		self.__translation__.start()
		return super().__push__(data)

	def close(self) -> None:
		"""
		Closes the writing end and waits for the translation to drain it
		:raises StreamError: If the translation failed
		"""

		if self.closed:
			return

		self.__translation__.start()
		super().close()
		self.__translation__.finish()


class TranslatedInputStream(__TranslatedSource__):
	"""
	[TranslatedInputStream(PipeSource)] - Input stream translating another input stream on-the-fly
	Subclasses implement 'translate', reading raw bytes from 'self.input' and writing translated bytes to 'self.output'
	Translation runs on its own thread from the first read; if it raises, the reader receives a StreamError
	"""

	def __init__(self, source: io.IOBase | typing.BinaryIO, max_length: int = Pipe.PipeBuffer.DEFAULT_LENGTH):
		"""
		[TranslatedInputStream(PipeSource)] - Input stream translating another input stream on-the-fly
		- Constructor -
		:param source: (io.IOBase) The raw input stream
		:param max_length: (int) The capacity in bytes of the pipe carrying translated bytes
		"""

		pipe: Pipe.PipeBuffer = Pipe.PipeBuffer(max_length)
		self.input: io.IOBase | typing.BinaryIO = source
		self.output: Pipe.PipeSink = Pipe.PipeSink(pipe)
		super().__init__(pipe, Translation(pipe, self.translate, lambda: (self.input, self.output)))

	def translate(self) -> None:
		raise NotImplementedError()


class TranslatedOutputStream(__TranslatedSink__):
	"""
	[TranslatedOutputStream(PipeSink)] - Output stream translating what is written to it into another output stream
	Subclasses implement 'translate', reading raw bytes from 'self.input' and writing translated bytes to 'self.output'
	Closing this stream waits for translation to finish and raises StreamError if it failed
	"""

	def __init__(self, destination: io.IOBase | typing.BinaryIO, max_length: int = Pipe.PipeBuffer.DEFAULT_LENGTH):
		"""
		[TranslatedOutputStream(PipeSink)] - Output stream translating what is written to it into another output stream
		- Constructor -
		:param destination: (io.IOBase) The stream receiving translated bytes
		:param max_length: (int) The capacity in bytes of the pipe carrying raw bytes
		"""

		pipe: Pipe.PipeBuffer = Pipe.PipeBuffer(max_length)
		self.input: Pipe.PipeSource = Pipe.PipeSource(pipe)
		self.output: io.IOBase | typing.BinaryIO = destination
		super().__init__(pipe, Translation(pipe, self.translate, lambda: (self.input, self.output)))

	def translate(self) -> None:
		raise NotImplementedError()


class TranslatedReader(io.TextIOWrapper):
	"""
	[TranslatedReader(io.TextIOWrapper)] - Text reader translating another text reader on-the-fly
	Subclasses implement 'translate', reading text from 'self.input' and writing translated text to 'self.output'
	"""

	def __init__(self, reader: io.TextIOBase | typing.TextIO, max_length: int = Pipe.PipeBuffer.DEFAULT_LENGTH, encoding: str = 'utf-8'):
		"""
		[TranslatedReader(io.TextIOWrapper)] - Text reader translating another text reader on-the-fly
		- Constructor -
		:param reader: (io.TextIOBase) The raw text reader
		:param max_length: (int) The capacity in bytes of the pipe carrying translated text
		:param encoding: (str) The encoding used inside the pipe
		"""

		pipe: Pipe.PipeBuffer = Pipe.PipeBuffer(max_length)
		self.input: io.TextIOBase | typing.TextIO = reader
		self.output: io.TextIOWrapper = io.TextIOWrapper(Pipe.PipeSink(pipe), encoding=encoding, write_through=True)
		translation: Translation = Translation(pipe, self.translate, lambda: (self.input, self.output))
		super().__init__(__TranslatedSource__(pipe, translation), encoding=encoding)

	def translate(self) -> None:
		raise NotImplementedError()


class TranslatedWriter(io.TextIOWrapper):
	"""
	[TranslatedWriter(io.TextIOWrapper)] - Text writer translating what is written to it into another text writer
	Subclasses implement 'translate', reading text from 'self.input' and writing translated text to 'self.output'
	Closing this writer waits for translation to finish and raises StreamError if it failed
	"""

	def __init__(self, writer: io.TextIOBase | typing.TextIO, max_length: int = Pipe.PipeBuffer.DEFAULT_LENGTH, encoding: str = 'utf-8'):
		"""
		[TranslatedWriter(io.TextIOWrapper)] - Text writer translating what is written to it into another text writer
		- Constructor -
		:param writer: (io.TextIOBase) The text writer receiving translated text
		:param max_length: (int) The capacity in bytes of the pipe carrying raw text
		:param encoding: (str) The encoding used inside the pipe
		"""

		pipe: Pipe.PipeBuffer = Pipe.PipeBuffer(max_length)
		self.input: io.TextIOWrapper = io.TextIOWrapper(Pipe.PipeSource(pipe), encoding=encoding)
		self.output: io.TextIOBase | typing.TextIO = writer
		translation: Translation = Translation(pipe, self.translate, lambda: (self.input, self.output))
		super().__init__(__TranslatedSink__(pipe, translation), encoding=encoding, write_through=True)

	def translate(self) -> None:
		raise NotImplementedError()
