from __future__ import annotations

import datetime
import enum
import io
import threading
import typing

from . import Exceptions


class LogLevel(enum.IntEnum):
	DEBUG = 0
	INFO = 1
	WARN = 2
	ERROR = 3
	CRITICAL = 4


class Logger:
	"""
	Class representing a thread-safe log writer
	"""

	def __init__(self, stream: io.IOBase, timezone: datetime.timezone = datetime.timezone.utc, level: LogLevel = LogLevel.DEBUG):
		"""
		Class representing a thread-safe log writer
		- Constructor -
		:param stream: The text stream to write results to
		:param timezone: The timezone to log with
		:param level: The lowest level that is written; lower messages are dropped
		:raises InvalidArgumentException: If 'stream', 'timezone' or 'level' is of the wrong type
		:raises IOError: If the stream is closed or not writable
		"""

		if not isinstance(stream, io.IOBase):
			raise Exceptions.InvalidArgumentException(Logger.__init__, 'stream', type(stream), (io.IOBase,))
		elif not isinstance(timezone, datetime.timezone):
			raise Exceptions.InvalidArgumentException(Logger.__init__, 'timezone', type(timezone), (datetime.timezone,))
		elif not isinstance(level, int):
			raise Exceptions.InvalidArgumentException(Logger.__init__, 'level', type(level), (LogLevel,))

		if stream.closed:
			raise IOError('Stream is closed')
		elif not stream.writable():
			raise IOError('Target stream is not writable')

		self.__stream__: io.IOBase | None = stream
		self.__timezone__: datetime.timezone = timezone
		self.__level__: LogLevel = LogLevel(level)
		self.__lock__: threading.Lock = threading.Lock()
		self.__state__: bool = True
		self.__stream__.write('==========[ Log Opened ]==========\n\n')

	def __release__(self, close_stream: bool) -> None:
		"""
		INTERNAL METHOD; DO NOT USE
		Writes the closing banner and lets go of the stream
		:param close_stream: Whether the underlying stream is closed as well
		:raises IOError: If log is already closed
		"""

		with self.__lock__:
			if self.__state__ is False:
				raise IOError('Log is closed')

			self.__stream__.write('\n==========[ Log Closed ]==========')
			self.__stream__.flush()
			self.__state__ = False

			if close_stream:
				self.__stream__.close()

			self.__stream__ = None

	def close(self) -> None:
		"""
		Closes the log writer and its stream
		Any further write is erroneous
		:raises IOError: If log is already closed
		"""

		self.__release__(True)

	def detach(self) -> None:
		"""
		Detaches the log writer
		The underlying stream is not closed
		Any further write is erroneous
		:raises IOError: If log is already closed
		"""

		self.__release__(False)

	def log(self, level: LogLevel, msg: typing.Any) -> Logger:
		"""
		Writes a message to the log on the given level
		:param level: The message level
		:param msg: The message to write
		:return: This log writer instance
		:raises IOError: If log is closed
		"""

		level = LogLevel(level)

		with self.__lock__:
			if self.__state__ is False:
				raise IOError('Log is closed')
			elif level < self.__level__:
				return self

			timestamp: str = datetime.datetime.now(self.__timezone__).strftime('%m/%d/%Y %H:%M:%S.%f')
			self.__stream__.write(f'{timestamp} [ {self.__timezone__} ] [ {level.name} ]: {str(msg).strip()}\n')
			return self

	def debug(self, msg: typing.Any) -> Logger:
		return self.log(LogLevel.DEBUG, msg)

	def info(self, msg: typing.Any) -> Logger:
		return self.log(LogLevel.INFO, msg)

	def warn(self, msg: typing.Any) -> Logger:
		return self.log(LogLevel.WARN, msg)

	def error(self, msg: typing.Any) -> Logger:
		return self.log(LogLevel.ERROR, msg)

	def critical(self, msg: typing.Any) -> Logger:
		return self.log(LogLevel.CRITICAL, msg)

	@property
	def closed(self) -> bool:
		return not self.__state__

	@property
	def level(self) -> LogLevel:
		return self.__level__

	@level.setter
	def level(self, level: LogLevel) -> None:
		self.__level__ = LogLevel(level)


__default_logger__: Logger | None = None
__default_lock__: threading.Lock = threading.Lock()


def attach(logger: Logger) -> Logger | None:
	"""
	Sets the logger used by this library's own diagnostics
	:param logger: The logger to attach
	:return: The previously attached logger, if any
	:raises InvalidArgumentException: If 'logger' is not a Logger
	"""

	global __default_logger__

	if not isinstance(logger, Logger):
		raise Exceptions.InvalidArgumentException(attach, 'logger', type(logger), (Logger,))

	with __default_lock__:
		previous: Logger | None = __default_logger__
		__default_logger__ = logger
		return previous


def detach() -> Logger | None:
	"""
	Removes the library logger; diagnostics are discarded afterwards
	:return: The logger that was attached, if any
	"""

	global __default_logger__

	with __default_lock__:
		previous: Logger | None = __default_logger__
		__default_logger__ = None
		return previous


def attached() -> Logger | None:
	return __default_logger__


def log(level: LogLevel, msg: typing.Any) -> None:
	"""
	Writes a message to the attached library logger, if one is attached and still open
	:param level: The message level
	:param msg: The message to write
	"""

	logger: Logger | None = __default_logger__

	if logger is not None and not logger.closed:
		logger.log(level, msg)


def debug(msg: typing.Any) -> None:
	log(LogLevel.DEBUG, msg)


def info(msg: typing.Any) -> None:
	log(LogLevel.INFO, msg)


def warn(msg: typing.Any) -> None:
	log(LogLevel.WARN, msg)


def error(msg: typing.Any) -> None:
	log(LogLevel.ERROR, msg)


def critical(msg: typing.Any) -> None:
	log(LogLevel.CRITICAL, msg)
