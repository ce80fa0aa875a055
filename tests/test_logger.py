"""
Tests for the thread-safe logger and the library-wide attached logger
"""

import io

import pytest

from CommonMethods import Exceptions
from CommonMethods import Logger
from CommonMethods import Pipe


class TestLogger:
	def test_writes_banner_and_messages(self) -> None:
		output = io.StringIO()
		logger = Logger.Logger(output)
		logger.info('pipe opened')
		logger.error('pipe broke  ')

		lines: list[str] = output.getvalue().splitlines()
		assert lines[0] == '==========[ Log Opened ]=========='
		assert lines[2].endswith('[ UTC ] [ INFO ]: pipe opened')
		assert lines[3].endswith('[ ERROR ]: pipe broke')

	def test_drops_messages_below_level(self) -> None:
		output = io.StringIO()
		logger = Logger.Logger(output, level=Logger.LogLevel.WARN)
		logger.debug('hidden').info('hidden').warn('shown')

		assert 'hidden' not in output.getvalue()
		assert '[ WARN ]: shown' in output.getvalue()

		logger.level = Logger.LogLevel.DEBUG
		logger.debug('now visible')
		assert '[ DEBUG ]: now visible' in output.getvalue()

	def test_close_closes_stream(self) -> None:
		output = io.StringIO()
		logger = Logger.Logger(output)
		logger.close()

		assert logger.closed
		assert output.closed

		with pytest.raises(IOError):
			logger.info('too late')

		with pytest.raises(IOError):
			logger.close()

	def test_detach_keeps_stream_open(self) -> None:
		output = io.StringIO()
		logger = Logger.Logger(output)
		logger.detach()

		assert logger.closed
		assert not output.closed
		assert output.getvalue().endswith('==========[ Log Closed ]==========')

	def test_rejects_bad_arguments(self) -> None:
		with pytest.raises(Exceptions.InvalidArgumentException, match='stream'):
			Logger.Logger('stdout')

		closed = io.StringIO()
		closed.close()

		with pytest.raises(IOError):
			Logger.Logger(closed)

		with pytest.raises(IOError):
			Logger.Logger(io.BufferedReader(io.BytesIO()))

	def test_logs_into_inverted_writer(self, spawn) -> None:
		writer = Pipe.InvertedWriter()
		consumer = spawn(writer.reader.read)
		logger = Logger.Logger(writer)
		logger.critical('through the pipe')
		logger.close()
		consumer.join()

		assert '[ CRITICAL ]: through the pipe' in consumer.result
		assert consumer.result.endswith('Log Closed ]==========')


class TestAttachedLogger:
	def test_nothing_attached_by_default(self) -> None:
		assert Logger.attached() is None
		Logger.warn('discarded')

	def test_attach_and_detach(self) -> None:
		output = io.StringIO()
		logger = Logger.Logger(output)

		assert Logger.attach(logger) is None
		assert Logger.attached() is logger

		Logger.info('library message')
		assert Logger.detach() is logger
		Logger.info('after detach')

		assert 'library message' in output.getvalue()
		assert 'after detach' not in output.getvalue()

	def test_attach_returns_previous(self) -> None:
		first = Logger.Logger(io.StringIO())
		second = Logger.Logger(io.StringIO())
		Logger.attach(first)

		assert Logger.attach(second) is first

	def test_closed_logger_is_ignored(self) -> None:
		logger = Logger.Logger(io.StringIO())
		Logger.attach(logger)
		logger.close()
		Logger.error('dropped')

	def test_attach_requires_logger(self) -> None:
		with pytest.raises(Exceptions.InvalidArgumentException, match='logger'):
			Logger.attach(io.StringIO())
