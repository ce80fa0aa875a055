"""
Tests for translated streams, whose translation runs on a background thread behind a pipe
"""

import io
import threading

import pytest

from CommonMethods import Stream
from CommonMethods import Translated


class KeptBytesIO(io.BytesIO):
	"""BytesIO that remembers its contents when closed."""

	value: bytes = b''

	def close(self) -> None:
		if not self.closed:
			self.value = self.getvalue()

		super().close()


class KeptStringIO(io.StringIO):
	"""StringIO that remembers its contents when closed."""

	value: str = ''

	def close(self) -> None:
		if not self.closed:
			self.value = self.getvalue()

		super().close()


class UpperCaseInput(Translated.TranslatedInputStream):
	def translate(self) -> None:
		while len(chunk := self.input.read(4)) > 0:
			self.output.write(chunk.upper())


class FailingInput(Translated.TranslatedInputStream):
	def translate(self) -> None:
		self.output.write(b'partial')
		raise ValueError('bad input byte')


class EndlessInput(Translated.TranslatedInputStream):
	def __init__(self, source: io.BytesIO):
		super().__init__(source, 64)
		self.done: threading.Event = threading.Event()

	def translate(self) -> None:
		try:
			while True:
				self.output.write(b'x' * 16)
		finally:
			self.done.set()


class SignallingInput(Translated.TranslatedInputStream):
	def __init__(self, source: io.BytesIO):
		super().__init__(source)
		self.started: threading.Event = threading.Event()

	def translate(self) -> None:
		self.started.set()


class HexOutput(Translated.TranslatedOutputStream):
	def translate(self) -> None:
		while len(chunk := self.input.read(3)) > 0:
			self.output.write(chunk.hex().encode('ascii'))


class FailingOutput(Translated.TranslatedOutputStream):
	def translate(self) -> None:
		raise RuntimeError('cannot translate')


class UpperCaseReader(Translated.TranslatedReader):
	def translate(self) -> None:
		for line in self.input:
			self.output.write(line.upper())


class ReversedLinesWriter(Translated.TranslatedWriter):
	def translate(self) -> None:
		for line in self.input:
			self.output.write(line.rstrip('\n')[::-1] + '\n')


class TestTranslatedInputStream:
	def test_reads_translated_bytes(self) -> None:
		source = io.BytesIO(b'hello translated world')
		stream = UpperCaseInput(source)

		assert stream.read() == b'HELLO TRANSLATED WORLD'
		assert source.closed

	def test_chunked_reads(self) -> None:
		stream = UpperCaseInput(io.BytesIO(b'abcdefgh'))
		received: list[bytes] = []

		while len(chunk := stream.read(3)) > 0:
			received.append(chunk)

		assert b''.join(received) == b'ABCDEFGH'

	def test_translation_error_reaches_reader(self) -> None:
		stream = FailingInput(io.BytesIO(b''))

		with pytest.raises(Stream.StreamError, match='bad input byte') as info:
			stream.read()

		assert isinstance(info.value.__cause__, ValueError)

	def test_missing_translate_reaches_reader(self) -> None:
		stream = Translated.TranslatedInputStream(io.BytesIO(b'raw'))

		with pytest.raises(Stream.StreamError) as info:
			stream.read()

		assert isinstance(info.value.__cause__, NotImplementedError)

	def test_close_before_reading_closes_source(self) -> None:
		source = io.BytesIO(b'never read')
		stream = UpperCaseInput(source)
		stream.close()

		assert source.closed
		assert stream.closed

	def test_available_starts_translation(self) -> None:
		stream = SignallingInput(io.BytesIO(b''))
		assert stream.available() >= 0

		assert stream.started.wait(5)
		stream.close()

	def test_available_reports_translated_bytes(self) -> None:
		stream = UpperCaseInput(io.BytesIO(b'abc'))
		stream.available()
		assert stream.read() == b'ABC'

	def test_early_close_stops_translation(self) -> None:
		source = io.BytesIO(b'')
		stream = EndlessInput(source)
		assert stream.read(8) == b'x' * 8

		stream.close()
		assert stream.done.wait(5)


class TestTranslatedOutputStream:
	def test_close_flushes_translation(self) -> None:
		destination = KeptBytesIO()
		stream = HexOutput(destination)
		stream.write(b'\x00\x01\xff')
		stream.write(b'AB')
		stream.close()

		assert destination.closed
		assert destination.value == b'0001ff4142'

	def test_close_without_writes_runs_translation(self) -> None:
		destination = KeptBytesIO()
		HexOutput(destination).close()

		assert destination.closed
		assert destination.value == b''

	def test_failed_translation_raises_on_close(self) -> None:
		stream = FailingOutput(KeptBytesIO())

		with pytest.raises(Stream.StreamError, match='cannot translate'):
			stream.close()

		stream.close()

	def test_usable_as_context_manager(self) -> None:
		destination = KeptBytesIO()

		with HexOutput(destination) as stream:
			stream.write(b'\x10')

		assert destination.value == b'10'


class TestTranslatedText:
	def test_reader_translates_lines(self) -> None:
		source = io.StringIO('first line\nsecond line\n')
		reader = UpperCaseReader(source)

		assert reader.read() == 'FIRST LINE\nSECOND LINE\n'
		assert source.closed

	def test_reader_line_iteration(self) -> None:
		reader = UpperCaseReader(io.StringIO('a\nb\nc'))
		assert list(reader) == ['A\n', 'B\n', 'C']

	def test_writer_translates_on_close(self) -> None:
		destination = KeptStringIO()
		writer = ReversedLinesWriter(destination)
		writer.write('stressed\n')
		writer.write('drawer\n')
		writer.close()

		assert destination.value == 'desserts\nreward\n'
