"""
Tests for argument validation helpers and InvalidArgumentException
"""

import typing

import pytest

from CommonMethods import Exceptions
from CommonMethods import Misc


def sample(count: int) -> None:
	pass


class TestInvalidArgumentException:
	def test_message_names_caller_and_types(self) -> None:
		err = Exceptions.InvalidArgumentException(sample, 'count', str, (int, float))
		assert str(err) == 'sample - parameter \'count\' must be either \'int\' or \'float\'; got \'str\''
		assert err.parameter_name == 'count'
		assert isinstance(err, TypeError)

	def test_falls_back_to_annotation(self) -> None:
		err = Exceptions.InvalidArgumentException(sample, 'count', str)
		assert 'must be \'int\'' in str(err)

	def test_bare_exception(self) -> None:
		err = Exceptions.InvalidArgumentException()
		assert str(err) == ''
		assert err.parameter_name is None


class TestRaiseIf:
	def test_raises_only_when_true(self) -> None:
		Misc.raise_if(False, ValueError('unused'))

		with pytest.raises(ValueError, match='used'):
			Misc.raise_if(True, ValueError('used'))

	def test_raise_ifn_inverts(self) -> None:
		Misc.raise_ifn(True, ValueError('unused'))

		with pytest.raises(AssertionError):
			Misc.raise_ifn(False)

	def test_exception_must_be_exception(self) -> None:
		with pytest.raises(Exceptions.InvalidArgumentException):
			Misc.raise_if(True, 'message')


class TestCheckType:
	def test_accepts_matching_values(self) -> None:
		assert Misc.check_type(sample, 'count', 3, int) == 3
		assert Misc.check_type(sample, 'count', None, typing.Optional[int]) is None

	def test_rejects_mismatch(self) -> None:
		with pytest.raises(Exceptions.InvalidArgumentException) as info:
			Misc.check_type(sample, 'count', 2.5, typing.Optional[int])

		assert info.value.parameter_name == 'count'
		assert 'got \'float\'' in str(info.value)


class TestToBytes:
	@pytest.mark.parametrize('data', [b'abc', bytearray(b'abc'), memoryview(b'abc')])
	def test_bytes_like(self, data: bytes | bytearray | memoryview) -> None:
		assert Misc.to_bytes(sample, data) == b'abc'

	def test_single_byte(self) -> None:
		assert Misc.to_bytes(sample, 0) == b'\x00'
		assert Misc.to_bytes(sample, 255) == b'\xff'

	def test_out_of_range_byte(self) -> None:
		with pytest.raises(ValueError):
			Misc.to_bytes(sample, -1)

	def test_rejects_text_and_booleans(self) -> None:
		with pytest.raises(Exceptions.InvalidArgumentException, match='data'):
			Misc.to_bytes(sample, 'abc')

		with pytest.raises(Exceptions.InvalidArgumentException):
			Misc.to_bytes(sample, True)
