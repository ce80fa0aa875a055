import typing

import typeguard

from . import Exceptions


def raise_if(expression: bool, exception: BaseException = AssertionError('Assertion Failed')) -> None:
	"""
	Raises an exception if the expression evaluates to True
	:param expression: The expression to evaluate
	:param exception: The exception to raise
	"""

	if not isinstance(exception, BaseException):
		raise Exceptions.InvalidArgumentException(raise_if, 'exception', type(exception), (BaseException,))
	elif expression:
		raise exception


def raise_ifn(expression: bool, exception: BaseException = AssertionError('Assertion Failed')) -> None:
	"""
	Raises an exception if the expression evaluates to False
	:param expression: The expression to evaluate
	:param exception: The exception to raise
	"""

	raise_if(not expression, exception)


def check_type(caller: typing.Callable, parameter_name: str, value: typing.Any, expected: typing.Any) -> typing.Any:
	"""
	Validates an argument against a type or typing construct
	:param caller: The callable whose parameter is being validated
	:param parameter_name: The parameter name
	:param value: The argument received
	:param expected: The type (or typing construct) the argument must match
	:return: The unchanged argument
	:raises InvalidArgumentException: If the argument does not match
	"""

	try:
		return typeguard.check_type(value, expected)
	except typeguard.TypeCheckError:
		raise Exceptions.InvalidArgumentException(caller, parameter_name, type(value), getattr(expected, '__args__', (expected,))) from None


def to_bytes(caller: typing.Callable, data: bytes | bytearray | memoryview | int) -> bytes:
	"""
	Converts data being written to a byte stream into a bytes object
	A single integer is treated as one byte
	:param caller: The write method performing the conversion, used for error reporting
	:param data: The data to convert
	:return: The resulting bytes
	:raises InvalidArgumentException: If data is neither bytes-like nor an integer
	:raises ValueError: If an integer is outside the range of a byte
	"""

	if isinstance(data, bytes):
		return data
	elif isinstance(data, (bytearray, memoryview)):
		return bytes(data)
	elif isinstance(data, int) and not isinstance(data, bool):
		raise_ifn(0 <= data <= 0xFF, ValueError(f'Byte value out of range: {data}'))
		return data.to_bytes(1, 'big')

	raise Exceptions.InvalidArgumentException(caller, 'data', type(data), (bytes, bytearray, memoryview, int))
