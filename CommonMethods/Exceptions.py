import typing
import types


class InvalidArgumentException(TypeError):
	"""
	[InvalidArgumentException(TypeError)] - Exception representing an argument of the wrong type passed to a parameter
	"""

	def __init__(self, caller: typing.Callable | types.FunctionType | types.MethodType = None, parameter_name: str = None, argument_type: type = None, parameter_types: typing.Iterable[type | str] = None):
		"""
		[InvalidArgumentException(TypeError)] - Exception representing an argument of the wrong type passed to a parameter
		- Constructor -
		:param caller: (CALLABLE) The callable that raised this exception
		:param parameter_name: (str) The name of the parameter
		:param argument_type: (type) The type of the argument passed in
		:param parameter_types: (ITERABLE[type]) The types this parameter accepts or the caller's annotation if None
		"""

		if caller is None or parameter_name is None or argument_type is None:
			super().__init__()
			return

		if parameter_types is not None:
			names: tuple[str, ...] = tuple(f'\'{x.__name__ if isinstance(x, type) else x}\'' for x in parameter_types)
		elif parameter_name in getattr(caller, '__annotations__', {}):
			annotation: typing.Any = caller.__annotations__[parameter_name]
			names: tuple[str, ...] = (f'\'{annotation.__name__ if isinstance(annotation, type) else annotation}\'',)
		else:
			names: tuple[str, ...] = ('<UNKNOWN>',)

		expected: str = names[0] if len(names) == 1 else f'either {", ".join(names[:-1])} or {names[-1]}'
		qualified: str = getattr(caller, '__qualname__', repr(caller))
		super().__init__(f'{qualified.replace(".", "::")} - parameter \'{parameter_name}\' must be {expected}; got \'{argument_type.__name__}\'')
		self.__parameter__: str = parameter_name

	@property
	def parameter_name(self) -> str | None:
		"""
		:return: (str?) The name of the offending parameter, if known
		"""

		return getattr(self, '__parameter__', None)
