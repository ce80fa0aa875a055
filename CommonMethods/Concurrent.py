from __future__ import annotations

import threading
import traceback
import typing

from . import Exceptions
from . import Logger
from . import Misc


T = typing.TypeVar('T')


class ThreadedPromise(typing.Generic[T]):
	"""
	Class representing the eventual result of a ThreadedFunction call
	"""

	def __init__(self):
		"""
		Class representing the eventual result of a ThreadedFunction call
		- Constructor -
		"""

		self.__response__: typing.Optional[tuple[bool, typing.Any]] = None
		self.__callbacks__: list[typing.Callable[[ThreadedPromise[T]], None]] = []
		self.__lock__: threading.Lock = threading.Lock()
		self.__event__: threading.Event = threading.Event()

	def __fulfill__(self, state: bool, value: typing.Any) -> None:
		"""
		INTERNAL METHOD; DO NOT USE
		Stores the response, wakes all waiters and runs bound callbacks
		:raises IOError: If promise is already fulfilled
		"""

		with self.__lock__:
			if self.__response__ is not None:
				raise IOError('Response already sent')

			self.__response__ = (state, value)
			callbacks: tuple[typing.Callable, ...] = tuple(self.__callbacks__)
			self.__callbacks__.clear()

		self.__event__.set()

		for i, cb in enumerate(callbacks):
			try:
				cb(self)
			except Exception as e:
				Logger.error(f'Error-{type(e).__name__} during Promise callback[{i}]:\n\t...\n{"".join(traceback.format_exception(e))}')

	def fulfilled(self) -> bool:
		"""
		:return: Whether this promise is fulfilled
		"""

		return self.__event__.is_set()

	def throw(self, err: BaseException) -> None:
		"""
		Resolves this promise with an error
		Any attempt to poll this promise on consumer side will raise that error
		:param err: The error to resolve with
		:raises IOError: If promise is already fulfilled
		:raises InvalidArgumentException: If 'err' is not an exception
		"""

		Misc.raise_ifn(isinstance(err, BaseException), Exceptions.InvalidArgumentException(ThreadedPromise.throw, 'err', type(err), (BaseException,)))
		self.__fulfill__(False, err)

	def resolve(self, obj: T) -> None:
		"""
		Resolves this promise with a value
		:param obj: The response to resolve with
		:raises IOError: If promise is already fulfilled
		"""

		self.__fulfill__(True, obj)

	def wait(self, throw_err: bool = True, timeout: typing.Optional[float] = None) -> T | BaseException:
		"""
		Blocks current thread until this promise is fulfilled
		:param throw_err: If true, raises the error the producer resolved with, otherwise it is returned
		:param timeout: The time in seconds to wait, or None to wait indefinitely
		:return: The response value, the error, or '...' if not fulfilled in time and 'throw_err' is False
		:raises TimeoutError: If not fulfilled before 'timeout' and 'throw_err' is True
		"""

		Misc.check_type(ThreadedPromise.wait, 'timeout', timeout, typing.Optional[float | int])

		if not self.__event__.wait(timeout):
			if throw_err:
				raise TimeoutError('Promise timed out')

			return ...

		return self.response(throw_err)

	def then(self, callback: typing.Callable[[ThreadedPromise[T]], None]) -> None:
		"""
		Binds a callback to execute once this promise is fulfilled
		If already fulfilled, the callback runs immediately on the calling thread
		:param callback: A callable accepting this promise
		:raises InvalidArgumentException: If callback is not callable
		"""

		Misc.raise_ifn(callable(callback), Exceptions.InvalidArgumentException(ThreadedPromise.then, 'callback', type(callback)))

		with self.__lock__:
			if self.__response__ is None:
				self.__callbacks__.append(callback)
				return

		callback(self)

	def response(self, throw_err: bool = True) -> T | BaseException:
		"""
		Polls this promise for a response
		:param throw_err: If true, raises the associated error (if producer used "throw") otherwise, the error is returned
		:return: The response value or the associated error
		:raises IOError: If promise is not fulfilled
		"""

		if self.__response__ is None:
			raise IOError('No response received')

		state, msg = self.__response__

		if state or not throw_err:
			return msg

		raise msg

	def has_erred(self) -> bool | None:
		"""
		Checks if this promise was resolved with "throw"
		:return: None if promise is not fulfilled otherwise whether the promise has erred
		"""

		if self.__response__ is None:
			return None

		return not self.__response__[0]


class ThreadedFunction:
	"""
	Class handling function spawned on a separate threading.Thread
	"""

	def __init__(self, function: typing.Callable, *, daemon: bool = False, name: typing.Optional[str] = None):
		"""
		Class handling function spawned on a separate threading.Thread
		- Constructor -
		:param function: A callable object
		:param daemon: Whether spawned threads are daemon threads
		:param name: The name given to spawned threads
		:raises InvalidArgumentException: If 'function' is not callable
		"""

		Misc.raise_ifn(callable(function), Exceptions.InvalidArgumentException(ThreadedFunction.__init__, 'function', type(function)))
		self.__cb__: typing.Callable = function
		self.__daemon__: bool = bool(daemon)
		self.__thread_name__: typing.Optional[str] = name
		self.__thread__: typing.Optional[threading.Thread] = None

	def __wrapper__(self, promise: ThreadedPromise, *args: tuple, **kwargs: dict) -> None:
		"""
		INTERNAL METHOD
		Calls the function, handling all errors, and responds to promise accordingly
		:param promise: The promise to respond to
		:param args: The function's positional arguments
		:param kwargs: The function's keyword arguments
		"""

		try:
			result: typing.Any = self.__cb__(*args, **kwargs)
		except (KeyboardInterrupt, Exception) as err:
			promise.throw(err)
		else:
			promise.resolve(result)

	def __call__(self, *args, **kwargs) -> ThreadedPromise:
		"""
		Calls the underlying function in a new threading.Thread
		:param args: The positional arguments to call with
		:param kwargs: The keyword arguments to call with
		:return: A new ThreadedPromise
		"""

		promise: ThreadedPromise = ThreadedPromise()
		self.__thread__ = threading.Thread(target=self.__wrapper__, args=(promise, *args), kwargs=kwargs, daemon=self.__daemon__, name=self.__thread_name__)
		self.__thread__.start()
		return promise

	def join(self, timeout: typing.Optional[float] = None) -> None:
		"""
		Waits for the most recently spawned thread to finish
		:param timeout: The time in seconds to wait, or None to wait indefinitely
		"""

		if self.__thread__ is not None:
			self.__thread__.join(timeout)

	def is_running(self) -> bool:
		"""
		:return: Whether the most recently spawned thread is still alive
		"""

		return self.__thread__ is not None and self.__thread__.is_alive()

	@property
	def daemon(self) -> bool:
		return self.__daemon__
