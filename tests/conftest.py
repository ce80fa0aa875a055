import threading
import typing

import pytest

from CommonMethods import Logger


JOIN_TIMEOUT: float = 5.0


class Worker:
	"""
	Runs a callable on a thread and records its result or error
	"""

	def __init__(self, target: typing.Callable[[], typing.Any]):
		self.result: typing.Any = None
		self.error: typing.Optional[BaseException] = None
		self.__target__ = target
		self.__thread__: threading.Thread = threading.Thread(target=self.__run__, daemon=True)

	def __run__(self) -> None:
		try:
			self.result = self.__target__()
		except BaseException as err:
			self.error = err

	def start(self) -> 'Worker':
		self.__thread__.start()
		return self

	def join(self, timeout: float = JOIN_TIMEOUT) -> 'Worker':
		self.__thread__.join(timeout)
		assert not self.__thread__.is_alive(), 'worker thread is still blocked'
		return self

	def is_alive(self) -> bool:
		return self.__thread__.is_alive()


@pytest.fixture
def spawn() -> typing.Callable[[typing.Callable[[], typing.Any]], Worker]:
	def factory(target: typing.Callable[[], typing.Any]) -> Worker:
		return Worker(target).start()

	return factory


@pytest.fixture(autouse=True)
def no_library_logger() -> typing.Iterator[None]:
	previous: typing.Optional[Logger.Logger] = Logger.detach()
	yield
	Logger.detach()

	if previous is not None:
		Logger.attach(previous)
