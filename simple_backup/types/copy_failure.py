import contextlib
import dataclasses
import threading
from typing import List, Iterator

from simple_backup.types.resolved_path import ResolvedPath


@dataclasses.dataclass(frozen=True)
class CopyFailure:
	file: ResolvedPath
	error: Exception


class CopyFailures:
	def __init__(self):
		self.__lock = threading.Lock()
		self.failures: List[CopyFailure] = []

	@contextlib.contextmanager
	def handling_exception(self, file: ResolvedPath):
		try:
			yield
		except Exception as e:
			with self.__lock:
				self.failures.append(CopyFailure(file, e))

	def __len__(self) -> int:
		return len(self.failures)

	def __iter__(self) -> Iterator[CopyFailure]:
		return self.failures.__iter__()

	def to_lines(self) -> List[str]:
		result = []
		for failure in sorted(self.failures, key=lambda f: f.file.posix):
			result.append('{}: ({}) {}'.format(failure.file.posix, type(failure.error).__name__, str(failure.error)))
		return result
