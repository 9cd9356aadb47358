import logging
import os
from typing import Iterable, List, Optional, Union

from typing_extensions import Self

from simple_backup import constants
from simple_backup import logger
from simple_backup.action.backup_now_action import BackupNowAction
from simple_backup.config.config import Config
from simple_backup.file_set import FileSetEngine
from simple_backup.path_resolver import PathResolver
from simple_backup.types.backup_report import BackupReport
from simple_backup.types.resolved_path import ResolvedPath
from simple_backup.types.units import ByteCount
from simple_backup.utils import time_utils
from simple_backup.utils.path_utils import PathLike


def _flatten_paths(paths: tuple) -> List[str]:
	# copy('a', 'b') and copy(['a', 'b']) are both accepted
	ret = []
	for p in paths:
		if isinstance(p, (str, os.PathLike)):
			ret.append(str(p))
		elif isinstance(p, Iterable):
			ret.extend(map(str, p))
		else:
			ret.append(str(p))
	return ret


def _to_posix_list(files: Iterable[ResolvedPath]) -> List[str]:
	return sorted(f.posix for f in files)


class SimpleBackup:
	"""
	A backup session of a project directory. Typical usage from a host::

		backup = SimpleBackup(project_dir).copy('/').omit('data/big.bin').to('backups')
		backup.backup_now()

	Every configuration method returns the session itself, so calls can be chained.
	Bad paths are reported as warnings and skipped, they never raise
	"""
	VERSION = constants.VERSION

	def __init__(self, root: PathLike, *, config: Optional[Config] = None):
		self.logger: logging.Logger = logger.get()
		self.config: Config = config if config is not None else Config.get()

		self.__resolver = PathResolver(root)
		if not self.__resolver.root.is_dir():
			self.logger.warning('Project root {!r} is not a directory'.format(self.__resolver.root.as_posix()))
		self.__file_set = FileSetEngine(
			self.__resolver,
			destination=self.config.backup.destination,
			ignored_suffixes=self.config.backup.ignored_suffixes,
			ignore_patterns=self.config.backup.ignore_patterns,
		)
		self.__size_limit: int = self.config.backup.size_limit.value
		self.__verbose: bool = self.config.verbose
		self.__reminded = False
		self.__last_report: Optional[BackupReport] = None

	def __info(self, msg: str):
		if self.__verbose:
			self.logger.info(msg)

	# ==================== Configuration ====================

	def copy(self, *paths: Union[str, Iterable[str]]) -> Self:
		"""
		Add files or directories to copy. Directories are walked recursively
		"""
		self.__file_set.include(_flatten_paths(paths))
		if not self.__reminded:
			self.__info('Remember to save your project before backing up.')
			self.__reminded = True
		return self

	def omit(self, *paths: Union[str, Iterable[str]]) -> Self:
		"""
		Add files or directories to leave out of the backup
		"""
		self.__file_set.omit(_flatten_paths(paths))
		return self

	ignore = omit

	def to(self, destination: str) -> Self:
		"""
		Set the destination directory, relative to the project root.
		An invalid destination keeps the previous one
		"""
		if self.__file_set.set_destination(destination):
			self.__info('Destination set to {}'.format(self.__file_set.destination))
		return self

	def sizelimit(self, size_limit: Union[int, str]) -> Self:
		"""
		Set the size limit of a backup run, e.g. ``200000`` or ``'200KB'``.
		It's a safety measure against copying large files by accident
		"""
		try:
			value = ByteCount(size_limit).value
		except (ValueError, TypeError) as e:
			self.logger.warning('Bad size limit {!r}, keeping {} bytes: {}'.format(size_limit, self.__size_limit, e))
			return self
		if value < 0:
			self.logger.warning('Size limit cannot be negative, keeping {} bytes'.format(self.__size_limit))
			return self
		self.__size_limit = value
		return self

	def verbose(self, verbose: bool) -> Self:
		self.__verbose = verbose
		return self

	# ==================== Backup ====================

	def backup_now(self, sub_dir: Optional[str] = None) -> bool:
		"""
		Copy the files into a sub directory of the destination directory.
		The sub directory defaults to the current date and time, formatted with the configured date pattern

		:return: True if all files were copied, False otherwise
		"""
		if sub_dir is None:
			sub_dir = self.current_date_and_time(self.config.backup.date_pattern, self.config.backup.timezone)
		action = BackupNowAction(self.__file_set, sub_dir, self.__size_limit, verbose=self.__verbose, check_free_space=self.config.backup.check_free_space, config=self.config)
		self.__last_report = action.run()
		return self.__last_report.ok

	@property
	def last_report(self) -> Optional[BackupReport]:
		return self.__last_report

	# ==================== Queries ====================

	def get_files_to_copy(self) -> List[str]:
		return _to_posix_list(self.__file_set.effective_copy_set())

	def get_files_omitted(self) -> List[str]:
		return _to_posix_list(self.__file_set.omitted_files())

	get_files_to_ignore = get_files_omitted

	def get_files_ignored(self) -> List[str]:
		"""
		Files left out by the default ignore list, the ignore patterns or the destination directory
		"""
		return _to_posix_list(self.__file_set.ignored_files())

	def get_size(self) -> int:
		return self.__file_set.size_of(self.__file_set.effective_copy_set())

	def get_size_limit(self) -> int:
		return self.__size_limit

	def get_destination(self) -> str:
		return self.__file_set.destination.posix

	def is_verbose(self) -> bool:
		return self.__verbose

	@staticmethod
	def current_date_and_time(pattern: str = constants.DEFAULT_DATE_PATTERN, timezone: Optional[str] = None) -> str:
		return time_utils.current_date_and_time(pattern, timezone)

	@staticmethod
	def version() -> str:
		return constants.VERSION
