import os
import threading
from typing import Optional, FrozenSet

from typing_extensions import override

from simple_backup.action import Action
from simple_backup.config.config import Config
from simple_backup.exceptions import SimpleBackupError, BackupAborted, DestinationConflict, SizeLimitExceeded, InsufficientSpace
from simple_backup.file_set import FileSetEngine
from simple_backup.types.backup_report import BackupReport
from simple_backup.types.resolved_path import ResolvedPath
from simple_backup.types.units import ByteCount
from simple_backup.utils import file_utils
from simple_backup.utils.thread_pool import BlockingThreadPool
from simple_backup.utils.timer import Timer


class BackupNowAction(Action[BackupReport]):
	"""
	Copies the effective copy set of a :class:`FileSetEngine` into ``<destination>/<sub_dir>``.

	Existing target files are never overwritten, and partial progress is kept on disk.
	The report is ok only if every file in the copy set was copied
	"""
	def __init__(self, file_set: FileSetEngine, sub_dir: str, size_limit: int, *, verbose: bool = True, check_free_space: Optional[bool] = None, config: Optional[Config] = None):
		super().__init__(config)
		self.file_set = file_set
		self.sub_dir = sub_dir
		self.size_limit = size_limit
		self.verbose = verbose
		self.check_free_space = check_free_space if check_free_space is not None else self.config.backup.check_free_space

		self.__report_lock = threading.Lock()

	def __info(self, msg: str):
		if self.verbose:
			self.logger.info(msg)

	def __resolve_run_dir(self) -> ResolvedPath:
		resolver = self.file_set.resolver
		try:
			sub_dir = resolver.resolve(self.sub_dir, must_exist=False)
		except SimpleBackupError as e:
			raise BackupAborted('Invalid backup sub directory {!r}: {}'.format(self.sub_dir, e)) from None
		if sub_dir.is_root():
			raise BackupAborted('Backup sub directory name {!r} is empty'.format(self.sub_dir))
		try:
			return resolver.resolve(self.file_set.destination.joinpath(sub_dir).posix, must_exist=False)
		except SimpleBackupError as e:
			raise BackupAborted('Invalid backup directory {!r}: {}'.format(self.sub_dir, e)) from None

	def __check_size(self, size: int, run_dir: ResolvedPath):
		if size > self.size_limit:
			raise SizeLimitExceeded(size, self.size_limit)
		if self.check_free_space:
			try:
				free = file_utils.get_free_space(run_dir.absolute)
			except OSError as e:
				self.logger.warning('Cannot get free space at {}, check skipped: {}'.format(run_dir, e))
			else:
				self.logger.debug('Free space at {}: {}'.format(run_dir, ByteCount(free).auto_str()))
				if size > free:
					raise InsufficientSpace(size, free)

	def __ensure_directory(self, directory: ResolvedPath, what: str):
		if directory.absolute.is_dir():
			return
		try:
			directory.absolute.mkdir(parents=True, exist_ok=True)
		except OSError as e:
			raise BackupAborted('Cannot create {} directory {}: {}'.format(what, directory, e)) from None
		self.__info('Created {} directory {}'.format(what, directory))

	@classmethod
	def __copy_file(cls, file_from: ResolvedPath, file_to: ResolvedPath):
		if os.path.lexists(file_to.absolute):
			raise DestinationConflict(file_to.relative)
		file_to.absolute.parent.mkdir(parents=True, exist_ok=True)
		try:
			file_utils.copy_file_exclusive(file_from.absolute, file_to.absolute)
		except FileExistsError:
			raise DestinationConflict(file_to.relative) from None

	def __copy_all(self, report: BackupReport, run_dir: ResolvedPath, files: FrozenSet[ResolvedPath]):
		def copy_worker(file_from: ResolvedPath):
			file_to = run_dir.joinpath(file_from)
			with report.failures.handling_exception(file_from):
				try:
					self.__copy_file(file_from, file_to)
				except DestinationConflict:
					self.logger.warning('File {} already exists. Not copying.'.format(file_to))
					with self.__report_lock:
						report.skipped.append(file_from.posix)
					return
				except OSError as e:
					self.logger.warning('Copying {} to {} failed: {}'.format(file_from, file_to, e))
					raise

				with self.__report_lock:
					report.copied.append(file_from.posix)
				self.__info('Copied {} to {}'.format(file_from, file_to.relative.parent.as_posix()))

		with BlockingThreadPool('copy', self.config.get_effective_concurrency()) as pool:
			for file in sorted(files, key=lambda f: f.posix):
				pool.submit(copy_worker, file)

	@override
	def run(self) -> BackupReport:
		timer = Timer()
		report = BackupReport()
		try:
			# 1. where to
			run_dir = self.__resolve_run_dir()
			report.run_dir = run_dir

			# 2. what to copy
			files = self.file_set.effective_copy_set()
			report.total = len(files)
			if len(files) == 0:
				raise BackupAborted('Nothing to copy.')

			# 3. size gates, nothing is written before them
			report.size = self.file_set.size_of(files)
			self.__check_size(report.size, run_dir)

			# 4. required directories
			self.__ensure_directory(self.file_set.destination, 'destination')
			self.__ensure_directory(run_dir, 'backup')

			# 5. copy
			self.__copy_all(report, run_dir, files)
		except BackupAborted as e:
			report.aborted_reason = str(e)
			self.logger.warning(report.aborted_reason)
		else:
			self.__info('Copied {} of {} files ({}) to {}, cost {:.2f}s'.format(
				len(report.copied), report.total, ByteCount(report.size).auto_str(), run_dir, timer.get_elapsed(),
			))
			for line in report.failures.to_lines():
				self.logger.warning('Failed to copy {}'.format(line))

		timer.stop()
		report.cost = timer.get_elapsed()
		return report
