import logging
import os
import stat
from pathlib import Path, PurePosixPath
from typing import Iterable, Set, FrozenSet, List, Optional

import pathspec

from simple_backup import constants
from simple_backup import logger
from simple_backup.exceptions import SimpleBackupError
from simple_backup.path_resolver import PathResolver
from simple_backup.types.resolved_path import ResolvedPath


class FileSetEngine:
	"""
	Accumulates the walked (included) and omitted files of a backup session,
	and computes the set of files a backup run copies
	"""
	def __init__(
			self, resolver: PathResolver, *,
			destination: Optional[str] = None,
			ignored_suffixes: Optional[List[str]] = None,
			ignore_patterns: Optional[List[str]] = None,
	):
		self.logger: logging.Logger = logger.get()
		self.resolver = resolver
		self.ignored_suffixes: List[str] = list(ignored_suffixes if ignored_suffixes is not None else constants.DEFAULT_IGNORED_SUFFIXES)
		self.ignore_patterns = pathspec.GitIgnoreSpec.from_lines(ignore_patterns or [])

		self.__walked_files: Set[ResolvedPath] = set()
		self.__omitted_files: Set[ResolvedPath] = set()
		self.__destination: ResolvedPath = ResolvedPath.of(resolver.root, PurePosixPath(constants.DEFAULT_DESTINATION))
		if destination is not None and destination != constants.DEFAULT_DESTINATION:
			self.set_destination(destination)

	# ==================== Walk ====================

	def __scan(self, start: Path, result: Set[ResolvedPath]):
		# explicit stack, so deep trees do not hit the recursion limit
		pending: List[Path] = [start]
		while len(pending) > 0:
			full_path = pending.pop()
			try:
				st = full_path.lstat()
			except FileNotFoundError:
				continue
			except OSError as e:
				self.logger.warning('Cannot stat {!r}: {}'.format(full_path.as_posix(), e))
				continue

			if stat.S_ISDIR(st.st_mode):
				try:
					children = os.listdir(full_path)
				except OSError as e:
					self.logger.warning('Cannot list directory {!r}: {}'.format(full_path.as_posix(), e))
					continue
				pending.extend(full_path / child for child in children)
			elif full_path.is_dir():
				# symlink to a directory, not walked into
				self.logger.debug('Skipping symlinked directory {!r}'.format(full_path.as_posix()))
			elif not full_path.is_file():
				self.logger.debug('Skipping non-regular file {!r}, mode {}'.format(full_path.as_posix(), oct(st.st_mode)))
			else:
				try:
					result.add(self.resolver.relativize(full_path))
				except SimpleBackupError as e:
					self.logger.warning('Path {} skipped: {}'.format(full_path.as_posix(), e))

	def walk(self, paths: Iterable[str]) -> Set[ResolvedPath]:
		"""
		Resolve and recursively walk the given paths into a set of existing files, directories excluded.
		A path that cannot be resolved is reported and skipped, the rest are still walked
		"""
		result: Set[ResolvedPath] = set()
		for path in paths:
			try:
				resolved = self.resolver.resolve(path, must_exist=True)
			except SimpleBackupError as e:
				self.logger.warning('Path {!r} skipped: {}'.format(path, e))
				continue
			self.__scan(resolved.absolute, result)
		return result

	def include(self, paths: Iterable[str]) -> int:
		files = self.walk(paths)
		self.__walked_files.update(files)
		self.logger.debug('Included {} files, walked file count {}'.format(len(files), len(self.__walked_files)))
		return len(files)

	def omit(self, paths: Iterable[str]) -> int:
		files = self.walk(paths)
		self.__omitted_files.update(files)
		self.logger.debug('Omitted {} files, omitted file count {}'.format(len(files), len(self.__omitted_files)))
		return len(files)

	# ==================== Destination ====================

	@property
	def destination(self) -> ResolvedPath:
		return self.__destination

	def set_destination(self, path: str) -> bool:
		"""
		An invalid or empty destination leaves the current one unchanged
		"""
		try:
			dest = self.resolver.resolve(path, must_exist=False)
		except SimpleBackupError as e:
			self.logger.warning('Destination {!r} rejected, keeping {!r}: {}'.format(path, self.__destination.posix, e))
			return False
		if dest.is_root():
			self.logger.warning('Destination directory is empty, keeping {!r}'.format(self.__destination.posix))
			return False
		if dest.absolute.exists() and not dest.absolute.is_dir():
			self.logger.warning('Destination {!r} is not a directory, keeping {!r}'.format(dest.posix, self.__destination.posix))
			return False
		self.__destination = dest
		return True

	# ==================== Filters ====================

	def is_in_destination(self, path: ResolvedPath) -> bool:
		return path.is_relative_to(self.__destination)

	def is_default_ignored(self, path: ResolvedPath) -> bool:
		posix = path.posix
		return any(posix.endswith(suffix) for suffix in self.ignored_suffixes if len(suffix) > 0)

	def is_pattern_ignored(self, path: ResolvedPath) -> bool:
		return self.ignore_patterns.match_file(path.posix)

	# ==================== Queries ====================

	def walked_files(self) -> FrozenSet[ResolvedPath]:
		return frozenset(self.__walked_files)

	def omitted_files(self) -> FrozenSet[ResolvedPath]:
		return frozenset(self.__omitted_files)

	def __excluded_by_rules(self, walked: FrozenSet[ResolvedPath]) -> FrozenSet[ResolvedPath]:
		in_destination = frozenset(p for p in walked if self.is_in_destination(p))
		default_ignored = frozenset(p for p in walked if self.is_default_ignored(p))
		pattern_ignored = frozenset(p for p in walked if self.is_pattern_ignored(p))
		return in_destination | default_ignored | pattern_ignored

	def effective_copy_set(self) -> FrozenSet[ResolvedPath]:
		"""
		walked - destination subtree - default ignored - pattern ignored - omitted, computed fresh on every call
		"""
		walked = self.walked_files()
		return walked - self.__excluded_by_rules(walked) - self.omitted_files()

	def ignored_files(self) -> FrozenSet[ResolvedPath]:
		"""
		Walked files dropped by the destination or ignore rules, rather than omitted by the user
		"""
		walked = self.walked_files()
		return self.__excluded_by_rules(walked) - self.omitted_files()

	def size_of(self, files: Iterable[ResolvedPath]) -> int:
		total = 0
		for file in files:
			try:
				total += file.absolute.stat().st_size
			except OSError as e:
				self.logger.warning('Cannot get size of {!r}: {}'.format(file.posix, e))
		return total
