import logging
from pathlib import Path, PurePosixPath

from simple_backup import logger
from simple_backup.exceptions import OutsideRoot, PathNotFound
from simple_backup.types.resolved_path import ResolvedPath
from simple_backup.utils import path_utils
from simple_backup.utils.path_utils import PathLike


class PathResolver:
	"""
	Turns user-supplied path strings into :class:`ResolvedPath` confined to the project root.

	Absolute-looking input is taken as root-relative, ``..`` that climbs above the root is rejected,
	and so is any path that the filesystem resolves (e.g. through a symlink) to somewhere outside the root
	"""
	def __init__(self, root: PathLike):
		self.logger: logging.Logger = logger.get()
		self.root: Path = Path(root).resolve()

	def root_path(self) -> ResolvedPath:
		return ResolvedPath.of(self.root, PurePosixPath('.'))

	def __check_real_path(self, original: str, resolved: ResolvedPath):
		try:
			real_path = resolved.absolute.resolve()
		except (OSError, RuntimeError) as e:
			# e.g. a symlink loop
			self.logger.debug('Cannot resolve path {!r}: {}'.format(original, e))
			raise PathNotFound(original) from None
		if not path_utils.is_relative_to(real_path, self.root):
			self.logger.debug('Path {!r} resolves to {!r}, outside root {!r}'.format(original, real_path.as_posix(), self.root.as_posix()))
			raise OutsideRoot(original)

	def resolve(self, path: str, must_exist: bool) -> ResolvedPath:
		"""
		:raise OutsideRoot: the path would reference something outside the project root
		:raise PathNotFound: must_exist is set and nothing exists at the path, or the path cannot be resolved, e.g. a symlink loop
		"""
		rel_path = path_utils.normalize_relative(path)
		if path_utils.escapes_root(rel_path):
			raise OutsideRoot(path)

		resolved = ResolvedPath.of(self.root, rel_path)
		self.__check_real_path(path, resolved)
		if must_exist and not resolved.absolute.exists():
			raise PathNotFound(path)
		return resolved

	def relativize(self, full_path: Path) -> ResolvedPath:
		"""
		For paths discovered under the root, e.g. while walking a directory
		"""
		try:
			rel_path = full_path.relative_to(self.root)
		except ValueError:
			raise OutsideRoot(full_path.as_posix()) from None

		resolved = ResolvedPath(PurePosixPath(rel_path.as_posix()), full_path)
		self.__check_real_path(full_path.as_posix(), resolved)
		return resolved
