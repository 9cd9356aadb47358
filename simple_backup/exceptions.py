from pathlib import PurePath


class SimpleBackupError(Exception):
	pass


class OutsideRoot(SimpleBackupError):
	def __init__(self, path: str):
		super().__init__('Path {!r} is outside the project root'.format(path))
		self.path = path


class PathNotFound(SimpleBackupError):
	def __init__(self, path: str):
		super().__init__('Path {!r} does not exist'.format(path))
		self.path = path


class BackupAborted(SimpleBackupError):
	pass


class SizeLimitExceeded(BackupAborted):
	def __init__(self, size: int, limit: int):
		super().__init__('Not copying files. Attempting to copy {} bytes. Limit is {} bytes. Increase the limit with sizelimit(bytes).'.format(size, limit))
		self.size = size
		self.limit = limit


class InsufficientSpace(BackupAborted):
	def __init__(self, size: int, free: int):
		super().__init__('Not copying files. Attempting to copy {} bytes, only {} bytes are free at the destination.'.format(size, free))
		self.size = size
		self.free = free


class DestinationConflict(SimpleBackupError):
	def __init__(self, path: PurePath):
		super().__init__('File {} already exists'.format(path.as_posix()))
		self.path = path
