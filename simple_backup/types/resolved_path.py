import dataclasses
from pathlib import Path, PurePosixPath


@dataclasses.dataclass(frozen=True)
class ResolvedPath:
	"""
	A path inside the project root, kept both relative to the root and absolute.
	Two ResolvedPath are equal iff their relative parts are equal
	"""
	relative: PurePosixPath
	absolute: Path = dataclasses.field(compare=False)

	@classmethod
	def of(cls, root: Path, relative: PurePosixPath) -> 'ResolvedPath':
		return ResolvedPath(relative, root.joinpath(*relative.parts))

	@property
	def posix(self) -> str:
		return self.relative.as_posix()

	def is_root(self) -> bool:
		return len(self.relative.parts) == 0

	def is_relative_to(self, other: 'ResolvedPath') -> bool:
		"""
		Path-segment prefix check, so ``backupfoo/a`` is not inside ``backup``
		"""
		parts = other.relative.parts
		return self.relative.parts[:len(parts)] == parts

	def joinpath(self, other: 'ResolvedPath') -> 'ResolvedPath':
		return ResolvedPath(self.relative.joinpath(other.relative), self.absolute.joinpath(*other.relative.parts))

	def __str__(self) -> str:
		return self.posix
