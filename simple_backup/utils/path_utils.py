import posixpath
from pathlib import Path, PurePosixPath
from typing import Union

PathLike = Union[str, Path]


def is_relative_to(child: Path, parent: PathLike) -> bool:
	try:
		child.relative_to(parent)
	except ValueError:
		return False
	else:
		return True


def normalize_relative(path: str) -> PurePosixPath:
	"""
	Lexically normalize a user-supplied path as a root-relative posix path.

	Backslashes count as separators, leading separators are dropped, ``.`` and ``..`` are folded.
	The result may still start with ``..`` if the input climbs above the root
	"""
	path = path.strip().replace('\\', '/').lstrip('/')
	if len(path) == 0:
		return PurePosixPath('.')
	return PurePosixPath(posixpath.normpath(path))


def escapes_root(rel_path: PurePosixPath) -> bool:
	return len(rel_path.parts) > 0 and rel_path.parts[0] == '..'
