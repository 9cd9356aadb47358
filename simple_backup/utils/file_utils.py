import errno
import os
import shutil
from pathlib import Path
from typing import BinaryIO

import psutil

HAS_COPY_FILE_RANGE = callable(getattr(os, 'copy_file_range', None))


def __is_cow_not_supported_error(e: int) -> bool:
	# https://github.com/coreutils/coreutils/blob/c343bee1b5de6087b70fe80db9e1f81bb1fc535c/src/copy.c#L292
	return e in (
		errno.ENOSYS, errno.ENOTTY, errno.EOPNOTSUPP, errno.ENOTSUP,
		errno.EINVAL, errno.EBADF,
		errno.EXDEV, errno.ETXTBSY,
		errno.EPERM, errno.EACCES,
	)


def copy_file_exclusive(src_path: Path, dst_path: Path):
	"""
	Copy the bytes of src_path to a newly created dst_path.
	A partially written dst_path is removed if the copy fails

	:raise FileExistsError: dst_path already exists, it's never overwritten
	"""
	with open(src_path, 'rb') as f_src, open(dst_path, 'xb') as f_dst:
		try:
			__copy_content(f_src, f_dst)
		except BaseException:
			f_dst.close()
			dst_path.unlink(missing_ok=True)
			raise


def __copy_content(f_src: BinaryIO, f_dst: BinaryIO):
	if HAS_COPY_FILE_RANGE:
		# https://man7.org/linux/man-pages/man2/copy_file_range.2.html
		total_read = 0
		try:
			while n := os.copy_file_range(f_src.fileno(), f_dst.fileno(), 2 ** 30):
				total_read += n
			return
		except OSError as e:
			# unsupported or read nothing -> retry with a plain copy
			# reference: https://github.com/coreutils/coreutils/blob/c343bee1b5de6087b70fe80db9e1f81bb1fc535c/src/copy.c#L312
			if __is_cow_not_supported_error(e.errno) and total_read == 0:
				pass
			else:
				raise

	shutil.copyfileobj(f_src, f_dst)


def get_free_space(path: Path) -> int:
	"""
	Free bytes on the filesystem holding path, or its nearest existing ancestor
	"""
	path = path.absolute()
	while not path.exists() and path.parent != path:
		path = path.parent
	return psutil.disk_usage(str(path)).free
