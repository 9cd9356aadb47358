import dataclasses
from typing import List, Optional

from simple_backup.types.copy_failure import CopyFailures
from simple_backup.types.resolved_path import ResolvedPath


@dataclasses.dataclass
class BackupReport:
	run_dir: Optional[ResolvedPath] = None
	total: int = 0  # size of the copy set
	size: int = 0  # bytes
	copied: List[str] = dataclasses.field(default_factory=list)
	skipped: List[str] = dataclasses.field(default_factory=list)  # target already existed
	failures: CopyFailures = dataclasses.field(default_factory=CopyFailures)
	aborted_reason: Optional[str] = None
	cost: float = 0  # seconds

	@property
	def aborted(self) -> bool:
		return self.aborted_reason is not None

	@property
	def ok(self) -> bool:
		"""
		Whether every file in the copy set was copied
		"""
		return not self.aborted and self.total > 0 and len(self.copied) == self.total
