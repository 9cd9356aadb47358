from typing import List, Optional, Any

import pytz
from mcdreforged.api.utils import Serializable

from simple_backup import constants
from simple_backup.types.units import ByteCount


class BackupConfig(Serializable):
	destination: str = constants.DEFAULT_DESTINATION
	size_limit: ByteCount = ByteCount(constants.DEFAULT_SIZE_LIMIT)
	date_pattern: str = constants.DEFAULT_DATE_PATTERN
	timezone: Optional[str] = None
	ignored_suffixes: List[str] = list(constants.DEFAULT_IGNORED_SUFFIXES)
	ignore_patterns: List[str] = []  # gitignore syntax
	check_free_space: bool = True

	def validate_attribute(self, attr_name: str, attr_value: Any, **kwargs):
		if attr_name == 'timezone' and attr_value is not None:
			try:
				pytz.timezone(attr_value)
			except pytz.UnknownTimeZoneError as e:
				raise ValueError('bad timezone {!r}: {}'.format(attr_value, e))
		elif attr_name == 'date_pattern':
			if len(attr_value) == 0:
				raise ValueError('date_pattern cannot be empty')
