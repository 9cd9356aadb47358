import datetime
from typing import Optional

import pytz

from simple_backup import constants


def now(timezone: Optional[str] = None) -> datetime.datetime:
	"""
	:param timezone: a pytz timezone name, None for the local time
	"""
	if timezone is None:
		return datetime.datetime.now()
	return datetime.datetime.now(pytz.timezone(timezone))


def current_date_and_time(pattern: str = constants.DEFAULT_DATE_PATTERN, timezone: Optional[str] = None) -> str:
	return now(timezone).strftime(pattern)
