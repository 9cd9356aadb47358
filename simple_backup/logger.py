import functools
import logging
import sys

from simple_backup import constants


def __create_logger() -> logging.Logger:
	from simple_backup.utils.log_utils import get_log_formatter
	logger = logging.Logger(constants.LIBRARY_ID)
	handler = logging.StreamHandler(sys.stdout)
	handler.setFormatter(get_log_formatter())
	logger.addHandler(handler)
	return logger


@functools.lru_cache
def get() -> logging.Logger:
	from simple_backup.utils.log_utils import get_log_level
	logger = __create_logger()
	logger.setLevel(get_log_level())
	return logger
