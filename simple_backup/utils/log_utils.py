import logging

LOG_FORMATTER_DEBUG = logging.Formatter('[%(asctime)s %(levelname)s] (%(funcName)s) %(message)s')
LOG_FORMATTER_DEBUG.default_msec_format = '%s.%03d'


class HostLineFormatter(logging.Formatter):
	"""
	One human-readable line per record. Warnings and errors carry a ``LEVEL:`` prefix,
	informational lines are printed as they are
	"""
	def __init__(self):
		super().__init__('%(message)s')

	def format(self, record: logging.LogRecord) -> str:
		line = super().format(record)
		if record.levelno >= logging.WARNING:
			line = '{}: {}'.format(record.levelname, line)
		return line


LOG_FORMATTER = HostLineFormatter()


def get_log_level() -> int:
	from simple_backup.config.config import Config
	return logging.DEBUG if Config.get().debug else logging.INFO


def get_log_formatter() -> logging.Formatter:
	from simple_backup.config.config import Config
	return LOG_FORMATTER_DEBUG if Config.get().debug else LOG_FORMATTER
