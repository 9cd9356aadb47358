import logging
import unittest

from simple_backup.utils.log_utils import HostLineFormatter


class HostLineFormatterTestCase(unittest.TestCase):
	@staticmethod
	def make_record(level: int, msg: str) -> logging.LogRecord:
		return logging.LogRecord('simple_backup', level, __file__, 1, msg, None, None)

	def test_0_prefix(self):
		formatter = HostLineFormatter()
		self.assertEqual('WARNING: Nothing to copy.', formatter.format(self.make_record(logging.WARNING, 'Nothing to copy.')))
		self.assertEqual('ERROR: boom', formatter.format(self.make_record(logging.ERROR, 'boom')))
		self.assertEqual('Copied a.txt to .', formatter.format(self.make_record(logging.INFO, 'Copied a.txt to .')))


if __name__ == '__main__':
	unittest.main()
