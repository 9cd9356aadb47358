import os
import tempfile
import unittest
from pathlib import Path
from typing import Dict, Optional
from unittest import mock

from simple_backup.action.backup_now_action import BackupNowAction
from simple_backup.config.config import Config
from simple_backup.file_set import FileSetEngine
from simple_backup.path_resolver import PathResolver
from simple_backup.types.backup_report import BackupReport
from simple_backup.utils import file_utils


class BackupNowActionTestCase(unittest.TestCase):
	FILES: Dict[str, bytes] = {
		'a.txt': b'0123456789',
		'.DS_Store': b'x',
		'backup/old.txt': b'12345',
		'data/img.jpg': b'jpg',
		'data/sub/file.txt': b'file',
	}

	def setUp(self):
		self.temp_dir = tempfile.TemporaryDirectory()
		self.root = Path(self.temp_dir.name).resolve()
		for path, content in self.FILES.items():
			file_path = self.root / path
			file_path.parent.mkdir(parents=True, exist_ok=True)
			file_path.write_bytes(content)
		self.engine = FileSetEngine(PathResolver(self.root), destination='backup')

	def tearDown(self):
		self.temp_dir.cleanup()

	def run_backup(self, sub_dir: str = 'run', size_limit: int = 100000, check_free_space: Optional[bool] = False) -> BackupReport:
		return BackupNowAction(self.engine, sub_dir, size_limit, check_free_space=check_free_space).run()

	def test_0_copy(self):
		self.engine.include(['/'])
		report = self.run_backup()
		self.assertTrue(report.ok)
		self.assertEqual(3, report.total)
		self.assertEqual(17, report.size)
		self.assertEqual('backup/run', report.run_dir.posix)
		self.assertEqual(['a.txt', 'data/img.jpg', 'data/sub/file.txt'], sorted(report.copied))
		run_dir = self.root / 'backup' / 'run'
		self.assertEqual(b'0123456789', (run_dir / 'a.txt').read_bytes())
		self.assertEqual(b'jpg', (run_dir / 'data' / 'img.jpg').read_bytes())
		self.assertEqual(b'file', (run_dir / 'data' / 'sub' / 'file.txt').read_bytes())
		self.assertFalse((run_dir / '.DS_Store').exists())
		self.assertFalse((run_dir / 'backup').exists())

	def test_1_nothing_to_copy(self):
		report = self.run_backup()
		self.assertFalse(report.ok)
		self.assertTrue(report.aborted)
		self.assertFalse((self.root / 'backup' / 'run').exists())

		self.engine.include(['.DS_Store', 'backup'])
		report = self.run_backup()
		self.assertFalse(report.ok)
		self.assertEqual(0, report.total)

	def test_2_size_limit_exact(self):
		self.engine.include(['/'])
		report = self.run_backup(size_limit=17)
		self.assertTrue(report.ok)
		self.assertEqual(3, len(report.copied))

	def test_3_size_limit_one_byte_over(self):
		self.engine.include(['/'])
		report = self.run_backup(size_limit=16)
		self.assertFalse(report.ok)
		self.assertTrue(report.aborted)
		self.assertEqual(0, len(report.copied))
		self.assertFalse((self.root / 'backup' / 'run').exists())

	def test_4_destination_not_created_on_size_abort(self):
		self.engine.set_destination('new_backups')
		self.engine.include(['a.txt'])
		report = self.run_backup(size_limit=5)
		self.assertFalse(report.ok)
		self.assertFalse((self.root / 'new_backups').exists())

	def test_5_second_run_is_non_destructive(self):
		self.engine.include(['/'])
		self.assertTrue(self.run_backup('x').ok)
		run_dir = self.root / 'backup' / 'x'
		(self.root / 'a.txt').write_bytes(b'changed!!!')
		mtime = (run_dir / 'a.txt').stat().st_mtime_ns

		report = self.run_backup('x')
		self.assertFalse(report.ok)
		self.assertFalse(report.aborted)
		self.assertEqual(0, len(report.copied))
		self.assertEqual(['a.txt', 'data/img.jpg', 'data/sub/file.txt'], sorted(report.skipped))
		self.assertEqual(b'0123456789', (run_dir / 'a.txt').read_bytes())
		self.assertEqual(mtime, (run_dir / 'a.txt').stat().st_mtime_ns)

	def test_6_partial_conflict(self):
		self.engine.include(['/'])
		run_dir = self.root / 'backup' / 'y'
		(run_dir / 'data').mkdir(parents=True)
		(run_dir / 'data' / 'img.jpg').write_bytes(b'old')

		report = self.run_backup('y')
		self.assertFalse(report.ok)
		self.assertEqual(['data/img.jpg'], report.skipped)
		self.assertEqual(2, len(report.copied))
		self.assertEqual(b'old', (run_dir / 'data' / 'img.jpg').read_bytes())
		self.assertEqual(b'0123456789', (run_dir / 'a.txt').read_bytes())

	def test_7_bad_sub_dir(self):
		self.engine.include(['/'])
		for sub_dir in ['../../outside', '..', '', '/', '  ']:
			with self.subTest(sub_dir=sub_dir):
				report = self.run_backup(sub_dir)
				self.assertFalse(report.ok)
				self.assertTrue(report.aborted)
		self.assertEqual(['old.txt'], os.listdir(self.root / 'backup'))

	def test_8_sub_dir_stays_in_destination(self):
		self.engine.include(['a.txt'])
		report = self.run_backup('x/../elsewhere')
		self.assertTrue(report.ok)
		# '..' is folded against the project root first, it never climbs out of the destination
		self.assertTrue((self.root / 'backup' / 'elsewhere' / 'a.txt').is_file())
		self.assertFalse((self.root / 'elsewhere').exists())

	def test_9_nested_sub_dir(self):
		self.engine.include(['data'])
		report = self.run_backup('2024/01')
		self.assertTrue(report.ok)
		self.assertTrue((self.root / 'backup' / '2024' / '01' / 'data' / 'sub' / 'file.txt').is_file())

	def test_10_destination_blocked_by_file(self):
		self.engine.set_destination('blocked')
		(self.root / 'blocked').write_bytes(b'not a dir')
		self.engine.include(['a.txt'])
		report = self.run_backup()
		self.assertFalse(report.ok)
		self.assertTrue(report.aborted)
		self.assertEqual(b'not a dir', (self.root / 'blocked').read_bytes())

	def test_11_vanished_file(self):
		self.engine.include(['/'])
		(self.root / 'data' / 'img.jpg').unlink()
		report = self.run_backup()
		self.assertFalse(report.ok)
		self.assertFalse(report.aborted)
		self.assertEqual(1, len(report.failures))
		self.assertEqual(2, len(report.copied))
		self.assertEqual('data/img.jpg', list(report.failures)[0].file.posix)
		self.assertFalse((self.root / 'backup' / 'run' / 'data' / 'img.jpg').exists())

	def test_12_free_space_check(self):
		self.engine.include(['/'])
		report = self.run_backup(check_free_space=True)
		self.assertTrue(report.ok)

	def test_13_concurrent_copy(self):
		for i in range(50):
			file_path = self.root / 'many' / 'd{}'.format(i % 5) / 'f{}.bin'.format(i)
			file_path.parent.mkdir(parents=True, exist_ok=True)
			file_path.write_bytes(bytes([i]) * i)
		self.engine.include(['many'])
		(self.root / 'backup' / 'par' / 'many' / 'd0').mkdir(parents=True)
		(self.root / 'backup' / 'par' / 'many' / 'd0' / 'f0.bin').write_bytes(b'keep')

		config = Config.deserialize({'concurrency': 4})
		report = BackupNowAction(self.engine, 'par', 100000, check_free_space=False, config=config).run()
		self.assertFalse(report.ok)
		self.assertEqual(49, len(report.copied))
		self.assertEqual(['many/d0/f0.bin'], report.skipped)
		for i in range(1, 50):
			copied = self.root / 'backup' / 'par' / 'many' / 'd{}'.format(i % 5) / 'f{}.bin'.format(i)
			self.assertEqual(bytes([i]) * i, copied.read_bytes())

	def test_14_unexpected_error_in_one_file(self):
		self.engine.include(['/'])
		copy_file_exclusive = file_utils.copy_file_exclusive

		def copy_or_fail(src: Path, dst: Path):
			if src.name == 'img.jpg':
				raise ValueError('bad file')
			copy_file_exclusive(src, dst)

		with mock.patch.object(file_utils, 'copy_file_exclusive', side_effect=copy_or_fail):
			report = self.run_backup()
		self.assertFalse(report.ok)
		self.assertFalse(report.aborted)
		self.assertEqual(['a.txt', 'data/sub/file.txt'], sorted(report.copied))
		self.assertEqual(1, len(report.failures))
		failure = list(report.failures)[0]
		self.assertEqual('data/img.jpg', failure.file.posix)
		self.assertIsInstance(failure.error, ValueError)
		self.assertEqual(['data/img.jpg: (ValueError) bad file'], report.failures.to_lines())


if __name__ == '__main__':
	unittest.main()
