import functools
import json
import logging
from pathlib import Path
from typing import Optional, Union

from mcdreforged.api.utils import Serializable

from simple_backup.config.backup_config import BackupConfig


class Config(Serializable):
	debug: bool = False
	verbose: bool = True
	concurrency: int = 1

	backup: BackupConfig = BackupConfig()

	# ==================== Instance getters ====================

	@classmethod
	@functools.lru_cache
	def __get_default(cls) -> 'Config':
		return Config.get_default()

	@classmethod
	def get(cls) -> 'Config':
		if _config is None:
			return cls.__get_default()
		return _config

	# ==================== Field getters ====================

	def get_effective_concurrency(self) -> int:
		if self.concurrency == 0:
			import multiprocessing
			return max(1, int(multiprocessing.cpu_count() * 0.5))
		else:
			return max(1, self.concurrency)


_config: Optional[Config] = None


def set_config_instance(cfg: Config):
	global _config
	_config = cfg

	from simple_backup import logger
	from simple_backup.utils.log_utils import get_log_formatter
	logger.get().setLevel(logging.DEBUG if cfg.debug else logging.INFO)
	for handler in logger.get().handlers:
		handler.setFormatter(get_log_formatter())
	if cfg.debug:
		logger.get().debug('debug on')


def load_config(file_path: Union[str, Path]) -> Config:
	with open(file_path, 'r', encoding='utf8') as f:
		data = json.load(f)
	return Config.deserialize(data)
