"""
Actions operating on a backup session
"""
import logging
from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional, TYPE_CHECKING

if TYPE_CHECKING:
	from simple_backup.config.config import Config

_T = TypeVar('_T')


class Action(Generic[_T], ABC):
	def __init__(self, config: Optional['Config'] = None):
		from simple_backup import logger
		from simple_backup.config.config import Config
		self.logger: logging.Logger = logger.get()
		self.config: Config = config if config is not None else Config.get()

	@abstractmethod
	def run(self) -> _T:
		...
