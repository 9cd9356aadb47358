import functools
import queue
import threading
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Optional

from simple_backup.utils import misc_utils


class BlockingThreadPool(ThreadPoolExecutor):
	"""
	A thread pool that:
	- blocks on submit when all workers are busy, so pending tasks stay bounded
	- waits for every submitted task on exit, and re-raises the first unexpected exception
	"""
	def __init__(self, name: str, max_workers: Optional[int] = None):
		if max_workers is None:
			from simple_backup.config.config import Config
			max_workers = Config.get().get_effective_concurrency()
		thread_name_prefix = misc_utils.make_thread_name(name)

		super().__init__(max_workers=max_workers, thread_name_prefix=thread_name_prefix)
		self.__sem = threading.Semaphore(max_workers)
		self.__all_futures: 'queue.Queue[Future]' = queue.Queue()

	def submit(self, __fn, *args, **kwargs):
		func = functools.partial(__fn, *args, **kwargs)

		def wrapper_func():
			try:
				return func()
			finally:
				self.__sem.release()

		self.__sem.acquire()
		future = super().submit(wrapper_func)
		self.__all_futures.put(future)
		return future

	def __exit__(self, exc_type, exc_val, exc_tb):
		super().__exit__(exc_type, exc_val, exc_tb)
		if exc_type is None:
			from simple_backup.utils import collection_utils
			for future in collection_utils.drain_queue(self.__all_futures):
				future.result()
