# library
VERSION = '0.0.1'
LIBRARY_ID = 'simple_backup'

# backup related
DEFAULT_DESTINATION = 'simplebackup'
DEFAULT_DATE_PATTERN = '%y%m%d%H%M%S'  # yyMMddHHmmss
DEFAULT_SIZE_LIMIT = 100_000  # bytes
DEFAULT_IGNORED_SUFFIXES = [
	'.DS_Store',
]
