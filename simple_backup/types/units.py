import functools
import re
from typing import Dict, NamedTuple, Tuple, Union

from simple_backup.utils import misc_utils


def _split_unit(s: str) -> Tuple[Union[int, float], str]:
	match = re.fullmatch(r'\s*([-+.\d]+)\s*(\w*)\s*', s)
	if not match:
		raise ValueError('bad value {!r}'.format(s))
	num = match.group(1)
	try:
		value = int(num)
	except ValueError:
		try:
			value = float(num)
		except ValueError:
			raise ValueError('{!r} is not a number'.format(num)) from None
	return value, match.group(2)


class ValueUnitPair(NamedTuple):
	value: Union[int, float]
	unit: str

	def to_str(self, ndigits: int = 2) -> str:
		if ndigits >= 0 and isinstance(self.value, float):
			return f'{self.value:.{ndigits}f}{self.unit}'
		return f'{self.value}{self.unit}'


class ByteCount(str):
	"""
	A byte amount that keeps its human-readable form, e.g. ``ByteCount('100KB').value == 100000``

	Accepts decimal (K, M, G, T) and binary (Ki, Mi, Gi, Ti) prefixes, with or without the trailing ``B``
	"""
	_value: int

	__bsi = {'Ki': 2 ** 10, 'Mi': 2 ** 20, 'Gi': 2 ** 30, 'Ti': 2 ** 40}
	__dsi = {'K': 10 ** 3, 'M': 10 ** 6, 'G': 10 ** 9, 'T': 10 ** 12}

	@classmethod
	@functools.lru_cache
	def _get_unit_map(cls) -> Dict[str, int]:
		ret = {'': 1}
		ret.update(cls.__bsi)
		ret.update(cls.__dsi)
		return ret

	@classmethod
	def parse_unit(cls, unit: str) -> int:
		if len(unit) > 0 and unit[-1] in ('b', 'B'):
			unit = unit[:-1]
		for k, v in cls._get_unit_map().items():
			if k.lower() == unit.lower():
				return v
		raise ValueError('unknown unit {!r}'.format(unit))

	@classmethod
	def _precise_format(cls, val: int) -> ValueUnitPair:
		if val != 0:
			# largest unit that divides the value exactly
			for unit, k in sorted(cls._get_unit_map().items(), key=lambda t: t[1], reverse=True):
				if val % k == 0:
					return ValueUnitPair(val // k, unit + 'B')
		return ValueUnitPair(val, 'B')

	@classmethod
	def _auto_format(cls, val: int) -> ValueUnitPair:
		ret = ValueUnitPair(val, 'B')
		for unit in ['KiB', 'MiB', 'GiB', 'TiB']:
			k = cls.__bsi[unit[:-1]]
			if abs(val) < k:
				break
			ret = ValueUnitPair(val / k, unit)
		return ret

	def __new__(cls, s: Union[int, str]):
		if isinstance(s, str):
			value, unit = _split_unit(s)
			value = value * cls.parse_unit(unit)
			if isinstance(value, float):
				if not value.is_integer():
					raise ValueError('{!r} is not a whole number of bytes'.format(s))
				value = int(value)
		elif isinstance(s, int) and not isinstance(s, bool):
			value = s
		else:
			raise TypeError(type(s))

		obj = super().__new__(cls, cls._precise_format(value).to_str())
		obj._value = value
		return obj

	@property
	def value(self) -> int:
		"""
		Byte count
		"""
		return self._value

	def auto_str(self, ndigits: int = 2) -> str:
		return self._auto_format(self._value).to_str(ndigits)

	def __repr__(self) -> str:
		return misc_utils.represent(self, attrs={'value': self._value})
