"""
Округление "половина вверх": 12.5 -> 13, 4.5 -> 5.

Встроенный round() округляет половины к четному (12.5 -> 12), поэтому
все проценты, калории и сроки в приложении округляются здесь.
"""
import math


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_half_up_to(value: float, digits: int) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
