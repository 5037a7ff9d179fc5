from __future__ import annotations


def is_power_of_two(a: int) -> bool:
    return a > 0 and (a & (a - 1)) == 0


def align_up(value: int, align: int) -> int:
    """Round ``value`` up to the next multiple of ``align``.

    ``align`` must be a power of two; results are always >= value and
    < value + align.
    """
    if not is_power_of_two(align):
        raise ValueError(f"alignment must be a power of two, got {align}")
    if value < 0:
        raise ValueError("value must be non-negative")
    return (value + align - 1) & ~(align - 1)


def padding_for(value: int, align: int) -> int:
    """Number of zero bytes needed to bring ``value`` up to ``align``."""
    return align_up(value, align) - value
