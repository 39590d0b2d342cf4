"""Partitioning of a payload into multipart upload parts."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PartRange:
    """Byte range ``[start, end)`` of the payload uploaded as one part."""

    part_number: int
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start


def plan_parts(size: int, block_size: int) -> tuple[list[PartRange], PartRange | None]:
    """Split a payload into full blocks and an optional trailing remainder.

    Parts are numbered from 0 in increasing offset order. The remainder, when
    the size is not a multiple of the block size, is always the last part and
    is numbered ``size // block_size``.

    Args:
        size: Payload length in bytes.
        block_size: Server-assigned block size in bytes.

    Returns:
        Tuple of (full_parts, remainder). ``remainder`` is None when the size
        divides evenly by the block size.

    Raises:
        ValueError: If block_size is not positive or size is negative.
    """
    if block_size <= 0:
        raise ValueError(f"block_size must be positive, got {block_size}")
    if size < 0:
        raise ValueError(f"size must not be negative, got {size}")

    full_count = size // block_size
    full_parts = [
        PartRange(
            part_number=index,
            start=index * block_size,
            end=(index + 1) * block_size,
        )
        for index in range(full_count)
    ]

    remainder = None
    if full_count * block_size < size:
        remainder = PartRange(
            part_number=full_count, start=full_count * block_size, end=size
        )
    return full_parts, remainder
