"""Scratch buffers for decoding and check-string assembly.

Callers ask for N bytes and the allocator decides where they come from.
ThresholdAllocator carves requests out of one bounded arena and falls back
to a freshly sized bytearray once the arena is exhausted. An allocator
belongs to a single validation call and is never shared.
"""

from typing import Protocol


DEFAULT_SCRATCH_THRESHOLD = 1024


class ScratchAllocator(Protocol):
    def allocate(self, size: int) -> memoryview:
        """Return a zero-filled writable view of exactly `size` bytes."""
        ...


class ThresholdAllocator:
    def __init__(self, threshold: int = DEFAULT_SCRATCH_THRESHOLD):
        if threshold < 0:
            raise ValueError(f"scratch threshold must be >= 0, got {threshold}")
        self.threshold = threshold
        self._arena = bytearray(threshold)
        self._offset = 0
        self.arena_hits = 0
        self.fallbacks = 0

    def allocate(self, size: int) -> memoryview:
        if size < 0:
            raise ValueError(f"cannot allocate {size} bytes")
        if size <= self.threshold - self._offset:
            start = self._offset
            self._offset += size
            view = memoryview(self._arena)[start:start + size]
            view[:] = bytes(size)
            self.arena_hits += 1
            return view
        self.fallbacks += 1
        return memoryview(bytearray(size))


class HeapAllocator:
    """Every request gets its own bytearray."""

    def allocate(self, size: int) -> memoryview:
        if size < 0:
            raise ValueError(f"cannot allocate {size} bytes")
        return memoryview(bytearray(size))


def make_allocator(threshold: int | None = None) -> ThresholdAllocator:
    return ThresholdAllocator(DEFAULT_SCRATCH_THRESHOLD if threshold is None else threshold)
