"""Append-only byte buffer used by the I/O paths."""


class ByteBuffer:
    """Byte buffer with a populated prefix and spare capacity.

    Readers reserve a writable tail, fill part of it, then mark how many
    bytes became valid. The allocation only grows, so repeated reads
    reuse the same memory.
    """

    def __init__(self, initial_size: int = 0):
        self._data = bytearray(initial_size)
        self.bytes_populated = 0

    @property
    def allocated(self) -> int:
        return len(self._data)

    @property
    def free_space(self) -> int:
        return len(self._data) - self.bytes_populated

    def extend(self, new_size: int) -> None:
        """Grow the allocation to at least ``new_size`` bytes."""
        if new_size > len(self._data):
            self._data.extend(bytes(new_size - len(self._data)))

    def reserve(self, count: int) -> memoryview:
        """Guarantee ``count`` spare bytes and return the writable tail."""
        if self.free_space < count:
            self.extend(self.bytes_populated + count)
        return memoryview(self._data)[self.bytes_populated:]

    def mark_valid(self, count: int) -> None:
        """Add ``count`` bytes at the tail to the populated region."""
        if count < 0 or count > self.free_space:
            raise ValueError(f"cannot mark {count} bytes valid, {self.free_space} free")
        self.bytes_populated += count

    def append(self, data: bytes) -> None:
        self.reserve(len(data))[: len(data)] = data
        self.mark_valid(len(data))

    def discard_front(self, count: int) -> None:
        """Drop ``count`` leading bytes and move the rest to the start."""
        remaining = self.bytes_populated - count
        if remaining > 0:
            self._data[:remaining] = self._data[count:self.bytes_populated]
        self.bytes_populated = max(remaining, 0)

    def fill_from(self, readinto, limit: int | None = None) -> int:
        """Let ``readinto`` write into the spare capacity and mark the result valid.

        Args:
            readinto: callable taking a writable memoryview, returning bytes written
            limit: cap on the bytes offered
        """
        size = self.free_space if limit is None else min(limit, self.free_space)
        start = self.bytes_populated
        with memoryview(self._data) as whole:
            with whole[start:start + size] as tail:
                count = readinto(tail) or 0
        self.mark_valid(count)
        return count

    def search(self, pattern, start: int, end: int | None = None):
        """Run a compiled bytes regex over the populated region."""
        return pattern.search(self._data, start, self.bytes_populated if end is None else end)

    def slice(self, start: int, end: int) -> bytes:
        return bytes(self._data[start:min(end, self.bytes_populated)])

    def view(self, start: int = 0, end: int | None = None) -> memoryview:
        """Read-only slice of the populated region."""
        if end is None:
            end = self.bytes_populated
        return memoryview(self._data)[start:end].toreadonly()

    def to_bytes(self) -> bytes:
        return bytes(self._data[: self.bytes_populated])

    def reset(self) -> None:
        """Forget the contents, keep the allocation."""
        self.bytes_populated = 0

    def cleanup(self) -> None:
        """Release the allocation."""
        self._data = bytearray()
        self.bytes_populated = 0
