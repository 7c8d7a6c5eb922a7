"""BLAKE3 hashing (default 32-byte output, unkeyed mode)."""

from __future__ import annotations

import struct

OUT_LEN = 32
BLOCK_LEN = 64
CHUNK_LEN = 1024

_CHUNK_START = 1 << 0
_CHUNK_END = 1 << 1
_PARENT = 1 << 2
_ROOT = 1 << 3

_MASK = 0xFFFFFFFF

_IV = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

_MSG_PERMUTATION = (2, 6, 3, 10, 7, 0, 4, 13, 1, 11, 12, 5, 9, 14, 15, 8)

_BLOCK_WORDS = struct.Struct("<16I")
_OUT_WORDS = struct.Struct("<8I")


def _rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & _MASK


def _g(s: list[int], a: int, b: int, c: int, d: int, x: int, y: int) -> None:
    s[a] = (s[a] + s[b] + x) & _MASK
    s[d] = _rotr(s[d] ^ s[a], 16)
    s[c] = (s[c] + s[d]) & _MASK
    s[b] = _rotr(s[b] ^ s[c], 12)
    s[a] = (s[a] + s[b] + y) & _MASK
    s[d] = _rotr(s[d] ^ s[a], 8)
    s[c] = (s[c] + s[d]) & _MASK
    s[b] = _rotr(s[b] ^ s[c], 7)


def _round(s: list[int], m: list[int]) -> None:
    _g(s, 0, 4, 8, 12, m[0], m[1])
    _g(s, 1, 5, 9, 13, m[2], m[3])
    _g(s, 2, 6, 10, 14, m[4], m[5])
    _g(s, 3, 7, 11, 15, m[6], m[7])
    _g(s, 0, 5, 10, 15, m[8], m[9])
    _g(s, 1, 6, 11, 12, m[10], m[11])
    _g(s, 2, 7, 8, 13, m[12], m[13])
    _g(s, 3, 4, 9, 14, m[14], m[15])


def _compress(
    cv: list[int], block_words: list[int], counter: int, block_len: int, flags: int
) -> list[int]:
    state = [
        *cv,
        *_IV[:4],
        counter & _MASK,
        (counter >> 32) & _MASK,
        block_len,
        flags,
    ]
    words = list(block_words)
    for round_number in range(7):
        _round(state, words)
        if round_number < 6:
            words = [words[i] for i in _MSG_PERMUTATION]
    low, high = state[:8], state[8:]
    return [a ^ b for a, b in zip(low, high)] + [h ^ c for h, c in zip(high, cv)]


def _words(block: bytes | bytearray) -> list[int]:
    return list(_BLOCK_WORDS.unpack(bytes(block).ljust(BLOCK_LEN, b"\0")))


class _Output:
    __slots__ = ("input_cv", "block_words", "counter", "block_len", "flags")

    def __init__(
        self,
        input_cv: list[int],
        block_words: list[int],
        counter: int,
        block_len: int,
        flags: int,
    ) -> None:
        self.input_cv = input_cv
        self.block_words = block_words
        self.counter = counter
        self.block_len = block_len
        self.flags = flags

    def chaining_value(self) -> list[int]:
        return _compress(
            self.input_cv, self.block_words, self.counter, self.block_len, self.flags
        )[:8]

    def root_bytes(self) -> bytes:
        words = _compress(
            self.input_cv, self.block_words, 0, self.block_len, self.flags | _ROOT
        )
        return _OUT_WORDS.pack(*words[:8])


def _parent_output(left: list[int], right: list[int], key: list[int], flags: int) -> _Output:
    return _Output(key, left + right, 0, BLOCK_LEN, _PARENT | flags)


class _ChunkState:
    __slots__ = ("cv", "chunk_counter", "block", "blocks_compressed", "flags")

    def __init__(self, key: list[int], chunk_counter: int, flags: int) -> None:
        self.cv = list(key)
        self.chunk_counter = chunk_counter
        self.block = bytearray()
        self.blocks_compressed = 0
        self.flags = flags

    def __len__(self) -> int:
        return BLOCK_LEN * self.blocks_compressed + len(self.block)

    def _start_flag(self) -> int:
        return _CHUNK_START if self.blocks_compressed == 0 else 0

    def update(self, data: memoryview) -> None:
        while data:
            if len(self.block) == BLOCK_LEN:
                self.cv = _compress(
                    self.cv,
                    _words(self.block),
                    self.chunk_counter,
                    BLOCK_LEN,
                    self.flags | self._start_flag(),
                )[:8]
                self.blocks_compressed += 1
                self.block = bytearray()
            take = BLOCK_LEN - len(self.block)
            self.block += data[:take]
            data = data[take:]

    def output(self) -> _Output:
        return _Output(
            self.cv,
            _words(self.block),
            self.chunk_counter,
            len(self.block),
            self.flags | self._start_flag() | _CHUNK_END,
        )

    def copy(self) -> _ChunkState:
        other = _ChunkState(self.cv, self.chunk_counter, self.flags)
        other.block = bytearray(self.block)
        other.blocks_compressed = self.blocks_compressed
        return other


class Blake3Hasher:
    """Incremental BLAKE3 hasher producing 32-byte digests."""

    def __init__(self, data: bytes = b"") -> None:
        self._key = list(_IV)
        self._flags = 0
        self._chunk = _ChunkState(self._key, 0, self._flags)
        self._cv_stack: list[list[int]] = []
        if data:
            self.update(data)

    def _push_chunk_cv(self, cv: list[int], total_chunks: int) -> None:
        while total_chunks & 1 == 0:
            cv = _parent_output(self._cv_stack.pop(), cv, self._key, self._flags).chaining_value()
            total_chunks >>= 1
        self._cv_stack.append(cv)

    def update(self, data: bytes | bytearray | memoryview) -> None:
        """Feed more input into the hasher."""
        view = memoryview(bytes(data))
        while view:
            if len(self._chunk) == CHUNK_LEN:
                chunk_cv = self._chunk.output().chaining_value()
                total_chunks = self._chunk.chunk_counter + 1
                self._push_chunk_cv(chunk_cv, total_chunks)
                self._chunk = _ChunkState(self._key, total_chunks, self._flags)
            take = CHUNK_LEN - len(self._chunk)
            self._chunk.update(view[:take])
            view = view[take:]

    def digest(self) -> bytes:
        """Return the 32-byte digest of everything fed so far."""
        output = self._chunk.output()
        for cv in reversed(self._cv_stack):
            output = _parent_output(cv, output.chaining_value(), self._key, self._flags)
        return output.root_bytes()

    def copy(self) -> Blake3Hasher:
        """Return an independent hasher with the same state."""
        other = Blake3Hasher()
        other._chunk = self._chunk.copy()
        other._cv_stack = [list(cv) for cv in self._cv_stack]
        return other


def blake3(data: bytes | bytearray | memoryview) -> bytes:
    """Return the 32-byte BLAKE3 digest of ``data``."""
    return Blake3Hasher(data).digest()