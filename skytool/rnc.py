import logging

from construct import ConstructError

from .cursor import ByteCursor
from .errors import CursorError, DecompressError
from .skystructs import RncHeader, RNC_HEADER_SIZE

logger = logging.getLogger(__name__)

LEAVES = 16


def is_rnc1(data):
    return bytes(data[:4]) == b"RNC\x01"


def inverse_bits(value, count):
    out = 0
    for _ in range(count):
        out = (out << 1) | (value & 1)
        value >>= 1
    return out


class BitQueue:
    """LSB-first bit queue fed with 16-bit little endian words.

    Literal bytes are read straight from the cursor in between, so the
    queue only ever holds the word it needs.
    """

    __slots__ = "cursor", "bits", "count"

    def __init__(self, cursor):
        self.cursor = cursor
        self.bits = 0
        self.count = 0

    def _byte(self):
        # missing input past the end reads as zero
        return self.cursor.read_u8() if self.cursor.remaining() else 0

    def refill(self):
        b0 = self._byte()
        b1 = self._byte()
        self.bits |= ((b1 << 8) | b0) << self.count
        self.count += 16

    def peek(self):
        ahead = bytes(self.cursor.peek(2)).ljust(2, b"\x00")
        p = ahead[0] | (ahead[1] << 8)
        return ((p << self.count) | self.bits) & 0xFFFF

    def read(self, n):
        if n > self.count:
            self.refill()
        v = self.bits & ((1 << n) - 1)
        self.bits >>= n
        self.count -= n
        return v


class Table:
    __slots__ = "codes", "depths"

    def __init__(self):
        self.codes = [0] * LEAVES
        self.depths = [0] * LEAVES

    def read(self, queue):
        # a table with no leaves keeps the previous block's codes
        leaves = min(queue.read(5), LEAVES)
        if leaves == 0:
            return

        for i in range(leaves):
            self.depths[i] = queue.read(4)

        val = 0
        div = 0x80000000
        for depth in range(1, 17):
            for i in range(leaves):
                if self.depths[i] == depth:
                    self.codes[i] = inverse_bits(val // div, depth)
                    val = (val + div) & 0xFFFFFFFF
            div >>= 1

    def value(self, queue):
        for i in range(LEAVES):
            depth = self.depths[i]
            if depth == 0:
                continue
            if self.codes[i] == queue.peek() & ((1 << depth) - 1):
                queue.read(depth)
                if i < 2:
                    return i
                return queue.read(i - 1) | (1 << (i - 1))
        raise DecompressError("no matching huffman code")


def unpack_rnc1(data):
    cursor = ByteCursor(data)
    try:
        hdr = RncHeader.parse(bytes(cursor.read(RNC_HEADER_SIZE)))
    except (ConstructError, CursorError):
        raise DecompressError("invalid signature")

    queue = BitQueue(cursor)
    out = bytearray()

    raw_table = Table()
    offset_table = Table()
    count_table = Table()

    try:
        queue.read(2)
        for _ in range(hdr.blocks):
            raw_table.read(queue)
            offset_table.read(queue)
            count_table.read(queue)

            subchunks = queue.read(16)
            for subchunk in range(subchunks):
                length = raw_table.value(queue)
                if length:
                    out += cursor.read(length)

                if subchunk < subchunks - 1:
                    offset = offset_table.value(queue) + 1
                    count = count_table.value(queue) + 2
                    if offset > len(out):
                        raise DecompressError("match offset %d before start of output" % offset)
                    start = len(out) - offset
                    for x in range(count):
                        out.append(out[start + x])
    except CursorError:
        raise DecompressError("truncated input")

    if len(out) != hdr.unpacked_len:
        logger.debug("rnc1: unpacked %d bytes, header says %d", len(out), hdr.unpacked_len)

    return bytes(out)
