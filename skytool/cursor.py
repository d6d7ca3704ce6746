from .errors import CursorError


class ByteCursor:
    """Reader over a byte range of a buffer it does not own.

    Positions are relative to ``start``. Reads past ``end`` raise
    CursorError, peeks return whatever is left.
    """

    __slots__ = "buf", "start", "end", "pos"

    def __init__(self, buf, start=0, end=None):
        self.buf = memoryview(buf)
        if end is None:
            end = len(self.buf)
        if not 0 <= start <= end <= len(self.buf):
            raise CursorError("range %d:%d outside buffer of %d bytes" % (start, end, len(self.buf)))
        self.start = start
        self.end = end
        self.pos = start

    def __len__(self):
        return self.end - self.start

    def tell(self):
        return self.pos - self.start

    def seek(self, offset):
        if not 0 <= offset <= len(self):
            raise CursorError("seek to %d outside %d bytes" % (offset, len(self)))
        self.pos = self.start + offset

    def remaining(self):
        return self.end - self.pos

    def read(self, n):
        if n < 0 or n > self.remaining():
            raise CursorError("read of %d bytes with %d remaining" % (n, self.remaining()))
        out = self.buf[self.pos:self.pos + n]
        self.pos += n
        return out

    def read_u8(self):
        return self.read(1)[0]

    def peek(self, n):
        return self.buf[self.pos:min(self.pos + n, self.end)]

    def slice(self, offset, length):
        if offset < 0 or length < 0 or offset + length > len(self):
            raise CursorError("slice %d+%d outside %d bytes" % (offset, length, len(self)))
        return self.buf[self.start + offset:self.start + offset + length]
