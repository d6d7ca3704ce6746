import pytest

from skytool.cursor import ByteCursor
from skytool.errors import CursorError


def test_sequential_reads():
    cur = ByteCursor(b"\x01\x02\x03\x04")
    assert cur.read_u8() == 1
    assert bytes(cur.read(2)) == b"\x02\x03"
    assert cur.tell() == 3
    assert cur.remaining() == 1


def test_read_past_end():
    cur = ByteCursor(b"\x01\x02")
    cur.read(2)
    with pytest.raises(CursorError):
        cur.read_u8()


def test_peek_is_short_at_end():
    cur = ByteCursor(b"\x01\x02\x03")
    cur.seek(2)
    assert bytes(cur.peek(2)) == b"\x03"
    assert cur.tell() == 2


def test_sub_range():
    cur = ByteCursor(b"abcdefgh", start=2, end=6)
    assert len(cur) == 4
    assert bytes(cur.read(4)) == b"cdef"
    with pytest.raises(CursorError):
        cur.read(1)


def test_slice_bounds():
    cur = ByteCursor(b"abcdef")
    assert bytes(cur.slice(1, 3)) == b"bcd"
    assert bytes(cur.slice(6, 0)) == b""
    with pytest.raises(CursorError):
        cur.slice(4, 3)
    with pytest.raises(CursorError):
        cur.seek(7)


def test_slice_borrows():
    buf = bytearray(b"abcdef")
    view = ByteCursor(buf).slice(0, 2)
    buf[0] = ord("z")
    assert bytes(view) == b"zb"
