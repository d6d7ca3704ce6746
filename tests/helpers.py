import numpy as np

from skytool.skystructs import FileHeader

HEADER_DEFAULTS = dict(
    flags=0, x=0, y=0, width=0, height=0, sp_size=0, tot_size=0,
    n_sprites=0, offset_x=0, offset_y=0, compressed_size=0,
)

PALETTE_16 = bytes(range(48))
NOISE_4 = b"\x13\x9a\x02\xf7"

# "ABCABCA": three literals, a 4 byte match at distance 3, then an
# empty final subchunk
RNC_ABCABCA = (
    b"RNC\x01" + (7).to_bytes(4, "big") + (13).to_bytes(4, "big")
    + b"\x00\x00\x00\x00\x00\x01"
    + bytes([0x8C, 0x80, 0x18, 0x00, 0x31, 0x00, 0x42, 0x00, 0x60, 0x00])
    + b"ABC"
)

# "ABC" as a single literal run
RNC_ABC = (
    b"RNC\x01" + (3).to_bytes(4, "big") + (9).to_bytes(4, "big")
    + b"\x00\x00\x00\x00\x00\x01"
    + bytes([0x0C, 0x80, 0x00, 0x20, 0x00, 0x40])
    + b"ABC"
)

# "ABCDEF" over two blocks; the second declares no leaves in any table and
# decodes its literal run with the first block's raw table
RNC_TWO_BLOCKS = (
    b"RNC\x01" + (6).to_bytes(4, "big") + (16).to_bytes(4, "big")
    + b"\x00\x00\x00\x00\x00\x02"
    + bytes([0x0C, 0x80, 0x00, 0x20, 0x00, 0x40])
    + b"ABC"
    + bytes([0x00, 0x40, 0x00, 0x80])
    + b"DEF"
)

# one-leaf tables: no literals, then a match at distance 1 into empty output
RNC_BAD_MATCH = (
    b"RNC\x01" + (2).to_bytes(4, "big") + (8).to_bytes(4, "big")
    + b"\x00\x00\x00\x00\x00\x01"
    + bytes([0x84, 0x08, 0x11, 0x42, 0x00, 0x00, 0x00, 0x00])
)


def build_header(**fields):
    return FileHeader.build(dict(HEADER_DEFAULTS, **fields))


def resource(data, header=None, number=None, size=None, offset=None):
    """One archive entry for the make_archive fixture.

    ``header`` is a dict of FileHeader fields; ``size`` and ``offset``
    override what the directory stores.
    """
    return dict(data=data, header=header, number=number, size=size, offset=offset)


def noise(n, seed=1):
    return np.random.default_rng(seed).integers(0, 256, n, dtype=np.uint8).tobytes()


def sine(n, period=100, amplitude=60):
    t = np.arange(n)
    return (128 + amplitude * np.sin(2 * np.pi * t / period)).round().astype(np.uint8).tobytes()


def sprite(width, height, frames=1):
    # transparent background with a solid block in the middle
    a = np.zeros((height * frames, width), dtype=np.uint8)
    a[height // 4:height // 2, width // 4:width // 2] = 7
    return a.tobytes()
