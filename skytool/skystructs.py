from construct import *

# Names of the directory and data files inside the game directory.
DNR_NAME = "sky.dnr"
DSK_NAME = "sky.dsk"

# size_and_flags: bit 23 clear means the resource carries a file header,
# bit 22 clear means the header is part of the resource.
NO_HEADER_BIT = 1 << 23
HEADER_UNUSED_BIT = 1 << 22
SIZE_MASK = 0x3FFFFF

COMPRESSED_FLAG = 0x80
AUDIO_FLAG = 0x8000

DinnerEntry = Struct(
    "number"    / Int16ul,
    "offset"    / Int24ul,
    "size"      / Int24ul,
)

DinnerTable = PrefixedArray(Int32ul, DinnerEntry)

DINNER_COUNT_SIZE = Int32ul.sizeof()
DINNER_ENTRY_SIZE = DinnerEntry.sizeof()

FileHeader = Struct(
    "flags"             / Int16ul,
    "x"                 / Int16ul,
    "y"                 / Int16ul,
    "width"             / Int16ul,
    "height"            / Int16ul,
    "sp_size"           / Int16ul,
    "tot_size"          / Int16ul,
    "n_sprites"         / Int16ul,
    "offset_x"          / Int16sl,
    "offset_y"          / Int16sl,
    "compressed_size"   / Int16ul,
)

FILE_HEADER_SIZE = FileHeader.sizeof()
HEADER_FIELDS = tuple(sc.name for sc in FileHeader.subcons)

RncHeader = Struct(
    Const(b"RNC\x01"),
    "unpacked_len"  / Int32ub,
    "packed_len"    / Int32ub,
    "crc_unpacked"  / Int16ub,
    "crc_packed"    / Int16ub,
    "overlap"       / Int8ub,
    "blocks"        / Int8ub,
)

RNC_HEADER_SIZE = RncHeader.sizeof()

__all__ = [
    "DNR_NAME", "DSK_NAME", "NO_HEADER_BIT", "HEADER_UNUSED_BIT", "SIZE_MASK",
    "COMPRESSED_FLAG", "AUDIO_FLAG",
    "DinnerEntry", "DinnerTable", "DINNER_COUNT_SIZE", "DINNER_ENTRY_SIZE",
    "FileHeader", "FILE_HEADER_SIZE", "HEADER_FIELDS", "RncHeader", "RNC_HEADER_SIZE",
]
