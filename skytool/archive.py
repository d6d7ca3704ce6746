import logging

from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Optional

from construct import ConstructError, Container, Int32ul

from .cursor import ByteCursor
from .errors import ArchiveIOError, CorruptDirectory, DecompressError, NotAnArchive
from .rnc import is_rnc1, unpack_rnc1
from .skystructs import *

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchiveHandle:
    dnr_path: Path
    dsk_path: Path
    directory: memoryview
    data: memoryview

    @property
    def size(self):
        return len(self.data)


@dataclass(eq=False)
class ResourceRecord:
    index: int
    number: int
    offset: int
    length: int
    raw: memoryview
    stored_length: int = 0
    has_header: bool = False
    uses_header: bool = False
    inferred: bool = False
    header: Optional[Container] = None
    notes: list = field(default_factory=list)

    @property
    def compressed(self):
        return self.header is not None and bool(self.header.flags & COMPRESSED_FLAG)

    @property
    def audio_flag(self):
        return self.header is not None and bool(self.header.x & AUDIO_FLAG)

    @cached_property
    def _unpacked(self):
        if self.header is None:
            return bytes(self.raw), "none"

        body = self.raw[FILE_HEADER_SIZE:]
        if not self.compressed:
            return bytes(body), "none"

        if not is_rnc1(body):
            logger.warning("resource %d: flagged compressed without an RNC1 signature", self.number)
            return bytes(body), "rnc1-failed"
        try:
            return unpack_rnc1(body), "rnc1"
        except DecompressError as e:
            logger.warning("resource %d: rnc1 unpack failed: %s", self.number, e)
            return bytes(body), "rnc1-failed"

    @property
    def body(self):
        """Contents without the file header, unpacked when flagged."""
        return self._unpacked[0]

    @property
    def packing(self):
        return self._unpacked[1]


def find_file(directory, name):
    for entry in sorted(directory.iterdir()):
        if entry.name.lower() == name and entry.is_file():
            return entry
    return None


def _read(path):
    try:
        return memoryview(path.read_bytes()).toreadonly()
    except OSError as e:
        raise ArchiveIOError(path, e.strerror or str(e))


def open_archive(path):
    path = Path(path)
    if not path.exists():
        raise ArchiveIOError(path, "no such file or directory")
    directory = path if path.is_dir() else path.parent

    try:
        dnr_path = find_file(directory, DNR_NAME)
        dsk_path = find_file(directory, DSK_NAME)
    except OSError as e:
        raise ArchiveIOError(directory, e.strerror or str(e))

    if dnr_path is None:
        raise NotAnArchive(directory, "%s not found" % DNR_NAME)
    if dsk_path is None:
        raise NotAnArchive(directory, "%s not found" % DSK_NAME)

    handle = ArchiveHandle(dnr_path, dsk_path, _read(dnr_path), _read(dsk_path))
    logger.info("opened %s (%d bytes of data)", directory, handle.size)
    return handle


def read_dinner_table(handle):
    if len(handle.directory) < DINNER_COUNT_SIZE:
        raise CorruptDirectory(handle.dnr_path, "entry count unreadable")

    count = Int32ul.parse(bytes(handle.directory[:DINNER_COUNT_SIZE]))
    needed = DINNER_COUNT_SIZE + count * DINNER_ENTRY_SIZE
    if needed > len(handle.directory):
        raise CorruptDirectory(
            handle.dnr_path,
            "%d entries need %d bytes, table has %d" % (count, needed, len(handle.directory)))

    try:
        return DinnerTable.parse(bytes(handle.directory[:needed]))
    except ConstructError as e:
        raise CorruptDirectory(handle.dnr_path, str(e))


def enumerate_records(handle):
    entries = sorted(read_dinner_table(handle), key=lambda e: e.offset)
    data = ByteCursor(handle.data)
    records = []

    for index, entry in enumerate(entries):
        notes = []
        offset = entry.offset
        if offset > handle.size:
            logger.warning("resource %d: offset 0x%x past end of data, clamped", entry.number, offset)
            notes.append("offset-clamped")
            offset = handle.size

        if index + 1 < len(entries):
            bound = min(entries[index + 1].offset, handle.size)
        else:
            bound = handle.size

        stored = entry.size & SIZE_MASK
        length = stored
        inferred = False
        if stored == 0 or offset + stored > bound:
            length = max(bound - offset, 0)
            inferred = True
            if stored:
                logger.warning("resource %d: stored size %d overruns, using %d", entry.number, stored, length)
                notes.append("length-inferred")

        has_header = not entry.size & NO_HEADER_BIT
        uses_header = not entry.size & HEADER_UNUSED_BIT
        raw = data.slice(offset, length)

        header = None
        if has_header:
            if length >= FILE_HEADER_SIZE:
                header = FileHeader.parse(bytes(raw[:FILE_HEADER_SIZE]))
            else:
                notes.append("short-header")

        records.append(ResourceRecord(
            index=index,
            number=entry.number,
            offset=offset,
            length=length,
            raw=raw,
            stored_length=stored,
            has_header=has_header,
            uses_header=uses_header,
            inferred=inferred,
            header=header,
            notes=notes,
        ))

    logger.info("%d resources in %s", len(records), handle.dnr_path.name)
    return records
