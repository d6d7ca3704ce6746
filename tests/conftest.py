import pytest

from helpers import build_header
from skytool.archive import ResourceRecord
from skytool.skystructs import *


@pytest.fixture
def make_archive(tmp_path):
    def make(resources, name="game", dnr=DNR_NAME, dsk=DSK_NAME, order=None):
        directory = tmp_path / name
        directory.mkdir()

        blob = bytearray()
        entries = []
        for i, res in enumerate(resources):
            data = res["data"]
            flags = 0
            if res["header"] is not None:
                data = build_header(**res["header"]) + data
            else:
                flags |= NO_HEADER_BIT
            offset = len(blob) if res["offset"] is None else res["offset"]
            size = len(data) if res["size"] is None else res["size"]
            number = i if res["number"] is None else res["number"]
            entries.append(dict(number=number, offset=offset, size=size | flags))
            blob += data

        if order is not None:
            entries = [entries[i] for i in order]

        (directory / dnr).write_bytes(DinnerTable.build(entries))
        (directory / dsk).write_bytes(bytes(blob))
        return directory
    return make


@pytest.fixture
def make_record():
    def make(data, header=None, index=0, number=0):
        raw = data
        hdr = None
        if header is not None:
            raw = build_header(**header) + data
            hdr = FileHeader.parse(raw[:FILE_HEADER_SIZE])
        return ResourceRecord(
            index=index,
            number=number,
            offset=0,
            length=len(raw),
            raw=memoryview(raw),
            stored_length=len(raw),
            has_header=header is not None,
            uses_header=header is not None,
            header=hdr,
        )
    return make
