import logging

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .classify import ClassificationResult, Confidence, ResourceType
from .config import DEFAULT_CONFIG
from .errors import DecodeError

logger = logging.getLogger(__name__)

VGA_PALETTE_SIZE = 768


@dataclass(frozen=True)
class PalettePayload:
    colors: tuple

    extension = "pal"

    def to_bytes(self):
        return bytes(c for rgb in self.colors for c in rgb)


@dataclass(frozen=True)
class ImagePayload:
    width: int
    height: int
    pixel_format: str
    pixels: bytes
    palette: Optional[PalettePayload] = None

    extension = "png"


@dataclass(frozen=True)
class AudioPayload:
    sample_rate: int
    channels: int
    samples: bytes
    sample_width: int = 1

    extension = "wav"


@dataclass(frozen=True)
class RawPayload:
    data: bytes

    extension = "bin"


def decode_palette(data):
    if len(data) % 3:
        raise DecodeError("%d bytes is not a whole number of RGB triples" % len(data))
    triples = np.frombuffer(data, dtype=np.uint8).reshape(-1, 3)
    return PalettePayload(tuple(tuple(int(c) for c in rgb) for rgb in triples))


def decode_audio(data, sample_rate):
    return AudioPayload(sample_rate=sample_rate, channels=1, samples=bytes(data))


class DecoderDispatch:
    """Turns a classified record into a payload.

    ``records`` is the full record list of the archive; images look up
    their palette among the neighbouring resource numbers.
    """

    def __init__(self, records=(), config=DEFAULT_CONFIG):
        self.config = config
        self.by_number = {}
        for record in records:
            self.by_number.setdefault(record.number, record)

    def find_palette(self, record):
        for number in (record.number + 1, record.number - 1):
            other = self.by_number.get(number)
            if other is not None and len(other.body) == VGA_PALETTE_SIZE:
                return decode_palette(other.body)
        return None

    def image_dims(self, record, data):
        hdr = record.header
        if hdr is not None and hdr.width and hdr.height:
            return hdr.width, hdr.height * max(hdr.n_sprites, 1)
        for width, height in self.config.screen_sizes:
            if len(data) == width * height:
                return width, height
        raise DecodeError("no dimensions for %d bytes" % len(data))

    def decode_image(self, record):
        if record.packing == "rnc1-failed":
            raise DecodeError("rnc1 stream did not unpack")
        data = record.body
        width, height = self.image_dims(record, data)
        if width * height != len(data):
            raise DecodeError("%dx%d does not match %d pixels" % (width, height, len(data)))
        return ImagePayload(width, height, "P8", bytes(data), self.find_palette(record))

    def _decode(self, record, classification):
        kind = classification.guessed_type
        if kind is ResourceType.PALETTE:
            return decode_palette(record.body)
        if kind is ResourceType.IMAGE:
            return self.decode_image(record)
        if kind is ResourceType.AUDIO:
            return decode_audio(record.body, self.config.sample_rate)
        # records with a header are written whole
        return RawPayload(bytes(record.raw) if record.header is not None else record.body)

    def decode(self, record, classification):
        return self.dispatch(record, classification)[0]

    def dispatch(self, record, classification):
        """Returns (payload, classification).

        A decoder that rejects the record's layout falls back to a raw
        payload and the returned classification says so.
        """
        try:
            payload = self._decode(record, classification)
        except DecodeError as e:
            logger.warning("record %d: %s decode failed, writing raw: %s",
                           record.index, classification.guessed_type.value, e)
            return RawPayload(bytes(record.raw)), ClassificationResult(
                classification.record_index,
                classification.guessed_type,
                Confidence.LOW,
                "%s;decode-failed(%s)" % (classification.rationale, e))

        if isinstance(payload, AudioPayload):
            classification = ClassificationResult(
                classification.record_index,
                classification.guessed_type,
                classification.confidence,
                "%s;rate-guess=%d" % (classification.rationale, payload.sample_rate))
        return payload, classification
