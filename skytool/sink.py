import csv
import logging
import wave

from pathlib import Path

from PIL import Image

from .decode import AudioPayload, ImagePayload, PalettePayload, RawPayload
from .skystructs import HEADER_FIELDS

logger = logging.getLogger(__name__)

MANIFEST_NAME = "resources.csv"
MANIFEST_FIELDS = (
    ("index", "offset", "length", "guessed_type", "confidence", "output_filename", "number")
    + HEADER_FIELDS
    + ("rationale",)
)


def output_filename(index, guessed_type, payload):
    return "%04d_%s.%s" % (index, guessed_type.value, payload.extension)


def rescale_6bit(c):
    return (255 * c) // 63


def render_palette(palette):
    flat = palette.to_bytes()
    # VGA palettes are 6 bits per channel
    if flat and max(flat) <= 63:
        flat = bytes(rescale_6bit(c) for c in flat)
    return flat


def write_image(path, payload):
    if payload.palette is not None:
        img = Image.frombytes("P", (payload.width, payload.height), payload.pixels)
        img.putpalette(render_palette(payload.palette))
    else:
        img = Image.frombytes("L", (payload.width, payload.height), payload.pixels)
    img.save(path, format="PNG")


def write_audio(path, payload):
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(payload.channels)
        wav.setsampwidth(payload.sample_width)
        wav.setframerate(payload.sample_rate)
        wav.writeframes(payload.samples)


class DumpSink:
    def __init__(self, out_dir="dump"):
        self.out_dir = Path(out_dir)

    def prepare(self):
        self.out_dir.mkdir(parents=True, exist_ok=True)
        logger.info("dumping resources to %s", self.out_dir)

    def write(self, filename, payload):
        path = self.out_dir / filename
        if isinstance(payload, ImagePayload):
            write_image(path, payload)
        elif isinstance(payload, AudioPayload):
            write_audio(path, payload)
        elif isinstance(payload, PalettePayload):
            path.write_bytes(payload.to_bytes())
        elif isinstance(payload, RawPayload):
            path.write_bytes(payload.data)
        else:
            raise TypeError("unknown payload %r" % type(payload).__name__)
        return path

    def write_manifest(self, entries):
        path = self.out_dir / MANIFEST_NAME
        with path.open("w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(MANIFEST_FIELDS)
            for entry in entries:
                header = entry.header if entry.header is not None else ("",) * len(HEADER_FIELDS)
                w.writerow([
                    entry.index,
                    entry.offset,
                    entry.length,
                    entry.guessed_type.value,
                    str(entry.confidence),
                    entry.output_filename,
                    entry.number,
                    *header,
                    entry.rationale,
                ])
        logger.info("wrote %s", path)
        return path
