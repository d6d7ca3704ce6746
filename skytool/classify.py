"""Heuristic resource classification.

The archive carries no type tags, so every record is summarised once
(ByteStats) and run through an ordered rule table. The first rule whose
test returns a detail string wins; the detail ends up in the rationale so
thresholds can be recalibrated from a manifest.
"""

import enum
import logging

from collections import namedtuple
from dataclasses import dataclass

import numpy as np

from .config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)


class ResourceType(str, enum.Enum):
    IMAGE = "image"
    PALETTE = "palette"
    AUDIO = "audio"
    UNKNOWN = "unknown"
    OTHER = "other"


class Confidence(enum.IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    def __str__(self):
        return self.name.lower()


@dataclass(frozen=True)
class ClassificationResult:
    record_index: int
    guessed_type: ResourceType
    confidence: Confidence
    rationale: str


@dataclass(frozen=True)
class ByteStats:
    length: int
    mean: float = 0.0
    run_ratio: float = 0.0
    mean_delta: float = 0.0
    distinct: int = 0

    @classmethod
    def measure(cls, data):
        if not len(data):
            return cls(0)
        a = np.frombuffer(data, dtype=np.uint8)
        if a.size > 1:
            d = np.diff(a.astype(np.int16))
            run_ratio = np.count_nonzero(d == 0) / d.size
            mean_delta = float(np.abs(d).mean())
        else:
            run_ratio = mean_delta = 0.0
        return cls(
            length=int(a.size),
            mean=float(a.mean()),
            run_ratio=float(run_ratio),
            mean_delta=mean_delta,
            distinct=int(np.unique(a).size),
        )


def _palette(stats, record, config):
    if stats.length % 3:
        return None
    entries = stats.length // 3
    if config.palette_min_entries <= entries <= config.palette_max_entries:
        return "entries=%d" % entries
    return None


def _sprite_dims(record, config):
    hdr = record.header
    if hdr is None:
        return None
    if not 0 < hdr.width <= config.image_max_width:
        return None
    if not 0 < hdr.height <= config.image_max_height:
        return None
    return hdr.width, hdr.height, max(hdr.n_sprites, 1)


def _sprite(exact):
    def test(stats, record, config):
        dims = _sprite_dims(record, config)
        if dims is None or stats.run_ratio < config.image_min_run_ratio:
            return None
        width, height, frames = dims
        if exact != (width * height * frames == stats.length):
            return None
        return "%dx%dx%d,run_ratio=%.3f" % (width, height, frames, stats.run_ratio)
    return test


def _screen(stats, record, config):
    for width, height in config.screen_sizes:
        if stats.length == width * height:
            return "%dx%d,run_ratio=%.3f" % (width, height, stats.run_ratio)
    return None


def _audio_flag(stats, record, config):
    if record.audio_flag and stats.length >= config.audio_min_length:
        return "x=0x%04x" % record.header.x
    return None


def _waveform(stats, record, config):
    if stats.length < config.audio_min_length:
        return None
    if abs(stats.mean - config.audio_centre) > config.audio_centre_tolerance:
        return None
    if stats.mean_delta > config.audio_max_mean_delta:
        return None
    return "mean=%.1f,delta=%.2f" % (stats.mean, stats.mean_delta)


def _other(stats, record, config):
    if stats.length in config.other_sizes:
        return "size=%d" % stats.length
    return None


Rule = namedtuple("Rule", "name type confidence test")

RULES = (
    Rule("palette",      ResourceType.PALETTE, Confidence.HIGH,   _palette),
    Rule("sprite",       ResourceType.IMAGE,   Confidence.HIGH,   _sprite(exact=True)),
    Rule("sprite-loose", ResourceType.IMAGE,   Confidence.MEDIUM, _sprite(exact=False)),
    Rule("screen",       ResourceType.IMAGE,   Confidence.MEDIUM, _screen),
    Rule("audio-flag",   ResourceType.AUDIO,   Confidence.MEDIUM, _audio_flag),
    Rule("waveform",     ResourceType.AUDIO,   Confidence.MEDIUM, _waveform),
    Rule("other",        ResourceType.OTHER,   Confidence.LOW,    _other),
)


class Classifier:
    def __init__(self, config=DEFAULT_CONFIG, rules=RULES):
        self.config = config
        self.rules = rules

    def classify(self, record):
        stats = ByteStats.measure(record.body)
        if not stats.length:
            return ClassificationResult(record.index, ResourceType.UNKNOWN, Confidence.LOW, "empty")

        for rule in self.rules:
            detail = rule.test(stats, record, self.config)
            if detail is not None:
                logger.debug("record %d: %s (%s)", record.index, rule.name, detail)
                return ClassificationResult(
                    record.index, rule.type, rule.confidence, "%s:%s" % (rule.name, detail))

        return ClassificationResult(
            record.index, ResourceType.UNKNOWN, Confidence.LOW,
            "fallback:length=%d,run_ratio=%.3f,delta=%.2f" % (
                stats.length, stats.run_ratio, stats.mean_delta))


def classify(record, config=DEFAULT_CONFIG):
    return Classifier(config).classify(record)
