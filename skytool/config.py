import json

from dataclasses import dataclass, fields, replace
from pathlib import Path

from .errors import ConfigError


@dataclass(frozen=True)
class ClassifierConfig:
    """Thresholds for the classification heuristics.

    None of these are confirmed against the real format. Override them
    with a JSON file passed to --config.
    """

    palette_min_entries: int = 16
    palette_max_entries: int = 256

    image_max_width: int = 640
    image_max_height: int = 480
    image_min_run_ratio: float = 0.3
    screen_sizes: tuple = ((320, 200),)

    audio_min_length: int = 2048
    audio_centre: float = 128.0
    audio_centre_tolerance: float = 32.0
    audio_max_mean_delta: float = 24.0

    # byte lengths of non-media structures (script/pointer tables)
    other_sizes: tuple = ()

    sample_rate: int = 11025


DEFAULT_CONFIG = ClassifierConfig()


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _coerce(name, value):
    """Checks one override against the type of its default."""
    if name == "screen_sizes":
        if not isinstance(value, list) or not all(
                isinstance(size, list) and len(size) == 2 and all(_is_int(v) for v in size)
                for size in value):
            raise ConfigError("screen_sizes must be a list of [width, height] integer pairs")
        return tuple(tuple(size) for size in value)
    if name == "other_sizes":
        if not isinstance(value, list) or not all(_is_int(v) for v in value):
            raise ConfigError("other_sizes must be a list of integers")
        return tuple(value)

    default = getattr(DEFAULT_CONFIG, name)
    if isinstance(default, float):
        if not (_is_int(value) or isinstance(value, float)):
            raise ConfigError("%s must be a number, got %r" % (name, value))
        return float(value)
    if not _is_int(value):
        raise ConfigError("%s must be an integer, got %r" % (name, value))
    return value


def load_config(path, base=DEFAULT_CONFIG):
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fd:
            overrides = json.load(fd)
    except OSError as e:
        raise ConfigError("%s: %s" % (path, e.strerror or e))
    except json.JSONDecodeError as e:
        raise ConfigError("%s: %s" % (path, e))

    if not isinstance(overrides, dict):
        raise ConfigError("%s: expected a JSON object" % path)

    known = {f.name for f in fields(ClassifierConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigError("%s: unknown keys %s" % (path, ", ".join(unknown)))

    try:
        checked = {k: _coerce(k, v) for k, v in overrides.items()}
    except ConfigError as e:
        raise ConfigError("%s: %s" % (path, e))
    return replace(base, **checked)
