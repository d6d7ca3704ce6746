"""Extracts and classifies the resources of Beneath a Steel Sky's sky.dnr/sky.dsk."""

import logging
import sys

from argparse import ArgumentParser
from pathlib import Path

from .config import DEFAULT_CONFIG, load_config
from .errors import ArchiveError, ConfigError
from .pipeline import extract

logger = logging.getLogger("skytool")

argparser = ArgumentParser(prog="skytool", description=__doc__)
argparser.add_argument("path", type=Path, help="game directory (or a file inside it)")
argparser.add_argument("-c", "--dump-csv", action="store_true",
                       help="write the manifest to resources.csv in the output directory")
argparser.add_argument("-o", "--out", type=Path, default=Path("dump"))
argparser.add_argument("-j", "--jobs", type=int, default=1)
argparser.add_argument("--config", type=Path, help="JSON file overriding classifier thresholds")
argparser.add_argument("-v", "--verbose", action="store_true")


def main(argv=None):
    args = argparser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.jobs < 1:
        argparser.error("--jobs must be at least 1")

    try:
        config = load_config(args.config) if args.config else DEFAULT_CONFIG
    except ConfigError as e:
        logger.error("%s", e)
        return 2

    try:
        manifest = extract(args.path, args.out, dump_csv=args.dump_csv, jobs=args.jobs, config=config)
    except ArchiveError as e:
        logger.error("%s", e)
        return 1

    counts = {}
    for entry in manifest:
        counts[entry.guessed_type.value] = counts.get(entry.guessed_type.value, 0) + 1
    logger.info("%d resources: %s", len(manifest),
                ", ".join("%d %s" % (n, kind) for kind, n in sorted(counts.items())))
    return 0


if __name__ == "__main__":
    sys.exit(main())
