import logging

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from .archive import enumerate_records, open_archive
from .classify import Classifier, Confidence, ResourceType
from .config import DEFAULT_CONFIG
from .decode import DecoderDispatch
from .sink import DumpSink, output_filename
from .skystructs import HEADER_FIELDS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManifestEntry:
    index: int
    offset: int
    length: int
    guessed_type: ResourceType
    confidence: Confidence
    output_filename: str
    rationale: str = ""
    number: int = 0
    # file header values in HEADER_FIELDS order, None when there is no header
    header: Optional[tuple] = None


class ExtractionPipeline:
    def __init__(self, handle, config=DEFAULT_CONFIG):
        self.handle = handle
        self.config = config
        self.records = enumerate_records(handle)
        self.classifier = Classifier(config)
        self.decoder = DecoderDispatch(self.records, config)

    def process(self, record):
        classification = self.classifier.classify(record)
        payload, classification = self.decoder.dispatch(record, classification)

        rationale = [classification.rationale]
        if record.packing != "none":
            rationale.append(record.packing)
        rationale.extend(record.notes)

        entry = ManifestEntry(
            index=record.index,
            offset=record.offset,
            length=record.length,
            guessed_type=classification.guessed_type,
            confidence=classification.confidence,
            output_filename=output_filename(record.index, classification.guessed_type, payload),
            rationale=";".join(rationale),
            number=record.number,
            header=None if record.header is None else tuple(record.header[k] for k in HEADER_FIELDS),
        )
        return entry, payload

    def results(self, jobs=1):
        if jobs > 1:
            # map() yields in submission order whatever order workers finish in
            with ThreadPoolExecutor(max_workers=jobs) as pool:
                yield from pool.map(self.process, self.records)
        else:
            for record in self.records:
                yield self.process(record)

    def run(self, sink, dump_csv=False, jobs=1):
        sink.prepare()
        manifest = []
        for entry, payload in self.results(jobs):
            sink.write(entry.output_filename, payload)
            manifest.append(entry)
        if dump_csv:
            sink.write_manifest(manifest)
        return manifest


def extract(path, out_dir="dump", dump_csv=False, jobs=1, config=DEFAULT_CONFIG):
    # archive-level errors surface here, before anything is written
    pipeline = ExtractionPipeline(open_archive(path), config)
    return pipeline.run(DumpSink(out_dir), dump_csv=dump_csv, jobs=jobs)
