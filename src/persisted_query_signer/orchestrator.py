"""Orchestrator - fans extraction and signing out over a worker pool."""

from __future__ import annotations

import logging
import os
import queue
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path
from typing import Optional, Union

from .aggregator import Aggregator, FileFailure, RunResult
from .errors import ExtractionError
from .extractors import BaseExtractor
from .file_locator import locate_files
from .signer import SignatureEntry, Signer

logger = logging.getLogger(__name__)

class _NoDescriptor:
    """Marks a file that held no descriptor."""

    def __repr__(self) -> str:
        return "NO_DESCRIPTOR"


NO_DESCRIPTOR = _NoDescriptor()
# Posted once every worker has finished
_END_OF_STREAM = object()

WorkResult = Union[SignatureEntry, FileFailure, _NoDescriptor]


def process_file(file_path: Path, extractor: BaseExtractor, signer: Signer) -> WorkResult:
    """
    Extract and sign a single file.

    Args:
        file_path: Generated descriptor file
        extractor: Strategy used to pull out the descriptor
        signer: Signer holding the key

    Returns:
        A SignatureEntry, a FileFailure, or NO_DESCRIPTOR
    """
    try:
        descriptor = extractor.extract_file(file_path)
    except ExtractionError as e:
        logger.debug("Failed to extract %s: %s", file_path, e.message)
        return FileFailure(file_path, e.message)

    if descriptor is None:
        logger.debug("No descriptor in %s", file_path)
        return NO_DESCRIPTOR

    entry = signer.sign_descriptor(descriptor, file_path)
    logger.debug("Signed %s from %s", entry.name, file_path)
    return entry


class Orchestrator:
    """
    Signs every descriptor file under a directory.

    One task per file is submitted to a bounded thread pool. Workers post
    their results to a queue which is drained by the calling thread, the
    only one that touches the aggregator.
    """

    def __init__(
        self,
        extractor: BaseExtractor,
        signer: Signer,
        workers: Optional[int] = None,
    ) -> None:
        self.extractor = extractor
        self.signer = signer
        self.workers = workers or os.cpu_count() or 1

    def _work(self, file_path: Path, results: queue.Queue) -> None:
        try:
            result = process_file(file_path, self.extractor, self.signer)
        except Exception as e:
            logger.exception("Unexpected error processing %s", file_path)
            result = FileFailure(file_path, f"unexpected error: {e}")
        results.put(result)

    def run(self, root: Path) -> RunResult:
        """
        Extract and sign all descriptor files under root.

        Per-file failures do not stop the run; they are returned in the
        result for the caller to report.

        Args:
            root: Directory to scan

        Returns:
            The aggregated RunResult
        """
        results: queue.Queue = queue.Queue()
        aggregator = Aggregator()

        logger.info("Scanning %s with %d workers", root, self.workers)

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = [
                executor.submit(self._work, file_path, results)
                for file_path in locate_files(root)
            ]
            # Close the channel once every producer is done
            wait(futures)
            results.put(_END_OF_STREAM)

            while True:
                item = results.get()
                if item is _END_OF_STREAM:
                    break
                if item is NO_DESCRIPTOR:
                    aggregator.add_empty()
                elif isinstance(item, FileFailure):
                    aggregator.add_failure(item)
                else:
                    aggregator.add(item)

        result = aggregator.result()
        logger.info(
            "Processed %d files: %d signatures, %d without descriptor, %d failed",
            result.files_scanned,
            len(result.signatures),
            result.files_without_descriptor,
            len(result.failures),
        )
        return result
