"""
Media Loader

Decodes image asset bytes into PixelBuffers before flattening starts.

Decoding has no shared state, so every image is submitted to a thread pool
at once; results are collected in asset order with a bounded wait per
asset. A decode that fails or times out is logged as an error and the asset
keeps no pixels, which makes later image symbols use the placeholder.

The timeout bounds the pipeline, not the process: a decode already running
when it expires is abandoned but not stopped, and concurrent.futures joins
its worker threads at interpreter exit, so a decode that never returns still
delays exit of the build script.
"""

import concurrent.futures
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from fraexport.constants import DECODE_TIMEOUT
from fraexport.imaging import decode_image
from fraexport.progress import Phase, ProgressReporter
from fraexport.project import AssetEntry, ExportSource
from fraexport.utils import log, logDebug, logError, logWarning


class MediaLoader:
    """
    Decode every image asset of an export source.

    Usage:
        loader = MediaLoader(source, decode_timeout=5.0)
        loader.load(reporter)
        ...
        loader.release()
    """

    def __init__(self, source: ExportSource, decode_timeout: float = DECODE_TIMEOUT,
                 max_workers: Optional[int] = None):
        """
        Args:
            source: Export input; decoded pixels are stored on its asset entries
            decode_timeout: Seconds to wait for each image
            max_workers: Thread pool size (None for the executor default)
        """
        self.source = source
        self.decode_timeout = decode_timeout
        self.max_workers = max_workers
        self._decoded: List[AssetEntry] = []

    def load(self, reporter: Optional[ProgressReporter] = None) -> int:
        """
        Decode images and account for audio assets.

        Unexported images are decoded too: entities may still reference
        them through image symbols. Only exported assets count towards
        progress.

        Returns:
            Number of images decoded successfully
        """
        log(f"Processing media files ({len(self.source.image_assets)} images, "
            f"{len(self.source.audio_assets)} audio)...")

        exported_audio = [m for m in self.source.audio_assets if m.is_exportable]
        total = sum(1 for m in self.source.image_assets if m.is_exportable) + len(exported_audio)
        processed = 0

        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="ImageDecode")
        try:
            pending = []
            for metadata in self.source.image_assets:
                entry = self.source.get_asset(metadata.guid)
                if entry is not None and entry.pixels is not None:
                    # Supplied pre-decoded by the host
                    pending.append((metadata, entry, None))
                    continue
                if entry is None or not entry.data:
                    logWarning(f"Image asset has no data: {self.source.filename_of(metadata.guid)}")
                    pending.append((metadata, entry, None))
                    continue
                pending.append((metadata, entry, executor.submit(decode_image, entry.data)))

            for metadata, entry, future in pending:
                if future is not None and self._collect(entry, future):
                    self._decoded.append(entry)
                if metadata.is_exportable:
                    processed += 1
                    if reporter is not None:
                        reporter.report(Phase.MEDIA, processed, total)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        # Audio is written verbatim; it only counts towards progress
        for _ in exported_audio:
            processed += 1
            if reporter is not None:
                reporter.report(Phase.MEDIA, processed, total)

        if reporter is not None:
            reporter.report(Phase.MEDIA, total, total)

        log(f"  Decoded {len(self._decoded)}/{len(self.source.image_assets)} images")
        return len(self._decoded)

    def _collect(self, entry: AssetEntry, future: concurrent.futures.Future) -> bool:
        try:
            entry.pixels = future.result(timeout=self.decode_timeout)
        except concurrent.futures.TimeoutError:
            future.cancel()
            logError(f"Failed to process asset: {entry.filename or entry.guid} "
                     f"(decode exceeded {self.decode_timeout:g}s)")
            return False
        except (OSError, ValueError) as e:
            logError(f"Failed to process asset: {entry.filename or entry.guid} ({e})")
            return False

        logDebug(f"Decoded {entry.filename}: {entry.pixels.width}x{entry.pixels.height}")
        return True

    def release(self):
        """Drop decoded pixels."""
        for entry in self._decoded:
            entry.pixels = None
        self._decoded = []
