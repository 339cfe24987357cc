#!/usr/bin/env python3
"""
Exporter

Builds a complete .fra resource from an ExportSource.

Pipeline:
1. Decode image assets (concurrently, bounded wait per asset)
2. Flatten exported sprite entities, packing image symbols into spritesheets
3. Build script, palette and nine slice records
4. Serialize spritesheets, images, audio and binary payloads behind the header

Every phase finishes before the next one starts. Packer and decoded pixel
caches belong to a single export and are released when it ends, whether it
succeeded or not.

Usage:
    data = export(source, ExportConfig(json_format='raw'), on_progress=print)
"""

import time
from typing import Callable, Optional

from fraexport.animation import AnimationFlattener
from fraexport.atlas import AtlasPacker
from fraexport.config import ExportConfig
from fraexport.errors import ExportError
from fraexport.media import MediaLoader
from fraexport.progress import Phase, ProgressReporter
from fraexport.project import ExportSource
from fraexport.resources import (
    filter_exported, script_record, palette_script_record, nine_slice_record,
    image_blob, audio_blob, binary_blob,
)
from fraexport.serialization import ContainerSerializer, ResourceContainer
from fraexport.utils import log, logDebug


class Exporter:
    """
    Orchestrates a single export.

    An Exporter owns its packer and caches; call export() once.
    """

    def __init__(self, source: ExportSource, config: Optional[ExportConfig] = None,
                 on_progress: Optional[Callable[[int], None]] = None):
        """
        Args:
            source: Assets and metadata to export
            config: Export options (defaults when None)
            on_progress: Receives overall progress 0-100, never decreasing
        """
        self.source = source
        self.config = config or ExportConfig()
        self.reporter = ProgressReporter(on_progress)
        self.packer = AtlasPacker(
            default_width=self.config.default_sheet_width,
            default_height=self.config.default_sheet_height,
            max_width=self.config.max_sheet_width,
            max_height=self.config.max_sheet_height,
            padding=self.config.sheet_padding,
        )
        self.media = MediaLoader(source, decode_timeout=self.config.decode_timeout)

    def export(self) -> bytes:
        """
        Run the full pipeline.

        Returns:
            .fra file bytes

        Raises:
            ExportError: If the export cannot be completed (no partial output)
        """
        log("=" * 70)
        log("FRA EXPORTER")
        log("=" * 70)
        log(f"Header format: {self.config.json_format}  "
            f"PNG recompression: {'on' if self.config.recompress_images else 'off'}")

        start_time = time.time()
        try:
            data = self._run()
        except ExportError:
            raise
        except Exception as e:
            raise ExportError(f"{type(e).__name__}: {e}") from e
        finally:
            self.packer.release()
            self.media.release()

        self.reporter.complete()

        elapsed = time.time() - start_time
        log("\n" + "=" * 70)
        log(f"EXPORT COMPLETE in {elapsed:.1f} seconds ({len(data):,} bytes)")
        log("=" * 70)
        return data

    def _run(self) -> bytes:
        container = ResourceContainer(version=self.config.version)

        # Step 1: Media
        log("\n" + "=" * 70)
        log("STEP 1: Loading Media")
        log("=" * 70)
        self.media.load(self.reporter)

        # Step 2: Sprite entities
        log("\n" + "=" * 70)
        log("STEP 2: Flattening Sprite Entities")
        log("=" * 70)
        container.entities = self._flatten_entities()

        # Step 3: Scripts, palettes, nine slices
        log("\n" + "=" * 70)
        log("STEP 3: Writing Resource Records")
        log("=" * 70)
        self._write_records(container)

        # Step 4: Binary
        log("\n" + "=" * 70)
        log("STEP 4: Serializing Container")
        log("=" * 70)
        container.spritesheets = self.packer.sheets
        container.images = [image_blob(m, self.source)
                            for m in filter_exported(self.source.image_assets, 'image', self.source)]
        container.audio = [audio_blob(m, self.source)
                           for m in filter_exported(self.source.audio_assets, 'audio', self.source)]
        container.binary = [binary_blob(m, self.source)
                            for m in filter_exported(self.source.binary_assets, 'binary', self.source)]

        serializer = ContainerSerializer(json_format=self.config.json_format,
                                         recompress=self.config.recompress_images)
        return serializer.serialize(container)

    def _flatten_entities(self) -> list:
        entities = filter_exported(self.source.sprite_entity_assets, 'sprite entity', self.source)
        total = sum(len(entity.animations) for entity in entities)
        processed = 0

        flattener = AnimationFlattener(self.source, self.packer)
        results = []
        for entity in entities:
            def on_animation(animation):
                nonlocal processed
                processed += 1
                self.reporter.report(Phase.FLATTEN, processed, total)

            results.append(flattener.flatten_entity(entity, on_animation=on_animation))
            log(f"  Added sprite entity data: {entity.id} "
                f"({len(entity.animations)} animations, group: {entity.spritesheet_group})")

        self.reporter.report(Phase.FLATTEN, total, total)
        log(f"  Spritesheets so far: {len(self.packer.sheets)}")
        return results

    def _write_records(self, container: ResourceContainer):
        for metadata in filter_exported(self.source.script_assets, 'script', self.source):
            entry = self.source.get_asset(metadata.guid)
            container.scripts.append(script_record(metadata, entry.filename if entry is not None else ''))
            logDebug(f"Added script: {metadata.id}")

        for collection in filter_exported(self.source.palette_collection_assets, 'palette collection', self.source):
            container.scripts.append(palette_script_record(collection))
            logDebug(f"Added palette collection script: {collection.id}")

        for nine_slice in filter_exported(self.source.nine_slice_assets, 'nine slice', self.source):
            container.nine_slices.append(nine_slice_record(nine_slice, self.source, self.packer))
            logDebug(f"Added nine slice data: {nine_slice.id}")

        log(f"  Scripts: {len(container.scripts)}  Nine slices: {len(container.nine_slices)}")


def export(source: ExportSource, config: Optional[ExportConfig] = None,
           on_progress: Optional[Callable[[int], None]] = None) -> bytes:
    """Export source to .fra bytes with a fresh Exporter."""
    return Exporter(source, config, on_progress).export()
