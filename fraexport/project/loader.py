"""
Project Loader

Builds the exporter's input (ExportSource) from a project description.

Project JSON format:
    {
      "outputFolders": [{"id": "main", "path": "out"}],
      "files": {"<guid>": "library/hero.png", ...},
      "spriteEntityAssets": [...],
      "imageAssets": [...],
      "audioAssets": [...],
      "binaryAssets": [...],
      "scriptAssets": [...],
      "paletteCollectionAssets": [...],
      "nineSliceAssets": [...]
    }

Metadata records use the editor's schema. Paths in "files" are relative to
the project file. Image, audio and binary payloads are read from disk here;
image decoding happens later in the media loading phase.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from fraexport.utils import log, logWarning
from .data_types import (
    AssetEntry, AssetMetadata, NineSliceMetadata, OutputFolder,
    PaletteCollectionMetadata, ScriptAssetMetadata, SpriteEntityMetadata,
)


@dataclass
class ExportSource:
    """
    Everything the exporter reads: assets by guid plus one metadata list per kind.

    Attributes:
        guid_to_asset: guid -> AssetEntry (metadata, filename, bytes, pixels)
        output_folders: Destinations for the finished .fra file
    """
    guid_to_asset: Dict[str, AssetEntry] = field(default_factory=dict)
    sprite_entity_assets: List[SpriteEntityMetadata] = field(default_factory=list)
    image_assets: List[AssetMetadata] = field(default_factory=list)
    audio_assets: List[AssetMetadata] = field(default_factory=list)
    binary_assets: List[AssetMetadata] = field(default_factory=list)
    script_assets: List[ScriptAssetMetadata] = field(default_factory=list)
    palette_collection_assets: List[PaletteCollectionMetadata] = field(default_factory=list)
    nine_slice_assets: List[NineSliceMetadata] = field(default_factory=list)
    output_folders: List[OutputFolder] = field(default_factory=list)

    def get_asset(self, guid: str) -> Optional[AssetEntry]:
        return self.guid_to_asset.get(guid)

    def filename_of(self, guid: str) -> str:
        """Filename for log messages (falls back to the guid)."""
        entry = self.guid_to_asset.get(guid)
        if entry is not None and entry.filename:
            return entry.filename
        return guid

    def add_asset(self, metadata: AssetMetadata, filename: str = '',
                  data: Optional[bytes] = None, pixels=None) -> AssetEntry:
        """Register an asset entry for metadata (replacing any previous entry)."""
        entry = AssetEntry(metadata=metadata, filename=filename, data=data, pixels=pixels)
        self.guid_to_asset[metadata.guid] = entry
        return entry

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_path: Optional[Path] = None) -> 'ExportSource':
        """
        Parse a project dictionary.

        Args:
            data: Project description (see module docstring)
            base_path: Directory that relative "files" paths resolve against.
                       When None, no payloads are read.
        """
        files: Dict[str, str] = dict(data.get('files') or {})
        source = cls(output_folders=[
            OutputFolder(id=f.get('id', ''), path=f.get('path', ''))
            for f in data.get('outputFolders') or []
        ])

        def register(records: Iterable[Dict[str, Any]], parse: Callable, read_bytes: bool) -> list:
            parsed = []
            for record in records or []:
                try:
                    metadata = parse(record)
                except (ValueError, TypeError) as e:
                    logWarning(f"Skipping malformed asset metadata: {e}")
                    continue
                filename = files.get(metadata.guid, '')
                payload = None
                if read_bytes and base_path is not None:
                    payload = _read_payload(base_path, filename, metadata.guid)
                source.add_asset(metadata, filename=filename, data=payload)
                parsed.append(metadata)
            return parsed

        source.sprite_entity_assets = register(data.get('spriteEntityAssets'), SpriteEntityMetadata.from_dict, False)
        source.image_assets = register(data.get('imageAssets'), AssetMetadata.from_dict, True)
        source.audio_assets = register(data.get('audioAssets'), AssetMetadata.from_dict, True)
        source.binary_assets = register(data.get('binaryAssets'), AssetMetadata.from_dict, True)
        source.script_assets = register(data.get('scriptAssets'), ScriptAssetMetadata.from_dict, False)
        source.palette_collection_assets = register(data.get('paletteCollectionAssets'),
                                                    PaletteCollectionMetadata.from_dict, False)
        source.nine_slice_assets = register(data.get('nineSliceAssets'), NineSliceMetadata.from_dict, False)
        return source


def _read_payload(base_path: Path, filename: str, guid: str) -> Optional[bytes]:
    if not filename:
        logWarning(f"No file registered for asset {guid}")
        return None
    path = Path(base_path) / filename
    if not path.exists():
        logWarning(f"Asset file not found: {path}")
        return None
    return path.read_bytes()


def load_project(project_path: Path) -> ExportSource:
    """
    Load a project JSON file and every payload it references.

    Raises:
        FileNotFoundError: If the project file does not exist
        json.JSONDecodeError: If the project file is not valid JSON
    """
    project_path = Path(project_path)
    if not project_path.exists():
        raise FileNotFoundError(f"Project file not found: {project_path}")

    log(f"Loading project: {project_path}")
    with open(project_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    source = ExportSource.from_dict(data, base_path=project_path.parent)
    log(f"  Sprite entities: {len(source.sprite_entity_assets)}")
    log(f"  Images: {len(source.image_assets)}  Audio: {len(source.audio_assets)}  "
        f"Binary: {len(source.binary_assets)}")
    log(f"  Scripts: {len(source.script_assets)}  Palettes: {len(source.palette_collection_assets)}  "
        f"Nine slices: {len(source.nine_slice_assets)}")
    return source
