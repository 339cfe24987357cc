"""
Script records: script assets and palette collections.

Palette collections ship as JSON scripts:

    {"indexed": {"base": 0, "red": 1, "green": -1, "blue": -1},
     "palettes": [{"name": "Default", "colors": {"0xFF0000FF": "0xFF00FF00"}}, ...]}

Indices stay -1 unless a palette map's metadata marks it as the base
palette (isBase) or a team color (teamColor RED/GREEN/BLUE).
"""

import json
from typing import Any, Dict, Optional

from fraexport.project import (
    DEFAULT_SCRIPT_LANGUAGE, PaletteCollectionMetadata, ScriptAssetMetadata, engine_metadata,
)

HAXE_SCRIPT_EXTENSION = '.hx'
PALETTE_LANGUAGE = 'json'

TEAM_COLOR_INDICES = {
    'RED': 'red',
    'GREEN': 'green',
    'BLUE': 'blue',
}


def script_language(metadata: ScriptAssetMetadata, filename: str) -> Optional[str]:
    """Declared language, else hscript for .hx files, else None."""
    if metadata.language:
        return metadata.language
    if filename and filename.endswith(HAXE_SCRIPT_EXTENSION):
        return DEFAULT_SCRIPT_LANGUAGE
    return None


def script_record(metadata: ScriptAssetMetadata, filename: str = '') -> Dict[str, Any]:
    return {
        'version': metadata.version,
        'id': metadata.id,
        'guid': metadata.guid,
        'value': metadata.script,
        'language': script_language(metadata, filename),
        'tags': list(metadata.tags),
        'metadata': metadata.metadata,
    }


def palette_data(collection: PaletteCollectionMetadata) -> Dict[str, Any]:
    """Indexed palette table of a palette collection."""
    source_colors = {color.id: color.color for color in collection.colors}
    data = {
        'indexed': {'base': -1, 'red': -1, 'green': -1, 'blue': -1},
        'palettes': [],
    }

    for index, palette_map in enumerate(collection.maps):
        colors = {}
        for mapped in palette_map.colors:
            source_color = source_colors.get(mapped.palette_color_id)
            if source_color is not None:
                colors[source_color] = mapped.target_color
        data['palettes'].append({'name': palette_map.name, 'colors': colors})

        map_metadata = engine_metadata(palette_map.plugin_metadata)
        if map_metadata.get('isBase'):
            data['indexed']['base'] = index
        team_slot = TEAM_COLOR_INDICES.get(map_metadata.get('teamColor'))
        if team_slot is not None:
            data['indexed'][team_slot] = index

    return data


def palette_script_record(collection: PaletteCollectionMetadata) -> Dict[str, Any]:
    return {
        'version': collection.version,
        'id': collection.id,
        'guid': collection.guid,
        'tags': list(collection.tags),
        'language': PALETTE_LANGUAGE,
        'value': json.dumps(palette_data(collection), separators=(',', ':'), ensure_ascii=False),
        'metadata': {},
    }
