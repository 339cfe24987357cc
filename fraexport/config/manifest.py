"""
Content Manifest

The manifest is a JSON script asset with id "manifest" naming the resource
and the content it provides:

    {
      "resourceId": "mycharacter",
      "content": [
        {"id": "mychar", "name": "My Character", "description": "", "type": "character",
         "objectStatsId": "...", "scriptId": "..."}
      ]
    }

Type-specific keys (scriptId, musicIds, audioId, loopPoint, ...) are kept
in ManifestContent.extra.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from fraexport.constants import MANIFEST_SCRIPT_ID, RESOURCE_EXTENSION
from fraexport.errors import ManifestParseError

CONTENT_TYPES = ('character', 'projectile', 'customGameObject', 'stage', 'platform', 'music', '')

_BASE_KEYS = ('id', 'name', 'description', 'type')


@dataclass
class ManifestContent:
    id: str
    name: str = ''
    description: str = ''
    type: str = ''
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Manifest:
    resource_id: str
    content: List[ManifestContent] = field(default_factory=list)

    @property
    def filename(self) -> str:
        return self.resource_id + RESOURCE_EXTENSION


def parse_manifest(script_assets: Iterable) -> Manifest:
    """
    Find and parse the manifest script.

    Args:
        script_assets: ScriptAssetMetadata records of the project

    Raises:
        ManifestParseError: If the manifest is missing, not JSON, or malformed
    """
    script = next((s for s in script_assets if s.id == MANIFEST_SCRIPT_ID), None)
    if script is None:
        raise ManifestParseError(f"Problem parsing manifest: no script asset with id '{MANIFEST_SCRIPT_ID}'")

    try:
        data = json.loads(script.script)
    except ValueError as e:
        raise ManifestParseError(f"Problem parsing manifest: {e}") from e

    if not isinstance(data, dict):
        raise ManifestParseError("Problem parsing manifest: expected a JSON object")

    resource_id = data.get('resourceId')
    if not resource_id or not isinstance(resource_id, str):
        raise ManifestParseError("Problem parsing manifest: missing 'resourceId'")

    content = []
    for index, entry in enumerate(data.get('content') or []):
        if not isinstance(entry, dict):
            raise ManifestParseError(f"Problem parsing manifest: content[{index}] is not an object")
        content_type = entry.get('type', '')
        if content_type not in CONTENT_TYPES:
            raise ManifestParseError(
                f"Problem parsing manifest: content[{index}] has unknown type '{content_type}'")
        content.append(ManifestContent(
            id=entry.get('id', ''),
            name=entry.get('name', ''),
            description=entry.get('description', ''),
            type=content_type,
            extra={k: v for k, v in entry.items() if k not in _BASE_KEYS},
        ))

    return Manifest(resource_id=resource_id, content=content)
