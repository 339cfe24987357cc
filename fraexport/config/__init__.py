#!/usr/bin/env python3
"""
Config module for export options and the content manifest.
"""

from .export_config import ExportConfig, load_export_config, migrate_config
from .manifest import Manifest, ManifestContent, parse_manifest, CONTENT_TYPES

__all__ = ['ExportConfig', 'load_export_config', 'migrate_config',
           'Manifest', 'ManifestContent', 'parse_manifest', 'CONTENT_TYPES']
