#!/usr/bin/env python3
"""
Export Configuration

Parser for the exporter's INI configuration file.

INI Format:
    [export]
    version = 0.0.17
    json_compression = base64      ; raw | base64 | prettify
    png_compression = false

    [atlas]
    default_width = 128
    default_height = 128
    max_width = 4096
    max_height = 4096
    padding = 1
    decode_timeout = 5.0

Every key is optional. Configs saved by version 0.0.16 are migrated on load.
"""

import configparser
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fraexport.constants import (
    ASSET_VERSION, DEFAULT_SHEET_WIDTH, DEFAULT_SHEET_HEIGHT, MAX_SHEET_WIDTH,
    MAX_SHEET_HEIGHT, DEFAULT_SHEET_PADDING, DECODE_TIMEOUT,
)
from fraexport.serialization import JSON_FORMAT_BASE64, JSON_FORMATS
from fraexport.utils import log, logWarning

TRUE_VALUES = ('true', '1', 'yes', 'on')


def _is_power_of_two(value: int) -> bool:
    return value > 0 and value & (value - 1) == 0


@dataclass
class ExportConfig:
    """Options of a single export run"""
    version: str = ASSET_VERSION
    json_format: str = JSON_FORMAT_BASE64  # Header format: raw, base64 or prettify
    recompress_images: bool = False  # Second, slower PNG pass for smaller sheets
    default_sheet_width: int = DEFAULT_SHEET_WIDTH
    default_sheet_height: int = DEFAULT_SHEET_HEIGHT
    max_sheet_width: int = MAX_SHEET_WIDTH
    max_sheet_height: int = MAX_SHEET_HEIGHT
    sheet_padding: int = DEFAULT_SHEET_PADDING
    decode_timeout: float = DECODE_TIMEOUT  # Seconds per image asset

    def __post_init__(self):
        """Validate export configuration"""
        if self.json_format not in JSON_FORMATS:
            raise ValueError(f"Unknown JSON format '{self.json_format}', "
                             f"expected one of {', '.join(JSON_FORMATS)}")

        for name in ('default_sheet_width', 'default_sheet_height', 'max_sheet_width', 'max_sheet_height'):
            value = getattr(self, name)
            if not _is_power_of_two(value):
                raise ValueError(f"{name} must be a power of two, got {value}")

        if self.default_sheet_width > self.max_sheet_width or self.default_sheet_height > self.max_sheet_height:
            raise ValueError("Default sheet size exceeds maximum sheet size")

        if self.sheet_padding < 0:
            raise ValueError(f"sheet_padding must not be negative, got {self.sheet_padding}")

        if self.decode_timeout <= 0:
            raise ValueError(f"decode_timeout must be positive, got {self.decode_timeout}")


def migrate_config(config: configparser.ConfigParser) -> bool:
    """
    Upgrade an older [export] section in place.

    Returns:
        True if the config was changed
    """
    if not config.has_section('export'):
        return False

    section = config['export']
    if section.get('version', '').strip() == '0.0.16':
        section['version'] = '0.0.17'
        section['json_compression'] = JSON_FORMAT_BASE64
        section['png_compression'] = 'false'
        log("  Migrated export config 0.0.16 -> 0.0.17")
        return True
    return False


def load_export_config(config_path: Optional[Path] = None) -> ExportConfig:
    """
    Load export options from an INI file.

    Args:
        config_path: Path to the INI file. None or a missing file gives defaults.

    Returns:
        ExportConfig

    Raises:
        ValueError: If a value is malformed or fails validation
    """
    if config_path is None:
        return ExportConfig()

    config_path = Path(config_path)
    if not config_path.exists():
        logWarning(f"Export config not found: {config_path}, using defaults")
        return ExportConfig()

    log(f"Loading export config: {config_path}")
    config = configparser.ConfigParser(inline_comment_prefixes=(';', '#'))
    config.read(config_path, encoding='utf-8')
    migrate_config(config)

    export = config['export'] if config.has_section('export') else {}
    atlas = config['atlas'] if config.has_section('atlas') else {}

    try:
        return ExportConfig(
            version=export.get('version', ASSET_VERSION).strip(),
            json_format=export.get('json_compression', JSON_FORMAT_BASE64).strip().lower(),
            recompress_images=export.get('png_compression', 'false').strip().lower() in TRUE_VALUES,
            default_sheet_width=int(atlas.get('default_width', DEFAULT_SHEET_WIDTH)),
            default_sheet_height=int(atlas.get('default_height', DEFAULT_SHEET_HEIGHT)),
            max_sheet_width=int(atlas.get('max_width', MAX_SHEET_WIDTH)),
            max_sheet_height=int(atlas.get('max_height', MAX_SHEET_HEIGHT)),
            sheet_padding=int(atlas.get('padding', DEFAULT_SHEET_PADDING)),
            decode_timeout=float(atlas.get('decode_timeout', DECODE_TIMEOUT)),
        )
    except ValueError as e:
        raise ValueError(f"Invalid export config {config_path}: {e}") from e
