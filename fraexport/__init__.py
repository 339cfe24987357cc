"""
fraexport

Exports Fraymakers content projects (sprite entities, images, audio,
scripts, palettes, nine slices) to a single .fra resource file.
"""

from .constants import ASSET_VERSION
from .errors import ExportError, SerializationError, ManifestParseError
from .config import ExportConfig, load_export_config, parse_manifest
from .project import ExportSource, load_project
from .exporter import Exporter, export
from .progress import Phase, ProgressReporter, overall_progress

__version__ = ASSET_VERSION
