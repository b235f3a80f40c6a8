"""
Configuration for the Verzugszinsrechner tools, web app and offline build
"""

import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

BASE_DIR = Path(__file__).resolve().parent

LANGUAGES: Tuple[str, ...] = ('de', 'fr')

# Locale used for the "as of" date in the offline banner
DATE_LOCALES = {'de': 'de-CH', 'fr': 'fr-CH'}
BANNER_DATE_FORMAT = '%d.%m.%Y'

FILE_ENCODING = 'utf-8'


@dataclass(frozen=True)
class ToolDescriptor:
    """One calculator page, available in every supported language"""
    id: str
    name: Mapping[str, str]
    html_file: Mapping[str, str]
    scripts: Tuple[str, ...]
    title: Mapping[str, str]

    def __post_init__(self):
        if not self.id:
            raise ValueError("Tool id must not be empty")
        if not self.scripts:
            raise ValueError(f"Tool {self.id} has no scripts")
        for field in ('name', 'html_file', 'title'):
            missing = [lang for lang in LANGUAGES if lang not in getattr(self, field)]
            if missing:
                raise ValueError(f"Tool {self.id}: {field} missing for {', '.join(missing)}")
            object.__setattr__(self, field, MappingProxyType(dict(getattr(self, field))))
        object.__setattr__(self, 'scripts', tuple(self.scripts))

    def __hash__(self):
        return hash(self.id)


TOOLS: Tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        id='verzugszinsrechner',
        name={'de': 'Verzugszinsrechner', 'fr': "Calculateur d'intérêts moratoires"},
        html_file={'de': 'de/index.html', 'fr': 'fr/index.html'},
        scripts=('scripts/utils.js', 'scripts/calculations.js', 'scripts/app.js', 'scripts/pdf-export.js'),
        title={
            'de': 'Schweizer Verzugszinsrechner (Offline-Version)',
            'fr': "Calculateur d'intérêts moratoires suisse (Version hors ligne)"
        }
    ),
    ToolDescriptor(
        id='mahnrechner',
        name={'de': 'Mahnrechner', 'fr': 'Calculateur de rappel'},
        html_file={'de': 'de/mahnrechner.html', 'fr': 'fr/mahnrechner.html'},
        scripts=('scripts/utils.js', 'scripts/calculations.js', 'scripts/pdf-export.js'),
        title={
            'de': 'Schweizer Mahnrechner (Offline-Version)',
            'fr': 'Calculateur de rappel suisse (Version hors ligne)'
        }
    ),
)

BANNER_TEXT: Dict[str, Dict[str, str]] = {
    'de': {'title': 'Offline-Version', 'subtitle': 'Keine Internetverbindung erforderlich', 'date': 'Stand'},
    'fr': {'title': 'Version hors ligne', 'subtitle': 'Aucune connexion Internet requise', 'date': 'État'}
}

# Assets the bundler reads from the bundle directory
SHARED_STYLESHEET = 'css/styles.css'
FONT_FILES = {400: 'economica-regular.ttf', 700: 'economica-bold.ttf'}
VENDOR_FILES = ('flatpickr.min.css', 'flatpickr.min.js', 'jspdf.min.js')

VENDOR_URLS = {
    'flatpickr.min.css': 'https://cdn.jsdelivr.net/npm/flatpickr@4.6.13/dist/flatpickr.min.css',
    'flatpickr.min.js': 'https://cdn.jsdelivr.net/npm/flatpickr@4.6.13/dist/flatpickr.min.js',
    'jspdf.min.js': 'https://cdnjs.cloudflare.com/ajax/libs/jspdf/2.5.1/jspdf.umd.min.js'
}
VENDOR_TIMEOUT_SECONDS = 15


@dataclass(frozen=True)
class BuildPaths:
    """Where the build reads site assets and bundle payloads, and writes archives"""
    site_dir: Path
    bundle_dir: Path
    output_dir: Path

    @classmethod
    def from_env(cls,
                 site_dir: Optional[Path] = None,
                 bundle_dir: Optional[Path] = None,
                 output_dir: Optional[Path] = None) -> 'BuildPaths':
        """Explicit arguments win over environment variables, which win over defaults"""
        site = Path(site_dir or os.environ.get('VERZUGSZINS_SITE_DIR', BASE_DIR / 'site'))
        return cls(
            site_dir=site,
            bundle_dir=Path(bundle_dir or os.environ.get('VERZUGSZINS_BUNDLE_DIR', site / 'offline-bundle')),
            output_dir=Path(output_dir or os.environ.get('VERZUGSZINS_OUTPUT_DIR', site / 'downloads'))
        )


LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'plain': {
            'format': '%(message)s'
        },
        'detailed': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'plain',
            'level': 'INFO'
        }
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO'
    }
}
