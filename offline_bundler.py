"""
Offline Bundler
Inlines styles, fonts, vendored libraries and scripts of one calculator page
into a single self-contained HTML document
"""

import base64
import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import List, Optional

import template_transform
from verzugszins_config import (
    BANNER_DATE_FORMAT,
    BANNER_TEXT,
    FILE_ENCODING,
    FONT_FILES,
    SHARED_STYLESHEET,
    BuildPaths,
    ToolDescriptor,
)

logger = logging.getLogger(__name__)

FONTS_UNAVAILABLE_CSS = '/* Fonts not available */'

# Font Awesome classes used by the templates, mapped to plain Unicode glyphs
ICON_GLYPHS = [
    ('moon', r'"\1F319"'),
    ('sun', r'"\2600\FE0F"'),
    ('calculator', r'"\1F9EE"'),
    ('percent', '"%"'),
    ('exclamation-triangle', r'"\26A0\FE0F"'),
    ('file-pdf', r'"\1F4C4"'),
    ('external-link-alt', r'"\2197"; font-size: 0.8em'),
    ('check', r'"\2713"'),
    ('times', r'"\2715"'),
    ('info-circle', r'"\2139\FE0F"'),
    ('calendar-day', r'"\1F4C5"'),
    ('money-bill', r'"\1F4B5"'),
    ('coins', r'"\1FA99"'),
    ('envelope', r'"\2709"'),
    ('bell', r'"\1F514"'),
    ('clock', r'"\23F0"'),
    ('chevron-right', r'"\203A"'),
    ('plus', '"+"'),
    ('minus', '"-"'),
    ('trash', r'"\1F5D1"'),
    ('edit', r'"\270F"'),
    ('download', r'"\2B07"'),
    ('print', r'"\1F5A8"'),
]

OFFLINE_BANNER_CSS = """
        .offline-banner {
            background: linear-gradient(135deg, #2d5a3d 0%, #4a7c59 100%);
            color: white;
            padding: 10px 20px;
            font-size: 0.9rem;
            display: flex;
            justify-content: space-between;
            align-items: center;
            margin-bottom: 1rem;
            border-radius: 8px;
        }
        .offline-banner .version { opacity: 0.8; font-size: 0.8rem; }
"""


class WarningKind(Enum):
    MISSING_TEMPLATE = "missing_template"
    MISSING_FILE = "missing_file"
    MISSING_BUNDLE_FILE = "missing_bundle_file"
    MISSING_FONT = "missing_font"
    MISSING_BODY = "missing_body"


@dataclass(frozen=True)
class BundleWarning:
    kind: WarningKind
    path: str

    def __str__(self):
        return f"{self.kind.value}: {self.path}"


@dataclass
class BundleResult:
    """Assembled document for one (tool, language) pair plus what went missing"""
    tool_id: str
    language: str
    html: Optional[str] = None
    warnings: List[BundleWarning] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.html is not None


class OfflineBundler:
    """Builds offline HTML documents from the site tree"""

    def __init__(self, paths: BuildPaths):
        self.paths = paths

    def _read(self, base: Path, relative: str, kind: WarningKind,
              warnings: List[BundleWarning]) -> str:
        file_path = base / relative
        if not file_path.is_file():
            logger.warning(f"  Warning: File not found: {relative}")
            warnings.append(BundleWarning(kind, relative))
            return ''
        return file_path.read_text(encoding=FILE_ENCODING, errors='replace')

    def read_site_file(self, relative: str, warnings: List[BundleWarning]) -> str:
        return self._read(self.paths.site_dir, relative, WarningKind.MISSING_FILE, warnings)

    def read_bundle_file(self, filename: str, warnings: List[BundleWarning]) -> str:
        return self._read(self.paths.bundle_dir, filename, WarningKind.MISSING_BUNDLE_FILE, warnings)

    def font_base64(self, filename: str, warnings: List[BundleWarning]) -> Optional[str]:
        font_path = self.paths.bundle_dir / filename
        if not font_path.is_file():
            logger.warning(f"  Warning: Font file not found: {filename}")
            warnings.append(BundleWarning(WarningKind.MISSING_FONT, filename))
            return None
        return base64.b64encode(font_path.read_bytes()).decode('ascii')

    def generate_font_css(self, warnings: List[BundleWarning]) -> str:
        """@font-face rules with the Economica weights embedded as data URIs"""
        encoded = {weight: self.font_base64(name, warnings) for weight, name in FONT_FILES.items()}
        if not all(encoded.values()):
            return FONTS_UNAVAILABLE_CSS

        rules = []
        for weight, data in encoded.items():
            rules.append(f"""
        @font-face {{
            font-family: 'Economica';
            font-style: normal;
            font-weight: {weight};
            font-display: swap;
            src: url('data:font/truetype;base64,{data}') format('truetype');
        }}""")
        return ''.join(rules) + '\n'

    @staticmethod
    def generate_icon_css() -> str:
        """Minimal stand-in for the Font Awesome webfont"""
        lines = ['        .fa, .fas, .fab { display: inline-block; font-style: normal; }']
        for name, content in ICON_GLYPHS:
            lines.append(f'        .fa-{name}::before {{ content: {content}; }}')
        return '\n' + '\n'.join(lines) + '\n'

    @staticmethod
    def banner_html(lang: str, build_date: date) -> str:
        banner = BANNER_TEXT[lang]
        date_str = build_date.strftime(BANNER_DATE_FORMAT)
        return f"""
    <div class="offline-banner">
        <span>{banner['title']} – {banner['subtitle']}</span>
        <span class="version">{banner['date']}: {date_str}</span>
    </div>
"""

    def assemble(self, tool: ToolDescriptor, lang: str,
                 build_date: Optional[date] = None) -> BundleResult:
        """
        Assemble the offline document for one tool and language

        Returns a result without html when the page template is missing.
        Other missing assets are substituted and recorded as warnings.
        """
        logger.info(f"  Building {tool.id} ({lang})...")
        result = BundleResult(tool_id=tool.id, language=lang)
        warnings = result.warnings
        build_date = build_date or date.today()

        template_path = self.paths.site_dir / tool.html_file[lang]
        if template_path.is_file():
            template = template_path.read_text(encoding=FILE_ENCODING, errors='replace')
        else:
            template = ''
        if not template:
            logger.error(f"  ERROR: Could not read HTML template for {tool.id} ({lang})")
            warnings.append(BundleWarning(WarningKind.MISSING_TEMPLATE, tool.html_file[lang]))
            return result

        styles_css = self.read_site_file(SHARED_STYLESHEET, warnings)
        flatpickr_css = self.read_bundle_file('flatpickr.min.css', warnings)
        flatpickr_js = self.read_bundle_file('flatpickr.min.js', warnings)
        jspdf_js = self.read_bundle_file('jspdf.min.js', warnings)

        scripts_js = ''.join(self.read_site_file(script, warnings) + '\n' for script in tool.scripts)

        inline_styles = ''.join(style + '\n' for style in template_transform.extract_styles(template))
        inline_scripts = ''.join(script + '\n' for script in template_transform.extract_scripts(template))

        combined_css = '\n'.join([
            self.generate_font_css(warnings),
            self.generate_icon_css(),
            flatpickr_css,
            styles_css,
            inline_styles,
            OFFLINE_BANNER_CSS,
        ])
        combined_js = '\n'.join([jspdf_js, flatpickr_js, scripts_js, inline_scripts])

        body = template_transform.extract_body(template)
        if body is None:
            logger.warning(f"  Warning: No <body> in template for {tool.id} ({lang})")
            warnings.append(BundleWarning(WarningKind.MISSING_BODY, tool.html_file[lang]))
            body = ''
        else:
            body = template_transform.rewrite_body(body)
            body = template_transform.inject_banner(body, self.banner_html(lang, build_date))

        result.html = f"""<!DOCTYPE html>
<html lang="{lang}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{tool.title[lang]}</title>
    <style>
{combined_css}
    </style>
</head>
<body>
{body}
    <script>
{combined_js}
    </script>
</body>
</html>"""
        return result
