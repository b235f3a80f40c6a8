"""
Offline Packager
Writes each bundled page to disk, zips it and reports the result
"""

import logging
import zipfile
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional

from offline_bundler import BundleWarning, OfflineBundler
from verzugszins_config import FILE_ENCODING, LANGUAGES, TOOLS, BuildPaths, ToolDescriptor

logger = logging.getLogger(__name__)


@dataclass
class PackageOutcome:
    tool_id: str
    language: str
    success: bool
    archive_path: Optional[Path] = None
    archive_size: Optional[int] = None
    warnings: List[BundleWarning] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class PackageSummary:
    output_dir: Path
    outcomes: List[PackageOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def successful(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def failed(self) -> List[PackageOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.success]


def bundle_filename(tool_id: str, lang: str, suffix: str) -> str:
    return f"{tool_id}-offline-{lang}.{suffix}"


def create_zip(html_path: Path, zip_path: Path) -> None:
    """Compress a single file into its own archive, stored under its basename"""
    with zipfile.ZipFile(zip_path, 'w', compression=zipfile.ZIP_DEFLATED) as archive:
        archive.write(html_path, arcname=html_path.name)


def package_all(tools: Iterable[ToolDescriptor] = TOOLS,
                languages: Iterable[str] = LANGUAGES,
                paths: Optional[BuildPaths] = None,
                build_date: Optional[date] = None) -> PackageSummary:
    """
    Build and zip every tool in every language

    A failing pair is recorded and skipped; it never stops the batch.
    """
    paths = paths or BuildPaths.from_env()
    logger.info("Building offline bundles for verzugszinsrechner.ch tools...\n")

    paths.output_dir.mkdir(parents=True, exist_ok=True)
    bundler = OfflineBundler(paths)
    summary = PackageSummary(output_dir=paths.output_dir)
    languages = tuple(languages)

    for tool in tools:
        for lang in languages:
            summary.outcomes.append(package_one(bundler, tool, lang, paths.output_dir, build_date))
        logger.info('')

    logger.info('═' * 50)
    logger.info(f"Build complete: {summary.successful}/{summary.total} bundles created")
    logger.info(f"Output directory: {paths.output_dir}")
    return summary


def package_one(bundler: OfflineBundler, tool: ToolDescriptor, lang: str,
                output_dir: Path, build_date: Optional[date] = None) -> PackageOutcome:
    html_path = output_dir / bundle_filename(tool.id, lang, 'html')
    zip_path = output_dir / bundle_filename(tool.id, lang, 'zip')

    try:
        bundle = bundler.assemble(tool, lang, build_date)
    except OSError as e:
        logger.error(f"  ERROR reading assets for {tool.id} ({lang}): {e}")
        return PackageOutcome(tool_id=tool.id, language=lang, success=False, error=str(e))

    outcome = PackageOutcome(tool_id=tool.id, language=lang, success=False, warnings=bundle.warnings)
    if not bundle.success:
        outcome.error = 'HTML template missing'
        return outcome

    try:
        html_path.write_text(bundle.html, encoding=FILE_ENCODING)
        create_zip(html_path, zip_path)
    except (OSError, zipfile.BadZipFile) as e:
        # The uncompressed page stays on disk for inspection
        logger.error(f"  ERROR creating ZIP: {e}")
        outcome.error = str(e)
        return outcome

    size = zip_path.stat().st_size
    logger.info(f"  ✅ {zip_path.name} ({size / 1024:.0f} KB)")
    html_path.unlink()

    outcome.success = True
    outcome.archive_path = zip_path
    outcome.archive_size = size
    return outcome
