"""Pytest fixtures for testing"""

import pytest
from datetime import date
from pathlib import Path

from verzugszins_calculator import VerzugszinsCalculator
from verzugszins_config import TOOLS, BuildPaths

BUILD_DATE = date(2024, 3, 15)

TEMPLATE = """<!DOCTYPE html>
<html lang="{lang}">
<head>
    <link rel="preconnect" href="https://fonts.googleapis.com">
    <link href="https://fonts.googleapis.com/css2?family=Economica" rel="stylesheet">
    <style>.page-{lang} {{ color: #333; }}</style>
    <script type="application/ld+json">{{"@context": "https://schema.org"}}</script>
</head>
<body class="calc">
    <div class="top-bar">
        <div class="language-switcher">
            <a href="../de/index.html">DE</a>
            <a href="../fr/index.html">FR</a>
        </div>
    </div>
    <nav class="tool-nav"><a href="mahnrechner.html">Mahnrechner</a></nav>
    <div class="container">
        <img src="../favicon.svg" alt="logo">
        <a href="../fr/mahnrechner.html">Version française</a>
        <i class="fas fa-calculator"></i>
    </div>
    <link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/flatpickr/dist/flatpickr.min.css">
    <link rel="stylesheet" href="https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.0.0/css/all.min.css">
    <script src="../scripts/app.js"></script>
    <script>
        initCalculator('{lang}');
    </script>
    <script>
        console.log({{"@context": "https://schema.org"}});
    </script>
    <script>   </script>
</body>
</html>
"""


def write_site(site_dir: Path, bundle_dir: Path) -> None:
    for tool in TOOLS:
        for lang, relative in tool.html_file.items():
            page = site_dir / relative
            page.parent.mkdir(parents=True, exist_ok=True)
            page.write_text(TEMPLATE.format(lang=lang), encoding='utf-8')

    (site_dir / 'css').mkdir(parents=True, exist_ok=True)
    (site_dir / 'css' / 'styles.css').write_text('body { font-family: Economica; }', encoding='utf-8')

    (site_dir / 'scripts').mkdir(parents=True, exist_ok=True)
    for name in ('utils', 'calculations', 'app', 'pdf-export'):
        (site_dir / 'scripts' / f'{name}.js').write_text(f'/* {name} */', encoding='utf-8')

    bundle_dir.mkdir(parents=True, exist_ok=True)
    (bundle_dir / 'flatpickr.min.css').write_text('.flatpickr-calendar{}', encoding='utf-8')
    (bundle_dir / 'flatpickr.min.js').write_text('/* flatpickr */', encoding='utf-8')
    (bundle_dir / 'jspdf.min.js').write_text('/* jspdf */', encoding='utf-8')
    (bundle_dir / 'economica-regular.ttf').write_bytes(b'regular-font')
    (bundle_dir / 'economica-bold.ttf').write_bytes(b'bold-font')


@pytest.fixture
def build_paths(tmp_path: Path) -> BuildPaths:
    """Complete site tree with fonts and vendored libraries"""
    paths = BuildPaths(
        site_dir=tmp_path / 'site',
        bundle_dir=tmp_path / 'site' / 'offline-bundle',
        output_dir=tmp_path / 'downloads'
    )
    write_site(paths.site_dir, paths.bundle_dir)
    return paths


@pytest.fixture
def calculator() -> VerzugszinsCalculator:
    return VerzugszinsCalculator()


@pytest.fixture
def client(build_paths: BuildPaths):
    """Flask test client serving the temporary site tree"""
    from app import app

    app.config['TESTING'] = True
    previous = app.config['SITE_DIR']
    app.config['SITE_DIR'] = build_paths.site_dir
    with app.test_client() as test_client:
        yield test_client
    app.config['SITE_DIR'] = previous
