"""Tests for packaging bundles into archives"""

import zipfile

import pytest

import offline_packager
from conftest import BUILD_DATE
from offline_packager import bundle_filename, package_all
from verzugszins_config import LANGUAGES, TOOLS


def test_package_all_creates_one_archive_per_pair(build_paths):
    summary = package_all(paths=build_paths, build_date=BUILD_DATE)

    assert summary.total == len(TOOLS) * len(LANGUAGES) == 4
    assert summary.successful == 4
    assert [(o.tool_id, o.language) for o in summary.outcomes] == [
        ('verzugszinsrechner', 'de'), ('verzugszinsrechner', 'fr'),
        ('mahnrechner', 'de'), ('mahnrechner', 'fr'),
    ]

    for outcome in summary.outcomes:
        assert outcome.archive_path == build_paths.output_dir / bundle_filename(outcome.tool_id, outcome.language, 'zip')
        assert outcome.archive_size == outcome.archive_path.stat().st_size
        with zipfile.ZipFile(outcome.archive_path) as archive:
            html_name = bundle_filename(outcome.tool_id, outcome.language, 'html')
            assert archive.namelist() == [html_name]
            assert archive.read(html_name).decode('utf-8').startswith('<!DOCTYPE html>')

    # intermediate pages are removed
    assert sorted(p.suffix for p in build_paths.output_dir.iterdir()) == ['.zip'] * 4


def test_output_directory_is_created(build_paths):
    nested = build_paths.output_dir / 'nested' / 'deeper'
    paths = type(build_paths)(build_paths.site_dir, build_paths.bundle_dir, nested)

    package_all(paths=paths, build_date=BUILD_DATE)
    package_all(paths=paths, build_date=BUILD_DATE)

    assert (nested / 'mahnrechner-offline-fr.zip').is_file()


def test_missing_template_only_fails_its_pair(build_paths):
    (build_paths.site_dir / 'fr' / 'mahnrechner.html').unlink()

    summary = package_all(paths=build_paths, build_date=BUILD_DATE)

    assert summary.successful == 3
    assert summary.total == 4
    [failed] = summary.failed
    assert (failed.tool_id, failed.language) == ('mahnrechner', 'fr')
    assert failed.error == 'HTML template missing'
    assert not (build_paths.output_dir / 'mahnrechner-offline-fr.zip').exists()
    assert (build_paths.output_dir / 'mahnrechner-offline-de.zip').is_file()


def test_compression_failure_keeps_html(build_paths, monkeypatch):
    def broken_zip(html_path, zip_path):
        raise OSError("disk full")

    monkeypatch.setattr(offline_packager, 'create_zip', broken_zip)

    summary = package_all(TOOLS[:1], ('de',), paths=build_paths, build_date=BUILD_DATE)

    [outcome] = summary.outcomes
    assert not outcome.success
    assert outcome.error == 'disk full'
    assert (build_paths.output_dir / 'verzugszinsrechner-offline-de.html').is_file()


def test_warnings_are_attached_to_outcome(build_paths):
    (build_paths.bundle_dir / 'flatpickr.min.js').unlink()

    summary = package_all(TOOLS[:1], ('de',), paths=build_paths, build_date=BUILD_DATE)

    [outcome] = summary.outcomes
    assert outcome.success
    assert [w.path for w in outcome.warnings] == ['flatpickr.min.js']


def test_progress_is_logged(build_paths, caplog):
    caplog.set_level('INFO')

    package_all(paths=build_paths, build_date=BUILD_DATE)

    assert 'Building verzugszinsrechner (de)...' in caplog.text
    assert '✅ mahnrechner-offline-fr.zip' in caplog.text
    assert 'Build complete: 4/4 bundles created' in caplog.text


@pytest.mark.parametrize("tool_id,lang,suffix,expected", [
    ('verzugszinsrechner', 'de', 'zip', 'verzugszinsrechner-offline-de.zip'),
    ('mahnrechner', 'fr', 'html', 'mahnrechner-offline-fr.html'),
])
def test_bundle_filename(tool_id, lang, suffix, expected):
    assert bundle_filename(tool_id, lang, suffix) == expected


def test_undecodable_template_does_not_stop_the_batch(build_paths):
    (build_paths.site_dir / 'fr' / 'mahnrechner.html').write_bytes(
        b'<html><body><div class="container">caf\xe9</div></body></html>'
    )

    summary = package_all(paths=build_paths, build_date=BUILD_DATE)

    assert summary.total == 4
    assert summary.successful == 4
    with zipfile.ZipFile(build_paths.output_dir / 'mahnrechner-offline-fr.zip') as archive:
        html = archive.read('mahnrechner-offline-fr.html').decode('utf-8')
    assert 'caf�' in html


def test_undecodable_asset_is_replaced(build_paths):
    (build_paths.site_dir / 'scripts' / 'utils.js').write_bytes(b'/* \xff\xfe utils */')

    summary = package_all(TOOLS[:1], ('de',), paths=build_paths, build_date=BUILD_DATE)

    [outcome] = summary.outcomes
    assert outcome.success
    assert outcome.warnings == []


def test_unreadable_assets_fail_only_their_pair(build_paths, monkeypatch):
    original = offline_packager.OfflineBundler.assemble

    def assemble(self, tool, lang, build_date=None):
        if (tool.id, lang) == ('verzugszinsrechner', 'fr'):
            raise PermissionError("permission denied")
        return original(self, tool, lang, build_date)

    monkeypatch.setattr(offline_packager.OfflineBundler, 'assemble', assemble)

    summary = package_all(paths=build_paths, build_date=BUILD_DATE)

    assert summary.successful == 3
    [failed] = summary.failed
    assert (failed.tool_id, failed.language) == ('verzugszinsrechner', 'fr')
    assert failed.error == 'permission denied'
