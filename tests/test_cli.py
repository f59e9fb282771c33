"""Tests for the audit command line."""

import json
from argparse import Namespace
from datetime import timezone

import pytest

import audit
from utils.errors import ValidationError
from utils.scoring import DEFAULT_SCORING_CONFIG, Priority


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.delenv('GEO_AUDIT_CRAWL_FILE', raising=False)
    monkeypatch.delenv('GEO_AUDIT_OUTPUT_DIR', raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def crawl_file(tmp_path, make_crawl, full_geo_files):
    path = tmp_path / 'crawl.json'
    path.write_text(json.dumps(make_crawl(**full_geo_files).to_dict()), encoding='utf-8')
    return path


def args(**overrides):
    values = {'crawl': None, 'output': None, 'now': None}
    values.update(overrides)
    return Namespace(**values)


def test_parse_config(tmp_path):
    path = tmp_path / 'config.txt'
    path.write_text("# comment\n```\ncrawl_file = crawl.json\nweight_low=1\n\nnot a setting\n", encoding='utf-8')
    assert audit.parse_config(str(path)) == {'crawl_file': 'crawl.json', 'weight_low': '1'}


def test_scoring_config_defaults():
    assert audit.scoring_config_from({'crawl_file': 'x'}) is DEFAULT_SCORING_CONFIG


def test_scoring_config_overrides():
    config = audit.scoring_config_from({'weight_critical': '5', 'weight_low': '0'})
    assert config.weight_for(Priority.CRITICAL) == 5.0
    assert config.weight_for(Priority.LOW) == 0.0


@pytest.mark.parametrize("config", [{'weight_urgent': '1'}, {'weight_high': 'heavy'}, {'weight_medium': '-1'}])
def test_scoring_config_rejects_bad_weights(config):
    with pytest.raises(ValidationError):
        audit.scoring_config_from(config)


def test_parse_now():
    assert audit.parse_now(None) is None
    assert audit.parse_now('2025-06-01T12:00:00').tzinfo == timezone.utc
    assert audit.parse_now('2025-06-01T12:00:00+02:00').utcoffset().total_seconds() == 7200
    with pytest.raises(ValidationError):
        audit.parse_now('yesterday')


def test_resolve_settings_precedence(monkeypatch):
    monkeypatch.setenv('GEO_AUDIT_CRAWL_FILE', 'env.json')
    monkeypatch.setenv('GEO_AUDIT_OUTPUT_DIR', 'env-out')
    settings = audit.resolve_settings(args(), {'crawl_file': 'config.json'})
    assert settings['crawl_file'].name == 'config.json'
    assert settings['output_dir'].name == 'env-out'

    settings = audit.resolve_settings(args(crawl='flag.json', output='flag-out'), {'crawl_file': 'config.json'})
    assert settings['crawl_file'].name == 'flag.json'
    assert settings['output_dir'].name == 'flag-out'


def test_resolve_settings_requires_crawl():
    with pytest.raises(ValidationError):
        audit.resolve_settings(args(), {})


def test_audit_only(crawl_file, tmp_path, capsys):
    audit.main(['--crawl', str(crawl_file), '--now', '2025-06-15T00:00:00Z', '--audit-only',
                '--output', str(tmp_path / 'out')])
    out = capsys.readouterr().out
    assert 'Overall Score:' in out
    assert '✓ robots.txt' in out
    assert not (tmp_path / 'out').exists()


def test_full_run_writes_reports(crawl_file, tmp_path, capsys):
    output = tmp_path / 'out'
    audit.main(['--crawl', str(crawl_file), '--now', '2025-06-15T00:00:00Z', '--output', str(output)])
    assert (output / 'audit-report.html').exists()
    assert (output / 'comparison-report.html').exists()
    summary = json.loads((output / 'summary.json').read_text(encoding='utf-8'))
    assert summary['site']['domain'] == 'example.com'
    assert 'Projected Score:' in capsys.readouterr().out


def test_config_file_supplies_crawl(crawl_file, tmp_path, capsys):
    config = tmp_path / 'config.txt'
    config.write_text(f"crawl_file = {crawl_file}\nweight_low = 1\n", encoding='utf-8')
    audit.main(['--config', str(config), '--audit-only'])
    assert 'Overall Score:' in capsys.readouterr().out


def test_missing_crawl_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        audit.main(['--crawl', str(tmp_path / 'missing.json')])
    assert exc.value.code == 1
    assert 'Error:' in capsys.readouterr().out


def test_missing_config_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        audit.main(['--config', str(tmp_path / 'nope.txt')])
    assert exc.value.code == 1


def test_bad_weight_exits(crawl_file, tmp_path):
    config = tmp_path / 'config.txt'
    config.write_text(f"crawl_file = {crawl_file}\nweight_low = lots\n", encoding='utf-8')
    with pytest.raises(SystemExit):
        audit.main(['--config', str(config)])


def test_site_directory_run(tmp_path, capsys):
    site = tmp_path / 'site'
    site.mkdir()
    (site / 'index.html').write_text('<html><body><h1>Home</h1><p>Hello</p></body></html>', encoding='utf-8')
    (site / 'robots.txt').write_text('User-agent: *\nDisallow: /', encoding='utf-8')
    audit.main(['--site-dir', str(site), '--base-url', 'https://example.com', '--audit-only'])
    out = capsys.readouterr().out
    assert 'URL: https://example.com' in out
    assert '13/13 AI crawlers are blocked' in out


def test_site_directory_needs_base_url(tmp_path):
    with pytest.raises(ValidationError):
        audit.resolve_settings(args(site_dir=str(tmp_path)), {})
