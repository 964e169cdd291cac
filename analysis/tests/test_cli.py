"""
Tests for the CLI entry point against the bundled sample configuration.
"""

import pytest
import json
import shutil
from pathlib import Path

from cli import main

PROJECT_ROOT = Path(__file__).parent.parent.parent
SAMPLE_CONFIG = PROJECT_ROOT / 'config' / 'portfolios.yml'


@pytest.fixture
def workspace(tmp_path):
    """Copy of the sample config and data in a temp directory."""
    shutil.copytree(PROJECT_ROOT / 'config', tmp_path / 'config')
    shutil.copytree(PROJECT_ROOT / 'data' / 'sample', tmp_path / 'data' / 'sample')
    return tmp_path


class TestCompareCommand:
    """Tests for the compare command."""

    def test_compare_sample(self, workspace, capsys):
        exit_code = main(['compare', '--config', str(workspace / 'config' / 'portfolios.yml')])

        captured = capsys.readouterr()
        assert exit_code == 0

        result = json.loads(captured.out)
        assert result['status'] == 'completed'

        comparison = result['comparison']
        assert comparison['first_common_date'] == '2024-12-02'
        assert comparison['summary_a']['name'] == 'MMF Portfolio'
        assert comparison['summary_b']['name'] == 'Mutual Funds Portfolio'
        assert comparison['aligned_series'][0]['index_a'] == 100.0
        assert comparison['aligned_series'][0]['index_b'] == 100.0
        assert set(comparison['summary_b']['final_units']) == {'AGTHX', 'ANCFX'}

        # Human summary goes to stderr
        assert 'Index difference' in captured.err

    def test_compare_with_series_quiet(self, workspace, capsys):
        exit_code = main([
            'compare',
            '--config', str(workspace / 'config' / 'portfolios.yml'),
            '--series',
            '--workers', '2',
            '-q'
        ])

        captured = capsys.readouterr()
        assert exit_code == 0
        assert captured.err == ''

        result = json.loads(captured.out)
        assert result['portfolio_a']['name'] == 'MMF Portfolio'
        assert len(result['portfolio_a']['points']) == 10

    def test_missing_config(self, tmp_path, capsys):
        exit_code = main(['compare', '--config', str(tmp_path / 'missing.yml')])

        captured = capsys.readouterr()
        assert exit_code == 1
        assert 'Input error' in captured.err

    def test_missing_data_file(self, workspace, capsys):
        (workspace / 'data' / 'sample' / 'AGTHX_nav.csv').unlink()

        exit_code = main(['compare', '--config', str(workspace / 'config' / 'portfolios.yml')])

        captured = capsys.readouterr()
        assert exit_code == 1
        assert 'File not found' in captured.err

    def test_bad_distribution_price(self, workspace, capsys):
        """Zero reinvestment price fails, or is excluded with --skip-failed."""
        dist_file = workspace / 'data' / 'sample' / 'ANCFX_distributions.csv'
        dist_file.write_text("date,distribution,nav\n2024-12-09,$0.1520,$0.00\n")
        config_path = str(workspace / 'config' / 'portfolios.yml')

        assert main(['compare', '--config', config_path]) == 1
        assert 'Comparison failed' in capsys.readouterr().err

        assert main(['compare', '--config', config_path, '--skip-failed', '-q']) == 0
        result = json.loads(capsys.readouterr().out)
        assert list(result['excluded']) == ['ANCFX']

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            main([])
