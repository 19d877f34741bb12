"""
Tests for cli.py - Command line interface.
"""

import json
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from fenci.cli import main


class TestCLIBasics:
    """Tests for basic CLI functionality."""

    def test_version(self, capsys):
        result = main(['--version'])
        assert result == 0
        captured = capsys.readouterr()
        assert 'fenci' in captured.out
        assert '0.1.0' in captured.out

    def test_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(['--help'])
        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert 'segmentation' in captured.out

    def test_no_args(self):
        assert main([]) == 1


class TestCLIWithoutDatabase:
    """Missing database is reported, not raised."""

    def test_segment(self, capsys):
        with patch('fenci.cli.get_db_path', return_value=None):
            assert main(['我们']) == 1
        assert 'not found' in capsys.readouterr().err

    def test_database_flag(self, tmp_path, capsys):
        assert main(['--database', str(tmp_path / 'missing.sqlite'), '我们']) == 1

    def test_unreadable_database(self, tmp_path, capsys):
        bogus = tmp_path / 'bogus.sqlite'
        bogus.write_bytes(b'not sqlite' * 50)
        assert main(['-d', str(bogus), '我们']) == 1
        assert 'Error opening dictionary' in capsys.readouterr().err

    def test_lookup(self):
        with patch('fenci.cli.get_db_path', return_value=None):
            assert main(['lookup', '我们']) == 1


class TestCLISegment:
    """Segmentation output against the sample database."""

    def test_simple_output(self, capsys, db_path):
        assert main(['-d', str(db_path), '我们今天很好。']) == 0
        assert capsys.readouterr().out.strip() == '我们 今天 很 好'

    def test_multiple_args_joined(self, capsys, db_path):
        assert main(['-d', str(db_path), '我们', '今天']) == 0
        assert capsys.readouterr().out.strip() == '我们 今天'

    def test_with_info(self, capsys, db_path):
        assert main(['-d', str(db_path), '-i', '学生']) == 0
        out = capsys.readouterr().out
        assert '* 学生 [學生]  xué sheng' in out
        assert '1. student; schoolchild' in out

    def test_with_info_unknown_word(self, capsys, db_path):
        assert main(['-d', str(db_path), '-i', '龍']) == 0
        assert '* 龍' in capsys.readouterr().out

    def test_full_json(self, capsys, db_path):
        assert main(['-d', str(db_path), '-f', '你好，朋友']) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['text'] == '你好，朋友'
        assert [t['text'] for t in data['tokens']] == ['你好', '，', '朋友']
        assert data['tokens'][1]['is_gap'] is True
        assert data['tokens'][1]['entry'] is None
        assert data['tokens'][2]['start'] == 3
        assert data['tokens'][2]['entry']['readings'][0]['accented'] == 'péng you'

    def test_default_database_path(self, capsys, db_path):
        with patch('fenci.cli.get_db_path', return_value=str(db_path)):
            assert main(['中国人']) == 0
        assert capsys.readouterr().out.strip() == '中国人'


class TestCLILookup:

    def test_text(self, capsys, db_path):
        assert main(['lookup', '-d', str(db_path), '車']) == 0
        out = capsys.readouterr().out
        assert out.startswith('车 [車]  chē')
        assert 'CL: 辆[輛] liàng' in out

    def test_json(self, capsys, db_path):
        assert main(['lookup', '-f', '-d', str(db_path), '好']) == 0
        data = json.loads(capsys.readouterr().out)
        assert [r['accented'] for r in data['readings']] == ['hǎo', 'hào']

    def test_not_found(self, capsys, db_path):
        assert main(['lookup', '-d', str(db_path), '龍']) == 1
        assert 'No entry' in capsys.readouterr().err


class TestCLIInitDb:

    def test_missing_source(self, tmp_path, capsys):
        result = main(['init-db', '--cedict', str(tmp_path / 'missing.u8'),
                       '--output', str(tmp_path / 'out.sqlite')])
        assert result == 1
        assert 'not found' in capsys.readouterr().err

    def test_build(self, tmp_path, sample_path, capsys):
        db = tmp_path / 'out.sqlite'
        assert main(['init-db', '-c', str(sample_path), '-o', str(db)]) == 0
        assert db.exists()
        assert 'Database initialized' in capsys.readouterr().out

        assert main(['lookup', '-d', str(db), '电脑']) == 0

    def test_overwrite_declined(self, tmp_path, sample_path, capsys):
        db = tmp_path / 'out.sqlite'
        db.write_bytes(b'')
        with patch('builtins.input', return_value='n'):
            result = main(['init-db', '-c', str(sample_path), '-o', str(db)])
        assert result == 1
        assert 'Aborted' in capsys.readouterr().out

    def test_overwrite_forced(self, tmp_path, sample_path):
        db = tmp_path / 'out.sqlite'
        assert main(['init-db', '-c', str(sample_path), '-o', str(db)]) == 0
        assert main(['init-db', '-c', str(sample_path), '-o', str(db), '--force']) == 0

    def test_database_error_reported(self, tmp_path, sample_path, capsys):
        error = OperationalError('INSERT', {}, Exception('database is locked'))
        with patch('fenci.loading.cedict.load_cedict', side_effect=error):
            result = main(['init-db', '-c', str(sample_path),
                           '-o', str(tmp_path / 'out.sqlite')])
        assert result == 1
        assert 'database is locked' in capsys.readouterr().err
