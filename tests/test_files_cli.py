import json
import logging
import sys
from datetime import date
from pathlib import Path

import pytest

from miqat.cli import main, make_parser
from miqat.errors import InvalidCoordinates
from miqat.files import load_home, load_parameters
from miqat.methods import HighLatitudeRule, Madhab, Method
from miqat.seasonal import Shafaq


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def write(path: Path, content: dict) -> Path:
    path.write_text(json.dumps(content))
    return path


def test_load_home(tmp_path: Path) -> None:
    path = write(tmp_path / 'home.json', {'lat': 43.6532, 'lon': '-79.3832'})
    home = load_home(path)
    assert (home.latitude, home.longitude) == (43.6532, -79.3832)


def test_load_home_rejects_bad_coordinates(tmp_path: Path) -> None:
    path = write(tmp_path / 'home.json', {'lat': 'nan', 'lon': 0})
    with pytest.raises(InvalidCoordinates):
        load_home(path)


def test_load_home_missing(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_home(tmp_path / 'absent.json')


def test_load_parameters_defaults(tmp_path: Path) -> None:
    params = load_parameters(tmp_path / 'absent.json')
    assert params.method is Method.OTHER
    assert (params.fajr_angle, params.isha_angle, params.isha_interval) == (12, 12, 0)


def test_load_parameters(tmp_path: Path) -> None:
    path = write(tmp_path / 'home.json', {
        'lat': 43.6532, 'lon': -79.3832,
        'method': 'NorthAmerica', 'fajrAngle': '16', 'ishaAngle': 'steep',
        'madhab': 'hanafi', 'highLatitudeRule': 'twilightAngle', 'shafaq': 'ahmer',
    })
    params = load_parameters(path)
    assert params.method is Method.NORTH_AMERICA
    assert params.fajr_angle == 16
    assert params.isha_angle == 15
    assert params.madhab is Madhab.HANAFI
    assert params.high_latitude_rule is HighLatitudeRule.TWILIGHT_ANGLE
    assert params.shafaq is Shafaq.AHMER


def test_load_parameters_unknown_method(tmp_path: Path) -> None:
    path = write(tmp_path / 'home.json', {'method': 'Atlantis'})
    assert load_parameters(path).method is Method.OTHER


def test_parser() -> None:
    args = make_parser().parse_args([
        '-d', '2024-03-11', '-y', '43.6532', '-x', '-79.3832', '-m', 'Karachi',
        '--madhab', 'hanafi', '--hijri-adjust', '-1', '--month', '-w', '4',
    ])
    assert args.date == date(2024, 3, 11)
    assert (args.latitude, args.longitude) == (43.6532, -79.3832)
    assert args.method == 'Karachi'
    assert args.madhab is Madhab.HANAFI
    assert args.hijri_adjust == -1
    assert args.month and not args.year
    assert args.workers == 4


def test_parser_month_and_year_exclusive() -> None:
    with pytest.raises(SystemExit):
        make_parser().parse_args(['--month', '--year'])


def test_main_prints_day(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture,
    restore_logging,
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, 'argv', [
        'miqat', '-d', '2024-03-11', '-y', '43.6532', '-x', '-79.3832',
        '-m', 'MuslimWorldLeague',
    ])
    main()
    out = capsys.readouterr().out
    assert '2024-03-11' in out
    assert 'Ramaḍān 1445 AH' in out
    assert '* fajr' in out
    assert '  sunrise' in out
    assert 'middleOfTheNight' in out


def test_main_reads_home(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture,
    restore_logging,
) -> None:
    monkeypatch.chdir(tmp_path)
    write(tmp_path / '.home.json', {'lat': -33.8688, 'lon': 151.2093, 'method': 'Egyptian'})
    monkeypatch.setattr(sys, 'argv', ['miqat', '-d', '2024-03-11'])
    main()
    out = capsys.readouterr().out
    assert 'Egyptian' in out
    assert '* isha' in out


def test_main_without_home(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_logging,
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, 'argv', ['miqat', '-d', '2024-03-11'])
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 2


def test_main_polar_day(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_logging,
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, 'argv', ['miqat', '-d', '2024-06-21', '-y', '78.2232', '-x', '15.6'])
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 1


def test_parser_explain_excludes_batches() -> None:
    assert make_parser().parse_args(['-e']).explain
    with pytest.raises(SystemExit):
        make_parser().parse_args(['--explain', '--month'])


def test_main_explains_day(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture,
    restore_logging,
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, 'argv', [
        'miqat', '-d', '2024-03-11', '-y', '43.6532', '-x', '-79.3832',
        '-m', 'MuslimWorldLeague', '--explain',
    ])
    main()
    out = capsys.readouterr().out
    assert '2460380.5' in out
    assert 'Declination' in out
    assert 'Days since epoch' in out
    assert '(safeguard)' not in out
