import pathlib

import pytest

import neumalang.__main__


def test_load_config_missing_file (tmp_path: pathlib.Path) -> None:

	"""A missing config file gives an empty config."""

	assert neumalang.__main__.load_config(str(tmp_path / "missing.yaml")) == {}


def test_load_config_reads_yaml (tmp_path: pathlib.Path) -> None:

	"""Config sections are read with yaml.safe_load."""

	path = tmp_path / "config.yaml"
	path.write_text("scale:\n  root: D\n  mode: dorian\n")

	assert neumalang.__main__.load_config(str(path)) == {"scale": {"root": "D", "mode": "dorian"}}


def test_build_scale_from_intervals () -> None:

	"""Explicit intervals win over the mode registry."""

	scale = neumalang.__main__.build_scale({"root": "E3", "intervals": [3, 4, 5], "mode": "triad"})

	assert scale.root == 52
	assert scale.intervals == (3, 4, 5)
	assert scale.mode == "triad"


def test_main_prints_events (tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:

	"""The CLI decodes notation and prints one line per event."""

	code = neumalang.__main__.main(["C D E", "--config", str(tmp_path / "none.yaml")])

	lines = capsys.readouterr().out.splitlines()

	assert code == 0
	assert len(lines) == 3
	assert "pitch= 60" in lines[0]
	assert "pitch= 64" in lines[2]


def test_main_uses_config (tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:

	"""Scale and beat length come from the YAML file."""

	path = tmp_path / "config.yaml"
	path.write_text("scale:\n  root: A3\n  mode: minor\ndecoder:\n  base_duration: 1/2\n")

	code = neumalang.__main__.main(["0 2", "--config", str(path)])

	lines = capsys.readouterr().out.splitlines()

	assert code == 0
	assert "pitch= 57" in lines[0]
	assert "pitch= 60" in lines[1]
	assert lines[1].split()[0] == "1/2"


def test_main_play (tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:

	"""--play drives a clock and prints the dispatched MIDI messages."""

	code = neumalang.__main__.main(["C:1/2", "--play", "--config", str(tmp_path / "none.yaml")])

	out = capsys.readouterr().out

	assert code == 0
	assert "note_on" in out
	assert "note_off" in out


def test_main_play_default_tick_rate (tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:

	"""Without a sequencer section a half-beat note lasts 12 of the 24 ticks per beat."""

	neumalang.__main__.main(["C:1/2", "--play", "--config", str(tmp_path / "none.yaml")])

	played = [line.split() for line in capsys.readouterr().out.splitlines() if "note_" in line]

	assert [(fields[0], fields[1]) for fields in played] == [("0", "note_on"), ("12", "note_off")]


def test_main_play_rejects_out_of_range_pitch (tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:

	"""A pitch above 127 fails before anything is played."""

	code = neumalang.__main__.main(["C 0o6", "--play", "--config", str(tmp_path / "none.yaml")])

	assert code == 1
	assert "note_on" not in capsys.readouterr().out


def test_main_reports_parse_errors (tmp_path: pathlib.Path) -> None:

	"""Malformed notation exits with status 1."""

	assert neumalang.__main__.main(["(C D", "--config", str(tmp_path / "none.yaml")]) == 1


def test_main_reads_file (tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:

	"""--file reads notation from disk."""

	source = tmp_path / "theme.neuma"
	source.write_text("0 1 2 3\n")

	code = neumalang.__main__.main(["--file", str(source), "--config", str(tmp_path / "none.yaml")])

	assert code == 0
	assert len(capsys.readouterr().out.splitlines()) == 4
