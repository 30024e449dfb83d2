import json

import mido
import pytest

from visualizer_to_midi.cli import build_parser, main, params_from_args


@pytest.fixture
def cached_run(tmp_path, three_key_settings, song_matrix):
    settings_path = tmp_path / "last-settings.json"
    capture_path = tmp_path / "midi-capture.json"
    settings_path.write_text(json.dumps(three_key_settings.model_dump(by_alias=True)))
    capture_path.write_text(json.dumps(song_matrix.tolist()))
    return [
        "--settings", str(settings_path),
        "--capture", str(capture_path),
        "--output", str(tmp_path / "song.mid"),
    ]


def test_parser_defaults():
    params = params_from_args(build_parser().parse_args([]))
    assert params.files.output_path == "song.mid"
    assert params.capture.total_duration_ms == 1_230_000
    assert params.classifier.epsilon == 40
    assert params.extraction.close_open_notes is False


def test_main_converts_cached_capture(tmp_path, cached_run):
    assert main(cached_run) == 0

    midi_file = mido.MidiFile(str(tmp_path / "song.mid"))
    notes = [m.note for m in midi_file.tracks[0] if m.type == "note_on"]
    assert notes == [59, 61]


def test_main_close_open_notes(tmp_path, cached_run):
    assert main(cached_run + ["--close-open-notes"]) == 0

    midi_file = mido.MidiFile(str(tmp_path / "song.mid"))
    notes = [m.note for m in midi_file.tracks[0] if m.type == "note_on"]
    assert notes == [59, 61, 60]


def test_main_piano_roll(tmp_path, cached_run):
    roll = tmp_path / "roll.png"
    assert main(cached_run + ["--piano-roll", str(roll)]) == 0
    assert roll.exists()


def test_main_fails_on_broken_capture(tmp_path, cached_run):
    (tmp_path / "midi-capture.json").write_text("[[true], [true, false]]")
    assert main(cached_run) == 1
    assert not (tmp_path / "song.mid").exists()


def test_main_rejects_invalid_arguments(cached_run):
    assert main(cached_run + ["--epsilon", "300"]) == 2


def test_main_keeps_midi_when_piano_roll_fails(tmp_path, cached_run):
    roll = tmp_path / "roll.xyz"
    assert main(cached_run + ["--piano-roll", str(roll)]) == 0
    assert (tmp_path / "song.mid").exists()
    assert not roll.exists()


def test_main_fails_on_keyless_capture(tmp_path, cached_run):
    (tmp_path / "midi-capture.json").write_text("[[], [], [], []]")
    assert main(cached_run) == 1
    assert not (tmp_path / "song.mid").exists()
