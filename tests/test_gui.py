import pytest

pytest.importorskip("tkinter")

from atm_txt.gui import App


class _Var:
    def __init__(self, value=""):
        self.value = value

    def get(self):
        return self.value

    def set(self, value):
        self.value = value


class _CheckForm:
    """Stands in for the window: only the fields `App._check` touches."""

    def __init__(self, song_path, config_path=""):
        self.input_var = _Var(str(song_path))
        self.config_var = _Var(str(config_path))
        self.status_var = _Var()
        self.lines = []

    def _log(self, msg):
        self.lines.append(msg)


def test_check_compiles_song(title_path):
    form = _CheckForm(title_path)
    App._check(form)
    assert form.status_var.get() == "Title Theme"
    assert form.lines[-1] == "Done."


def test_check_uses_settings_size_limit(title_path, tmp_path):
    cfg = tmp_path / "settings.json"
    cfg.write_text('{"max_text_size": 8}')
    form = _CheckForm(title_path, cfg)
    App._check(form)
    assert form.status_var.get() == "Load error"
    assert form.lines[-1].startswith("Error:")


def test_check_reports_bad_settings(title_path, tmp_path):
    form = _CheckForm(title_path, tmp_path / "missing.json")
    App._check(form)
    assert len(form.lines) == 1
    assert form.lines[0].startswith("Error: cannot load config")
