import pytest

import launch
from cycle_overlay import live_monitor


@pytest.fixture
def runs(monkeypatch):
    calls = []
    monkeypatch.setattr(live_monitor, "main", lambda argv, test_mode=False: calls.append((argv, test_mode)))
    return calls


def answers(*values):
    replies = iter(values)
    return lambda _prompt: next(replies)


def test_log_path_skips_menu(runs, capsys):
    launch.main(["/tmp/Prospect.log"], prompt=answers())

    assert runs == [(["/tmp/Prospect.log"], False)]
    assert capsys.readouterr().out == ""


def test_menu_lists_every_mode(runs, capsys):
    launch.main([], prompt=answers("1"))

    out = capsys.readouterr().out
    assert "[1] Live" in out
    assert "[2] Test" in out
    assert "[3] Exit" in out


@pytest.mark.parametrize("reply, test_mode", [("1", False), ("2", True)])
def test_menu_starts_monitor(runs, reply, test_mode):
    launch.main([], prompt=answers(reply))

    assert runs == [([], test_mode)]


def test_menu_asks_again_on_unknown_key(runs, capsys):
    launch.main([], prompt=answers("9", " 2 "))

    assert runs == [([], True)]
    assert "Unknown mode '9'" in capsys.readouterr().out


def test_menu_exit(runs):
    with pytest.raises(SystemExit) as exc:
        launch.main([], prompt=answers("3"))

    assert exc.value.code == 0
    assert runs == []
