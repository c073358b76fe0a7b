import logging

from watchdog.events import DirModifiedEvent, FileModifiedEvent

from emblem import EmblemCompiler
from emblem.__main__ import main
from emblem.watcher import ChangeHandler, trigger_recompile


def test_trigger_recompile_writes_outputs(tmp_path):
    src = tmp_path / "index.emblem"
    src.write_text("each items\n  p = name\n")
    dst = tmp_path / "build" / "index.hbs"

    failures = trigger_recompile({src: dst}, EmblemCompiler())

    assert failures == 0
    assert dst.read_text() == "{{#each items}}<p>{{name}}</p>{{/each}}"


def test_trigger_recompile_logs_and_skips_failures(tmp_path, caplog):
    bad = tmp_path / "bad.emblem"
    bad.write_text("p\n    span\n  em\n")
    good = tmp_path / "good.emblem"
    good.write_text("p ok")
    pairs = {bad: tmp_path / "bad.hbs", good: tmp_path / "good.hbs"}

    with caplog.at_level(logging.ERROR, logger="emblem.watcher"):
        failures = trigger_recompile(pairs, EmblemCompiler())

    assert failures == 1
    assert not (tmp_path / "bad.hbs").exists()
    assert (tmp_path / "good.hbs").read_text() == "<p>ok</p>"
    assert "Line 3" in caplog.text


def test_change_handler_recompiles_watched_files(tmp_path):
    src = tmp_path / "page.emblem"
    src.write_text("p one")
    dst = tmp_path / "page.hbs"
    handler = ChangeHandler({src}, {src: dst}, EmblemCompiler())

    handler.on_modified(FileModifiedEvent(str(tmp_path / "other.txt")))
    assert not dst.exists()

    handler.on_modified(DirModifiedEvent(str(tmp_path)))
    assert not dst.exists()

    handler.on_modified(FileModifiedEvent(str(src)))
    assert dst.read_text() == "<p>one</p>"


def test_cli_once(tmp_path):
    (tmp_path / "a.emblem").write_text("#main\n  | hi")
    config = tmp_path / "emblem.yaml"
    config.write_text("write:\n  - src: a.emblem\n    dst: out/a.hbs\n")

    assert main([str(config), "--once"]) == 0
    assert (tmp_path / "out" / "a.hbs").read_text() == '<div id="main">hi</div>'


def test_cli_once_reports_failures(tmp_path):
    (tmp_path / "a.emblem").write_text("p\n    span\n  em")
    config = tmp_path / "emblem.yaml"
    config.write_text("write:\n  - src: a.emblem\n    dst: a.hbs\n")

    assert main([str(config), "--once"]) == 1
    assert main([str(tmp_path / "missing.yaml"), "--once"]) == 2


def test_trigger_recompile_continues_after_write_failure(tmp_path, caplog):
    (tmp_path / "blocker").write_text("not a directory")
    a = tmp_path / "a.emblem"
    a.write_text("p a")
    b = tmp_path / "b.emblem"
    b.write_text("p b")
    pairs = {a: tmp_path / "blocker" / "out.hbs", b: tmp_path / "b.hbs"}

    with caplog.at_level(logging.ERROR, logger="emblem.watcher"):
        failures = trigger_recompile(pairs, EmblemCompiler())

    assert failures == 1
    assert (tmp_path / "b.hbs").read_text() == "<p>b</p>"
    assert "Failed to write" in caplog.text


def test_cli_once_rejects_mistyped_config(tmp_path):
    config = tmp_path / "emblem.yaml"
    config.write_text("write:\n  - src: a.emblem\n    dst: a.hbs\nwatch: a.emblem\n")

    assert main([str(config), "--once"]) == 2
