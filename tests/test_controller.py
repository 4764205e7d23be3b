"""Tests for SassWatchController - the embed point used by the TUI and headless runner."""

import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from conftest import FakeSubscriber, RecordingLog, RecordingNotifier, RecordingStatus
from sasswatch.errors import CompileDiagnostic, CompileError
from sasswatch.notifier import NoOpNotifier
from sasswatch.settings import SettingsStore
from textual_sasswatch.controller import SassWatchController


@pytest.fixture
def project(tmp_path):
    """Project root with a config file and two style directories."""
    root = tmp_path / "proj"
    (root / "styles").mkdir(parents=True)
    (root / "theme").mkdir()
    (root / "sasswatch.toml").write_text(
        """
[compiler]
include_path = ["node_modules"]

[watch]
directories = ["styles"]
"""
    )
    return root


@pytest.fixture
def make_controller(project, tmp_path):
    def make(**kwargs):
        kwargs.setdefault("settings", SettingsStore.for_root(project, tmp_path / "global.json"))
        kwargs.setdefault("subscriber", FakeSubscriber())
        return SassWatchController(project / "sasswatch.toml", **kwargs)

    return make


def test_controller_initialization(make_controller, project):
    controller = make_controller()

    assert controller.config_path == project / "sasswatch.toml"
    assert controller.roots.active == project
    assert controller.config.watch_directories == ("styles",)
    assert controller.watched == {}


def test_controller_notifier_default_noop(make_controller):
    controller = make_controller()
    assert isinstance(controller.notifier, NoOpNotifier)


def test_controller_missing_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        SassWatchController(tmp_path / "nope.toml")


@pytest.mark.asyncio
async def test_controller_attach_is_idempotent(make_controller):
    controller = make_controller()
    loop = asyncio.get_running_loop()

    controller.attach(loop)
    lifecycle = controller.lifecycle
    controller.attach(loop)

    assert controller.lifecycle is lifecycle


@pytest.mark.asyncio
async def test_controller_attach_with_not_running_loop(make_controller):
    controller = make_controller()
    loop = asyncio.new_event_loop()
    try:
        with pytest.raises(RuntimeError, match="Event loop must be running"):
            controller.attach(loop)
    finally:
        loop.close()


@pytest.mark.asyncio
async def test_controller_operations_require_attach(make_controller):
    controller = make_controller()

    with pytest.raises(RuntimeError, match="Controller not attached"):
        await controller.watch("styles")


@pytest.mark.asyncio
async def test_start_relaunches_configured_directories(make_controller, project):
    status = RecordingStatus()
    controller = make_controller(status=status)
    controller.attach(asyncio.get_running_loop())

    watched = await controller.start()

    assert watched == [project / "styles"]
    assert status.text == "Sass Watchers: 1"


@pytest.mark.asyncio
async def test_watch_persists_to_workspace_settings(make_controller, project):
    controller = make_controller()
    controller.attach(asyncio.get_running_loop())

    await controller.watch(project / "theme")

    settings_file = project / ".sasswatch" / "settings.json"
    assert json.loads(settings_file.read_text()) == {"watchDirectories": [str(project / "theme")]}
    assert controller.config.watch_directories == (str(project / "theme"),)


@pytest.mark.asyncio
async def test_persisted_watch_set_survives_restart(make_controller, project):
    first = make_controller()
    first.attach(asyncio.get_running_loop())
    await first.start()
    await first.watch(project / "theme")
    await first.detach()

    second = make_controller()
    second.attach(asyncio.get_running_loop())
    watched = await second.start()

    assert watched == [project / "styles", project / "theme"]


@pytest.mark.asyncio
async def test_unwatch_and_list(make_controller, project):
    notifier = RecordingNotifier()
    controller = make_controller(notifier=notifier)
    controller.attach(asyncio.get_running_loop())
    await controller.start()

    await controller.unwatch(project / "styles")
    log = RecordingLog()

    assert controller.list_watchers(log) == 0
    assert notifier.of("info")[-1] == "No watchers defined."
    assert controller.config.watch_directories == ()


@pytest.mark.asyncio
async def test_on_watch_changed_receives_snapshot(make_controller, project):
    controller = make_controller()
    snapshots = []
    controller.on_watch_changed = snapshots.append
    controller.attach(asyncio.get_running_loop())

    await controller.watch(project / "theme")

    assert list(snapshots[-1]) == [project / "theme"]


@pytest.mark.asyncio
async def test_set_active_root_reconciles_watch_set(make_controller, project, tmp_path):
    other = tmp_path / "other"
    (other / "scss").mkdir(parents=True)
    other_settings = SettingsStore.for_root(other, tmp_path / "global.json")
    await other_settings.update("watchDirectories", ["scss"])

    subscriber = FakeSubscriber()
    controller = make_controller(subscriber=subscriber)
    controller.attach(asyncio.get_running_loop())
    await controller.start()

    watched = await controller.set_active_root(other)

    assert watched == [other / "scss"]
    assert list(controller.watched) == [other / "scss"]
    assert project / "styles" in subscriber.stopped


@pytest.mark.asyncio
async def test_set_active_root_none_with_several_roots_clears(make_controller, tmp_path):
    controller = make_controller()
    controller.roots.set_active(tmp_path / "other")
    controller.attach(asyncio.get_running_loop())
    await controller.watch(controller.config_path.parent / "styles")

    watched = await controller.set_active_root(None)

    assert watched == []
    assert controller.watched == {}


@pytest.mark.asyncio
async def test_compile_file_reports_diagnostic(make_controller, project):
    notifier = RecordingNotifier()
    compiler = Mock()
    compiler.compile_document = AsyncMock(
        side_effect=CompileError(CompileDiagnostic("main.scss", 4, 2, "expected \";\"."))
    )
    controller = make_controller(notifier=notifier, compiler=compiler)

    written = await controller.compile_file(project / "styles" / "main.scss")

    assert written == []
    assert notifier.of("error") == ['Error compiling scss file main.scss: 4:2 expected ";".']


@pytest.mark.asyncio
async def test_compile_file_success_fires_callback(make_controller, project):
    source = project / "styles" / "main.scss"
    outputs = [source.with_suffix(".css")]
    compiler = Mock()
    compiler.compile_document = AsyncMock(return_value=outputs)
    controller = make_controller(compiler=compiler)
    compiled = []
    controller.on_compiled = lambda path, written: compiled.append((path, written))

    assert await controller.compile_file(source) == outputs
    assert compiled == [(source, outputs)]
    compiler.compile_document.assert_awaited_once_with(source, project, controller.config)


@pytest.mark.asyncio
async def test_source_change_triggers_compile(make_controller, project):
    compiler = Mock()
    compiler.compile_document = AsyncMock(return_value=[])
    controller = make_controller(compiler=compiler)

    await controller._on_source_changed(project / "styles" / "main.scss")

    compiler.compile_document.assert_awaited_once()


@pytest.mark.asyncio
async def test_compiler_version_notifies(make_controller):
    notifier = RecordingNotifier()
    compiler = Mock()
    compiler.version = AsyncMock(return_value="1.77.8")
    controller = make_controller(notifier=notifier, compiler=compiler)

    assert await controller.compiler_version() == "1.77.8"
    assert notifier.of("info") == ["Uses sass compiler: 1.77.8"]


@pytest.mark.asyncio
async def test_reload_config_picks_up_changes(make_controller, project):
    controller = make_controller()
    controller.attach(asyncio.get_running_loop())
    (project / "sasswatch.toml").write_text('[watch]\ndirectories = ["theme"]\n')

    await controller.reload_config()

    assert controller.config.watch_directories == ("theme",)
    assert list(controller.watched) == [project / "theme"]


@pytest.mark.asyncio
async def test_reload_config_error_is_notified(make_controller, project):
    notifier = RecordingNotifier()
    controller = make_controller(notifier=notifier)
    (project / "sasswatch.toml").write_text("[watch\n")

    await controller.reload_config()

    assert notifier.of("error")[0].startswith("Failed to reload config")
    assert controller.config.watch_directories == ("styles",)


@pytest.mark.asyncio
async def test_detach_clears_and_closes(make_controller):
    subscriber = FakeSubscriber()
    controller = make_controller(subscriber=subscriber)
    controller.attach(asyncio.get_running_loop())
    await controller.start()

    await controller.detach()

    assert subscriber.closed is True
    assert subscriber.active == {}
    assert controller.lifecycle is None
    assert controller.watched == {}


@pytest.mark.asyncio
async def test_set_active_root_none_with_single_root_clears(make_controller, project):
    status = RecordingStatus()
    controller = make_controller(status=status)
    controller.attach(asyncio.get_running_loop())
    await controller.start()
    assert list(controller.watched) == [project / "styles"]

    watched = await controller.set_active_root(None)

    assert watched == []
    assert controller.watched == {}
    assert status.text is None


@pytest.mark.asyncio
async def test_overlapping_watches_keep_config_and_settings_current(make_controller, project):
    controller = make_controller()
    controller.attach(asyncio.get_running_loop())

    await asyncio.gather(controller.watch(project / "styles"), controller.watch(project / "theme"))

    expected = [str(d) for d in controller.watched]
    settings_file = project / ".sasswatch" / "settings.json"
    assert len(expected) == 2
    assert list(controller.config.watch_directories) == expected
    assert json.loads(settings_file.read_text())["watchDirectories"] == expected
