from unittest.mock import AsyncMock

import pytest

from mockito import mock, unstub

from tkwarn import GameServer, Plugin

from tkwarn_plugin_test import FakeTimers


@pytest.fixture(name="rcon")
def _rcon():
    rcon = mock({"warn": AsyncMock(), "kick": AsyncMock()})
    yield rcon
    unstub(rcon)


@pytest.fixture(name="game_server")
def _game_server(rcon):
    yield GameServer(rcon)


@pytest.fixture(name="failing_rcon")
def _failing_rcon(rcon):
    rcon.warn = AsyncMock(side_effect=ConnectionError("rcon connection lost"))
    rcon.kick = AsyncMock(side_effect=ConnectionError("rcon connection lost"))
    yield rcon


@pytest.fixture(name="loaded_plugins", autouse=True)
def _loaded_plugins():
    Plugin._loaded_plugins.clear()
    yield Plugin._loaded_plugins
    Plugin._loaded_plugins.clear()


@pytest.fixture(name="fake_timers")
def _fake_timers():
    """Replaces the event loop timers of a plugin with a virtual clock.

    Use ``fake_timers.install(plugin)`` and move the clock with ``fake_timers.advance(seconds)``.
    """
    timers = FakeTimers()
    yield timers
    unstub()

