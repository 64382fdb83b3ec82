import pytest

from mockito import mock, when, verify, unstub  # type: ignore
from mockito.matchers import any_  # type: ignore
from hamcrest import assert_that, equal_to, has_key, not_, contains_exactly

import tkwarn
from tkwarn import EventDispatcherManager, GameServer, TeamkillDispatcher, ChatMessageDispatcher


class TestEventDispatcher:
    def setup_method(self):
        self.dispatcher = TeamkillDispatcher()
        self.received = []

    # noinspection PyMethodMayBeStatic
    def teardown_method(self):
        unstub()

    def handler(self, info):
        self.received.append(info)

    def test_dispatch_calls_hooked_handlers(self):
        self.dispatcher.add_hook("some_plugin", self.handler)

        self.dispatcher.dispatch({"attacker": None, "victim": None})

        assert_that(self.received, contains_exactly({"attacker": None, "victim": None}))

    def test_hooking_twice_is_rejected(self):
        self.dispatcher.add_hook("some_plugin", self.handler)

        with pytest.raises(ValueError):
            self.dispatcher.add_hook("some_plugin", self.handler)

    def test_remove_hook(self):
        self.dispatcher.add_hook("some_plugin", self.handler)

        self.dispatcher.remove_hook("some_plugin", self.handler)
        self.dispatcher.dispatch({})

        assert_that(self.received, equal_to([]))
        assert_that(self.dispatcher.plugins, not_(has_key("some_plugin")))

    def test_remove_unknown_hook(self):
        with pytest.raises(ValueError):
            self.dispatcher.remove_hook("some_plugin", self.handler)

    def test_failing_handler_does_not_stop_other_handlers(self):
        def failing_handler(_info):
            raise RuntimeError("handler broke")

        plugin_logger = tkwarn.get_logger("failing_plugin")
        when(plugin_logger).error(any_).thenReturn(None)
        self.dispatcher.add_hook("failing_plugin", failing_handler)
        self.dispatcher.add_hook("some_plugin", self.handler)

        self.dispatcher.dispatch({})

        assert_that(self.received, contains_exactly({}))
        verify(plugin_logger, atleast=1).error(any_)


class TestEventDispatcherManager:
    def test_add_dispatcher(self):
        manager = EventDispatcherManager()

        manager.add_dispatcher(ChatMessageDispatcher)

        assert_that("chat_message" in manager, equal_to(True))
        assert_that(manager["chat_message"].name, equal_to("chat_message"))

    def test_add_dispatcher_twice(self):
        manager = EventDispatcherManager()
        manager.add_dispatcher(ChatMessageDispatcher)

        with pytest.raises(ValueError):
            manager.add_dispatcher(ChatMessageDispatcher)

    def test_add_non_dispatcher(self):
        manager = EventDispatcherManager()

        with pytest.raises(ValueError):
            manager.add_dispatcher(dict)

    def test_remove_dispatcher(self):
        manager = EventDispatcherManager()
        manager.add_dispatcher(ChatMessageDispatcher)

        manager.remove_dispatcher(ChatMessageDispatcher)

        assert_that("chat_message" in manager, equal_to(False))

    def test_remove_unknown_dispatcher(self):
        with pytest.raises(ValueError):
            EventDispatcherManager().remove_dispatcher(TeamkillDispatcher)


class TestGameServer:
    def test_server_provides_teamkill_and_chat_dispatchers(self):
        rcon = mock()
        server = GameServer(rcon)

        assert_that(server.rcon, equal_to(rcon))
        assert_that("teamkill" in server.dispatchers, equal_to(True))
        assert_that("chat_message" in server.dispatchers, equal_to(True))
