from .rcon import (
    settle,
    assert_player_was_warned,
    assert_player_was_kicked,
    assert_no_player_was_kicked,
)
from .timers import FakeTimers, FakeTimerHandle
from .events import teamkill, chat_message

# tkwarn_plugin_test provides functions for unit testing plugin behavior for :class:`tkwarn.Plugin`s.
#
# This module provides helpers for building event data, moving timers on a virtual clock, and checking the remote
# commands a plugin sent to the game server.
__all__ = [
    "settle",
    "assert_player_was_warned",
    "assert_player_was_kicked",
    "assert_no_player_was_kicked",
    "FakeTimers",
    "FakeTimerHandle",
    "teamkill",
    "chat_message",
]
