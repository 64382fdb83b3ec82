# minqlx - Extends Quake Live's dedicated server with extra functionality and scripting.
# Copyright (C) 2015 Mino <mino@minomino.org>

# This file is part of minqlx.

# minqlx is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# minqlx is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with minqlx. If not, see <http://www.gnu.org/licenses/>.

import tkwarn

# ====================================================================
#                               EVENTS
# ====================================================================


class EventDispatcher:
    """The base event dispatcher. Each event should inherit this and provides a way
    to hook into events by registering an event handler.

    """

    no_debug = ()

    def __init__(self):
        self.name = type(self).name
        self.plugins = {}

    def dispatch(self, *args, **kwargs):
        """Calls all the handlers that have been registered when hooking this event.
        The recommended way to use this for events that inherit this class is to
        override the method with explicit arguments (as opposed to the this one's)
        and call this method by using ``super().dispatch()``.

        A handler raising an exception gets logged, the remaining handlers are still
        called.

        :param args: Any arguments.
        :param kwargs: Any keyword arguments.

        """
        logger = tkwarn.get_logger()
        # Log the events as they come in.
        if self.name not in self.no_debug:
            dbgstr = "{}{}".format(self.name, args)
            if len(dbgstr) > 100:
                dbgstr = dbgstr[0:99] + ")"
            logger.debug(dbgstr)

        plugins = self.plugins.copy()
        for plugin in plugins:
            for handler in list(plugins[plugin]):
                try:
                    handler(*args, **kwargs)
                except Exception:  # pylint: disable=broad-except
                    tkwarn.log_exception(plugin)
                    continue

    def add_hook(self, plugin, handler):
        """Hook the event, making the handler get called with relevant arguments
        whenever the event is takes place.

        :param plugin: The name of the plugin that's hooking the event.
        :type plugin: str
        :param handler: The handler to be called when the event takes place.
        :type handler: callable
        :raises: ValueError

        """
        if plugin not in self.plugins:
            self.plugins[plugin] = []
        elif handler in self.plugins[plugin]:
            raise ValueError("The event has already been hooked with the same handler.")

        self.plugins[plugin].append(handler)

    def remove_hook(self, plugin, handler):
        """Removes a previously hooked event.

        :param plugin: The name of the plugin that hooked the event.
        :type plugin: str
        :param handler: The handler used when hooked.
        :type handler: callable
        :raises: ValueError

        """
        if plugin in self.plugins and handler in self.plugins[plugin]:
            self.plugins[plugin].remove(handler)
            if not self.plugins[plugin]:
                del self.plugins[plugin]
            return

        raise ValueError("The event has not been hooked with the handler provided")


class EventDispatcherManager:
    """Holds all the event dispatchers and provides a way to access the dispatcher
    instances by accessing it like a dictionary using the event name as a key.
    Only one dispatcher can be used per event.

    """

    def __init__(self):
        self._dispatchers = {}

    def __getitem__(self, key):
        return self._dispatchers[key]

    def __contains__(self, key):
        return key in self._dispatchers

    def add_dispatcher(self, dispatcher):
        if not isinstance(dispatcher, type) or not issubclass(dispatcher, EventDispatcher):
            raise ValueError("Cannot add an event dispatcher not based on EventDispatcher.")
        elif dispatcher.name in self:
            raise ValueError("Event name already taken.")

        self._dispatchers[dispatcher.name] = dispatcher()

    def remove_dispatcher(self, dispatcher):
        if dispatcher.name not in self:
            raise ValueError("Event name not found.")

        del self._dispatchers[dispatcher.name]


# ====================================================================
#                          EVENT DISPATCHERS
# ====================================================================


class TeamkillDispatcher(EventDispatcher):
    """Event that goes off when a player kills a teammate.

    The event data holds an ``attacker`` and a ``victim``, each either ``None``
    or a mapping carrying the player's ``steamID``.

    """

    name = "teamkill"

    def dispatch(self, info):
        super().dispatch(info)


class ChatMessageDispatcher(EventDispatcher):
    """Event that goes off whenever a player sends a chat message. The event
    data carries the ``steamID`` of the speaker and the ``message``.

    """

    name = "chat_message"
    no_debug = ("chat_message",)

    def dispatch(self, info):
        super().dispatch(info)


# ====================================================================
#                              SERVER
# ====================================================================


class GameServer:
    """The plugins' view of the game server: the event dispatchers the connection
    layer feeds and the remote control used to send commands back.

    *rcon* needs to provide the coroutines ``warn(steam_id, message)`` and
    ``kick(steam_id, reason)``.

    """

    def __init__(self, rcon):
        self.rcon = rcon
        self.dispatchers = EventDispatcherManager()
        self.dispatchers.add_dispatcher(TeamkillDispatcher)
        self.dispatchers.add_dispatcher(ChatMessageDispatcher)
