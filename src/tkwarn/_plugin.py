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

import asyncio

import tkwarn


class Plugin:
    """The base plugin class.

    Every plugin must inherit this or a subclass of this. A plugin is constructed
    with the :class:`tkwarn.GameServer` it runs on and its options, and only
    starts reacting to events once :meth:`mount` has been called.

    Options are declared in *options_specification*, a dictionary mapping option
    names to dictionaries with the keys ``required``, ``description`` and
    ``default``. Options missing from the ones passed in are filled with their
    default.

    .. warning::
        Handlers run on the server's event loop. You do **not** want blocking
        operations in code called by events. Remote commands are dispatched as
        tasks through :meth:`warn` and :meth:`kick` so the event stream is never
        held up waiting for the server to respond.

    """

    # Static dictionary of plugins currently loaded for the purpose of inter-plugin communication.
    _loaded_plugins = {}

    description = ""
    default_enabled = False
    options_specification = {}

    def __init__(self, server, options=None, error_handler=None):
        self.server = server
        self._hooks = []
        self._tasks = set()
        self.error_handler = error_handler or self.log_command_failure
        self.options = self.resolve_options(options or {})

    def __str__(self):
        return self.name

    @property
    def name(self):
        """The name of the plugin."""
        return self.__class__.__name__

    @property
    def plugins(self):
        """A dictionary containing plugin names as keys and plugin instances
        as values of all currently loaded plugins.

        """
        return self._loaded_plugins.copy()

    @property
    def hooks(self):
        """A list of all the hooks this plugin has."""
        return self._hooks.copy()

    @property
    def logger(self):
        """An instance of :class:`logging.Logger`, but initialized for this plugin."""
        return tkwarn.get_logger(self)

    @property
    def loop(self):
        """The event loop the plugin's handlers are running on."""
        return asyncio.get_running_loop()

    @classmethod
    def resolve_options(cls, options):
        resolved = {}
        for name, specification in cls.options_specification.items():
            if name in options:
                resolved[name] = options[name]
                continue

            if specification.get("required", False):
                raise tkwarn.PluginOptionError(
                    "Plugin '{}' requires the option '{}'.".format(cls.__name__, name)
                )

            resolved[name] = specification.get("default")

        return resolved

    def get_option(self, name, return_type=str):
        """Gets the value of an option.

        :param name: The name of the option.
        :type name: str
        :param return_type: The type the option should be returned in.
            Supported types: str, int, float, bool, list, set, tuple
        :raises: PluginOptionError

        """
        if name not in self.options:
            raise tkwarn.PluginOptionError("Plugin '{}' has no option '{}'.".format(self.name, name))

        try:
            return tkwarn.parse_option(self.options[name], return_type)
        except (TypeError, ValueError) as e:
            raise tkwarn.PluginOptionError(
                "Option '{}' of plugin '{}' is not a valid {}.".format(name, self.name, return_type.__name__)
            ) from e

    def add_hook(self, event, handler):
        self.server.dispatchers[event].add_hook(self.name, handler)
        self._hooks.append((event, handler))

    def remove_hook(self, event, handler):
        self.server.dispatchers[event].remove_hook(self.name, handler)
        self._hooks.remove((event, handler))

    def mount(self):
        pass

    def unmount(self):
        for hook in self.hooks:
            self.remove_hook(*hook)

    def call_later(self, delay, callback, *args):
        """Schedules *callback* on the event loop after *delay* seconds.

        :returns: asyncio.TimerHandle -- A handle that can be cancelled until the callback ran.
        """
        return self.loop.call_later(delay, callback, *args)

    def warn(self, steam_id, message):
        """Sends a warning to the player without waiting for the server to confirm it."""
        return self.dispatch_command(self.server.rcon.warn(steam_id, message))

    def kick(self, steam_id, reason):
        """Kicks the player without waiting for the server to confirm it."""
        return self.dispatch_command(self.server.rcon.kick(steam_id, reason))

    def dispatch_command(self, coroutine):
        task = self.loop.create_task(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._command_done)
        return task

    def _command_done(self, task):
        self._tasks.discard(task)
        if task.cancelled():
            return

        exception = task.exception()
        if exception is not None:
            self.error_handler(exception)

    def log_command_failure(self, exception):
        self.logger.error(
            "Remote command failed: {}".format(exception),
            exc_info=(type(exception), exception, exception.__traceback__),
        )
