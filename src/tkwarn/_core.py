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

import datetime
import logging
import traceback

from logging.handlers import RotatingFileHandler

import tkwarn

# ====================================================================
#                               EXCEPTIONS
# ====================================================================


class TkWarnError(Exception):
    pass


class PluginLoadError(TkWarnError):
    pass


class PluginUnloadError(TkWarnError):
    pass


class PluginOptionError(TkWarnError):
    pass


# ====================================================================
#                               HELPERS
# ====================================================================


def parse_option(value, return_type=str):
    """Coerces an option value into the requested type.

    Options may come in already typed (e.g. a list from a JSON config) or as plain
    strings, in which case list-like types are parsed from comma separated values.
    Items of an already typed list are kept as written, only empty ones are dropped.

    :param value: The raw option value.
    :param return_type: The type the option should be returned in.
        Supported types: str, int, float, bool, list, set, tuple
    :raises: ValueError
    """
    if value is None:
        return None

    if return_type == str:
        return str(value)
    elif return_type == int:
        return int(value)
    elif return_type == float:
        return float(value)
    elif return_type == bool:
        if isinstance(value, str):
            return bool(int(value))
        return bool(value)
    elif return_type in (list, set, tuple):
        if isinstance(value, str):
            items = [s.strip() for s in value.split(",") if s.strip()]
        else:
            items = [str(s) for s in value if str(s) != ""]
        return return_type(items)
    else:
        raise ValueError("Invalid return type: {}".format(return_type))


# ====================================================================
#                               LOGGING
# ====================================================================


def get_logger(plugin=None):
    """
    Provides a logger that should be used by your plugin for debugging, info
    and error reporting.

    :param plugin: The plugin that is using the logger.
    :type plugin: tkwarn.Plugin
    :returns: logging.Logger -- The logger in question.
    """
    if plugin:
        return logging.getLogger("tkwarn." + str(plugin))
    else:
        return logging.getLogger("tkwarn")


_logger_configured = False


def configure_logger(log_path=None, max_logs=2, max_log_size=3 * 10**6):
    """Sets up console and, if *log_path* is given, rotating file output for all
    tkwarn loggers. Calling it more than once has no effect.
    """
    global _logger_configured
    if _logger_configured:
        return

    logger = logging.getLogger("tkwarn")
    logger.setLevel(logging.DEBUG)

    # File
    if log_path:
        file_fmt = logging.Formatter("(%(asctime)s) [%(levelname)s @ %(name)s.%(funcName)s] %(message)s", "%H:%M:%S")
        file_handler = RotatingFileHandler(log_path, encoding="utf-8", maxBytes=max_log_size, backupCount=max_logs)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_fmt)
        logger.addHandler(file_handler)
        logger.info(
            "============================= tkwarn run @ {} =============================".format(
                datetime.datetime.now()
            )
        )

    # Console
    console_fmt = logging.Formatter("[%(name)s.%(funcName)s] %(levelname)s: %(message)s", "%H:%M:%S")
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(console_fmt)
    logger.addHandler(console_handler)

    _logger_configured = True


def log_exception(plugin=None):
    """
    Logs an exception using :func:`get_logger`. Call this in an except block.

    :param plugin: The plugin that is using the logger.
    :type plugin: tkwarn.Plugin
    """
    logger = get_logger(plugin)
    e = traceback.format_exc().rstrip("\n")
    for line in e.split("\n"):
        logger.error(line)


# ====================================================================
#                           PLUGIN LOADING
# ====================================================================


def load_plugin(server, plugin_class, options=None):
    """Instantiates and mounts a plugin on the given server. A plugin with the same
    name that is already loaded gets reloaded with the new options.

    :returns: tkwarn.Plugin -- The mounted plugin instance.
    :raises: PluginLoadError
    """
    logger = get_logger(None)
    name = plugin_class.__name__
    logger.info("Loading plugin '{}'...".format(name))
    plugins = tkwarn.Plugin._loaded_plugins

    if not isinstance(plugin_class, type) or not issubclass(plugin_class, tkwarn.Plugin):
        raise PluginLoadError("Attempted to load a plugin that is not a subclass of 'tkwarn.Plugin'.")

    if name in plugins:
        return reload_plugin(server, plugin_class, options)

    try:
        plugin = plugin_class(server, options)
    except TkWarnError:
        log_exception(name)
        raise
    except Exception as e:
        log_exception(name)
        raise PluginLoadError("Plugin '{}' failed to load.".format(name)) from e

    try:
        plugin.mount()
    except Exception as e:
        log_exception(name)
        # A plugin that failed to mount keeps no hooks.
        for hook in plugin.hooks:
            plugin.remove_hook(*hook)
        if isinstance(e, TkWarnError):
            raise
        raise PluginLoadError("Plugin '{}' failed to mount.".format(name)) from e

    plugins[name] = plugin
    return plugin


def unload_plugin(name):
    logger = get_logger(None)
    logger.info("Unloading plugin '{}'...".format(name))
    plugins = tkwarn.Plugin._loaded_plugins
    if name not in plugins:
        raise PluginUnloadError("Attempted to unload a plugin that is not loaded.")

    try:
        plugins[name].unmount()
    except Exception as e:
        log_exception(name)
        raise PluginUnloadError("Plugin '{}' failed to unload.".format(name)) from e
    finally:
        del plugins[name]


def reload_plugin(server, plugin_class, options=None):
    try:
        unload_plugin(plugin_class.__name__)
    except PluginUnloadError:
        pass

    return load_plugin(server, plugin_class, options)
