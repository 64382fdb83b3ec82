__version__ = "0.1.0"

# Put everything into a single module.
from ._core import *  # pylint: disable=unused-wildcard-import, wrong-import-position
from ._plugin import *  # pylint: disable=unused-wildcard-import, wrong-import-position
from ._events import *  # pylint: disable=unused-wildcard-import, wrong-import-position
