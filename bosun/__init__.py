__title__ = 'bosun'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from . import formatter
from .arguments import *
from .commands import *
from .context import *
from .faults import *
from .getopt import *
from .signals import *
from .stdio import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info",
    "formatter",
)

# Load the exposed API of the arguments
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the context
__all__ += context.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the getopt
__all__ += getopt.__all__  # type: ignore[attr-defined]
# Load the exposed API of the signals
__all__ += signals.__all__  # type: ignore[attr-defined]
# Load the exposed API of the stdio
__all__ += stdio.__all__  # type: ignore[attr-defined]
