"""
*pvtcurves*

Per-cell PVT curve lookup and evaluation for black-oil reservoir simulation result sets.
"""

from ._precision import *  # noqa
from .constants import *  # noqa
from .errors import *  # noqa
from .types import *  # noqa
from .units import *  # noqa
from .curves import *  # noqa
from .sources import *  # noqa
from .regions import *  # noqa
from .interpolants import *  # noqa
from .properties import *  # noqa
from .conversions import *  # noqa
from .config import *  # noqa
from .collection import *  # noqa
from .serialization import *  # noqa

__version__ = "0.1.0"
