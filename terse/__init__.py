__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'terse'
__license__ = 'MIT'
__version__ = "0.1.0"

from .kinds import *
from .options import *
from .commands import *
from .faults import *
from .tokens import *
from .nothing import nothing
from . import usage

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info",
    "nothing",
    "usage",
)

# Load the exposed API of the value kinds
__all__ += kinds.__all__  # type: ignore[attr-defined]
# Load the exposed API of the option specs
__all__ += options.__all__  # type: ignore[attr-defined]
# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the tokenizer
__all__ += tokens.__all__  # type: ignore[attr-defined]
