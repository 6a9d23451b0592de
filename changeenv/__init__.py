"""changeenv jumps between parallel directories of environment trees."""

__version__ = "0.1.0"

from .envpath import switch
from .exceptions import ChangeEnvError, InvalidArgumentError, NoEnvironmentSegmentError

__all__ = [
    "ChangeEnvError",
    "InvalidArgumentError",
    "NoEnvironmentSegmentError",
    "__version__",
    "switch",
]
