"""Backend formatters (HIR names -> target spellings)."""

from .c import CFormatter
from .koka import KokaFormatter
from .util import FormatError
