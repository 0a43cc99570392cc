"""Container codec: binary layout, chunk framing, parser and builder."""

from .builder import build
from .parser import parse
