"""Data models for configuration documents and parse results."""

from .document import ConfigDocument
from .result import ChunkInfo, ParseResult
