"""Common type definitions."""

from typing import Union
from pathlib import Path

# Type alias for paths
PathLike = Union[str, Path]
