"""Read style names from ASS/SSA subtitle files."""

from pathlib import Path
from typing import List

from subburn.domain.exceptions import ValidationError
from subburn.shared.types import PathLike


def list_subtitle_styles(path: PathLike) -> List[str]:
    """
    Return the distinct ``Style:`` names of an ASS/SSA file, in file order.

    Raises:
        ValidationError: If the file does not exist or cannot be read
    """
    path = Path(path)
    if not path.is_file():
        raise ValidationError(f"Subtitle file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8-sig", errors="replace")
    except OSError as e:
        raise ValidationError(f"Cannot read subtitle file {path}: {e}") from e

    names: List[str] = []
    for line in content.splitlines():
        line = line.strip()
        if not line.startswith("Style:"):
            continue
        name = line.split(":", 1)[1].split(",", 1)[0].strip()
        if name and name not in names:
            names.append(name)
    return names
