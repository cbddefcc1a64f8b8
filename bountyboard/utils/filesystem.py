from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any


def read_json(path: Path, default: Any = None) -> Any:
    if not path.exists():
        return default

    try:
        text = path.read_text(encoding="utf-8").strip()
        if not text:
            return default
        return json.loads(text)
    except json.JSONDecodeError:
        # Corrupt or partially written file → reset safely
        return default


def write_json(path: Path, data: Any) -> None:
    """
    Write JSON next to the target first, then swap it in.
    A killed run leaves either the old file or the new one, never half of each.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(
        json.dumps(data, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    os.replace(tmp, path)


def file_exists(path: Path) -> bool:
    return path.is_file()
