from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Sequence

from .errors import InvalidRecord
from .types import Record

logger = logging.getLogger(__name__)


def load_records(path: Path) -> List[Record]:
    """Load the movie list. A missing or unreadable file is an empty corpus."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Corpus file %s does not exist; starting empty", path)
        return []
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to load %s: %s", path, e)
        return []

    # Accept either a bare list or {"movies": [...]}
    if isinstance(data, dict):
        data = data.get("movies", [])
    if data is None:
        data = []
    if not isinstance(data, list):
        logger.error("Failed to load %s: expected a list of movies, got %s", path, type(data).__name__)
        return []
    records = []
    seen = set()
    for i, d in enumerate(data):
        try:
            record = Record.from_dict(d)
        except InvalidRecord as e:
            logger.warning("Skipping entry %d in %s: %s", i, path, e)
            continue
        if record.id in seen:
            logger.warning("Skipping entry %d in %s: duplicate id %d", i, path, record.id)
            continue
        seen.add(record.id)
        records.append(record)
    return records


def save_records(path: Path, records: Sequence[Record]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)
    # Write to a sibling temp file and rename so readers never see a partial file
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=path.name, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise
