# catalog.py

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_FILE = Path(__file__).parent / "data" / "champions.csv"


@dataclass(frozen=True)
class Champion:
    """A catalog entry the player has to name."""

    id: str
    name: str
    title: str
    blurb: Optional[str] = None


def load_catalog(file_name=DEFAULT_CATALOG_FILE) -> Tuple[Champion, ...]:
    """
    Load champions from a CSV file with an `id,name,title[,blurb]` header.
    Blank lines and lines starting with '#' are skipped. File order is kept.
    """
    champions = []
    seen = set()
    with open(file_name, mode='r', encoding='utf-8') as file:
        reader = csv.DictReader(
            (r for r in file if r.strip() and not r.strip().startswith('#')),
            escapechar='\\'
        )
        for line_no, row in enumerate(reader, start=1):
            champ_id = (row.get("id") or "").strip()
            name = (row.get("name") or "").strip()
            if not champ_id or not name:
                raise ValueError(f"{file_name}: row {line_no} needs both 'id' and 'name'")
            if champ_id in seen:
                raise ValueError(f"{file_name}: duplicate champion id {champ_id!r}")
            seen.add(champ_id)
            champions.append(Champion(
                id=champ_id,
                name=name,
                title=(row.get("title") or "").strip(),
                blurb=(row.get("blurb") or "").strip() or None,
            ))

    logger.debug("📚 Loaded %d champions from %s", len(champions), file_name)
    return tuple(champions)


def display_order(catalog: Iterable[Champion]) -> Tuple[Champion, ...]:
    # Board order: alphabetical by display name
    return tuple(sorted(catalog, key=lambda c: c.name.casefold()))
