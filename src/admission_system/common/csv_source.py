from __future__ import annotations

import csv
from typing import Dict, Iterable, Iterator


def iter_csv_rows(lines: Iterable[str]) -> Iterator[Dict[str, str]]:
    """Lazily yield CSV rows as dicts.

    Header names are lower-cased and stripped so "Preferred_Unit " and
    "preferred_unit" both work. Values are stripped; missing cells become "".
    """
    reader = csv.DictReader(lines)
    for raw in reader:
        row: Dict[str, str] = {}
        for key, value in raw.items():
            if key is None:
                # Extra cells without a header.
                continue
            row[key.strip().lower()] = (value or "").strip()
        yield row
