from __future__ import annotations

import queue
import threading
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Tuple

import numpy as np
import pandas as pd

from .config import (
    COL_ANXIETY,
    COL_DEPRESSION,
    COL_EFFECT,
    COL_GENRE,
    COL_HOURS,
    EFFECTS,
    REQUIRED_COLUMNS,
)
from .log import get_logger

logger = get_logger(__name__)


class DatasetLoadError(Exception):
    """The survey file could not be turned into a usable record store."""


# ---------------- Data model ----------------
@dataclass(frozen=True)
class Record:
    hours_per_day: float
    anxiety: float
    depression: float
    fav_genre: str
    music_effect: str


@dataclass(frozen=True)
class RecordStore:
    records: Tuple[Record, ...]
    genres: Tuple[str, ...] = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "genres", tuple(sorted({r.fav_genre for r in self.records})))

    @classmethod
    def from_records(cls, records: Iterable[Record]) -> "RecordStore":
        return cls(tuple(records))

    @property
    def genre_set(self) -> FrozenSet[str]:
        return frozenset(self.genres)

    @property
    def hours(self) -> List[float]:
        return [r.hours_per_day for r in self.records]

    def __len__(self) -> int:
        return len(self.records)


# ---------------- Aggregates ----------------

def genre_counts(records: Iterable[Record]) -> Dict[str, int]:
    """Genre -> number of responses, in order of first appearance."""
    counts: Dict[str, int] = {}
    for r in records:
        counts[r.fav_genre] = counts.get(r.fav_genre, 0) + 1
    return counts


def genre_effect_counts(records: Iterable[Record]) -> Dict[str, Dict[str, int]]:
    """Genre -> effect -> count. Every genre carries all effects, zeros included."""
    out: Dict[str, Dict[str, int]] = {}
    for r in records:
        per_genre = out.setdefault(r.fav_genre, {eff: 0 for eff in EFFECTS})
        per_genre[r.music_effect] += 1
    return out


# ---------------- Loading ----------------

def clean_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Drop every row that fails to parse one of the required fields.

    "inf" and overflowing literals parse as infinite floats; those rows go too.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DatasetLoadError(f"Missing required column(s): {', '.join(missing)}")

    df = df.loc[:, list(REQUIRED_COLUMNS)].copy()
    for col in (COL_HOURS, COL_ANXIETY, COL_DEPRESSION):
        df[col] = pd.to_numeric(df[col], errors="coerce")
    df = df.dropna(subset=list(REQUIRED_COLUMNS))
    for col in (COL_GENRE, COL_EFFECT):
        df[col] = df[col].astype(str).str.strip()

    keep = (
        (df[COL_GENRE] != "")
        & df[COL_EFFECT].isin(EFFECTS)
        & (df[COL_HOURS] >= 0)
        & np.isfinite(df[[COL_HOURS, COL_ANXIETY, COL_DEPRESSION]]).all(axis=1)
    )
    return df[keep]


def records_from_frame(df: pd.DataFrame) -> List[Record]:
    clean = clean_frame(df)
    dropped = len(df) - len(clean)
    if dropped:
        logger.debug("Dropped %d malformed row(s)", dropped)
    return [
        Record(
            hours_per_day=float(row[0]),
            anxiety=float(row[1]),
            depression=float(row[2]),
            fav_genre=row[3],
            music_effect=row[4],
        )
        for row in clean.itertuples(index=False, name=None)
    ]


def load_records(path: str) -> RecordStore:
    """Read a survey CSV into an immutable store.

    Raises DatasetLoadError when the file is unreadable, lacks a required
    column, or holds no valid row at all.
    """
    try:
        df = pd.read_csv(path, dtype=str)
    except (OSError, ValueError) as exc:
        raise DatasetLoadError(f"Could not read {path}: {exc}") from exc

    store = RecordStore.from_records(records_from_frame(df))
    if not store.records:
        raise DatasetLoadError(f"No valid survey rows in {path}")
    logger.info("Loaded %d record(s), %d genre(s) from %s", len(store), len(store.genres), path)
    return store


# ---------------- Worker ----------------
class LoadWorker(threading.Thread):
    """Reads the dataset off the UI thread and posts the outcome to a queue."""

    def __init__(self, path: str, outq: queue.Queue):
        super().__init__(daemon=True)
        self.path = path
        self.q = outq

    def run(self):
        try:
            store = load_records(self.path)
        except DatasetLoadError as exc:
            self.q.put(("error", str(exc)))
            return
        self.q.put(("done", store))
