"""Shared fixtures for Mood-O-Mappr tests."""

import matplotlib
matplotlib.use("Agg")

import pytest
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from moodmappr.model import Record, RecordStore

SURVEY_HEADER = "Timestamp,Age,Hours per day,Fav genre,Anxiety,Depression,Music effects\n"


@pytest.fixture
def survey_csv(tmp_path):
    """A small survey file mixing valid and malformed rows."""
    rows = [
        "t1,18,3,Rock,7,2,Improve",
        "t2,21,1.5,Jazz,4,5,No effect",
        "t3,30,abc,Pop,3,3,Improve",        # hours not numeric
        "t4,25,2,Pop,,4,Worsen",            # anxiety missing
        "t5,40,4,,5,5,Improve",             # genre missing
        "t6,19,0.5,Pop,6,1,",               # effect missing
        "t7,22,2,Metal,8,8,Maybe",          # effect outside the closed set
        "t8,33,-1,Rock,1,1,Improve",        # negative hours
        "t9,27,0,Classical,2,6,Improve",
        "t10,27,5,Rock,2,6,Worsen",
        "t11,20,inf,Jazz,2,2,Worsen",       # infinite hours
        "t12,20,1,Pop,1e400,2,Improve",     # anxiety overflows to inf
    ]
    path = tmp_path / "survey.csv"
    path.write_text(SURVEY_HEADER + "\n".join(rows) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def rock_jazz_pop():
    """Hours 0-2 hold only Rock and Pop; Jazz sits above 3."""
    records = [
        Record(0.5, 3, 2, "Pop", "Improve"),
        Record(1.0, 5, 4, "Rock", "Improve"),
        Record(2.0, 6, 6, "Rock", "Worsen"),
        Record(1.5, 2, 1, "Pop", "No effect"),
        Record(4.0, 7, 3, "Jazz", "Improve"),
        Record(6.0, 4, 4, "Jazz", "No effect"),
        Record(3.5, 1, 0, "Rock", "Improve"),
    ]
    return RecordStore.from_records(records)


@pytest.fixture
def make_axes():
    """Factory for a headless Axes on its own Agg canvas."""
    def _make():
        fig = Figure(figsize=(6, 4))
        FigureCanvasAgg(fig)
        return fig.add_subplot(111)
    return _make
