import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

from performance_profile import StepCanvas


class RecordingCanvas(StepCanvas):
    """Stands in for a rendering backend and keeps every call it receives."""

    handle = "recording-canvas"

    def __init__(self):
        self.calls = []
        self.series = []

    def new_plot(self):
        self.calls.append(("new_plot",))

    def add_step_series(self, x, y, label, **style):
        self.calls.append(("add_step_series", label))
        self.series.append((np.asarray(x), np.asarray(y), label, style))

    def set_axis_bounds(self, xlim, ylim):
        self.calls.append(("set_axis_bounds", tuple(xlim), tuple(ylim)))

    def set_axis_labels(self, xlabel, ylabel):
        self.calls.append(("set_axis_labels", xlabel, ylabel))

    def set_title(self, title):
        self.calls.append(("set_title", title))


@pytest.fixture
def canvas():
    return RecordingCanvas()


@pytest.fixture
def small_times():
    """Three problems, two solvers; the worked example of the docs."""
    return np.array([[1.0, 2.0],
                     [2.0, 1.0],
                     [4.0, 4.0]])


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
