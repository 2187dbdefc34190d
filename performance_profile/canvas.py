"""
Rendering backends for profiles.

The profile code only talks to a StepCanvas; MatplotlibCanvas is the one
shipped with the package. Style keyword arguments reach add_step_series
untouched, and backend errors propagate as raised.
"""

import matplotlib.pyplot as plt

from .constants import FIGSIZE, LEGEND_LOC


class StepCanvas:
    """What a backend must provide to draw a profile."""

    handle = None

    def new_plot(self):
        raise NotImplementedError

    def add_step_series(self, x, y, label, **style):
        raise NotImplementedError

    def set_axis_bounds(self, xlim, ylim):
        raise NotImplementedError

    def set_axis_labels(self, xlabel, ylabel):
        raise NotImplementedError

    def set_title(self, title):
        raise NotImplementedError

    def finish(self):
        pass


class MatplotlibCanvas(StepCanvas):
    """
    Draws on ax, or on a new figure of size figsize when ax is None.
    legend=False leaves the legend to the caller (used by grids that share
    one figure-level legend).
    """

    def __init__(self, ax=None, figsize=FIGSIZE, legend=True):
        self.ax = ax
        self.figsize = figsize
        self.legend = legend

    @property
    def handle(self):
        return self.ax

    def new_plot(self):
        if self.ax is None:
            _, self.ax = plt.subplots(figsize=self.figsize)
        self.ax.grid(True)
        return self.ax

    def add_step_series(self, x, y, label, **style):
        self.ax.step(x, y, where="post", label=label, **style)

    def set_axis_bounds(self, xlim, ylim):
        self.ax.set_xlim(*xlim)
        self.ax.set_ylim(*ylim)

    def set_axis_labels(self, xlabel, ylabel):
        self.ax.set_xlabel(xlabel)
        self.ax.set_ylabel(ylabel)

    def set_title(self, title):
        self.ax.set_title(title)

    def finish(self):
        if self.legend:
            self.ax.legend(loc=LEGEND_LOC)
