"""
The VIEW layer renders models, amplitudes and Wilson coefficients, as text on
the terminal and as Feynman-diagram figures.
"""
from qedkit.view.display import display, render
from qedkit.view.diagrams import show

__all__ = ["display", "render", "show"]
