"""
matplotlib_config.py - Configure matplotlib for headless chart rendering.
"""

import matplotlib
import os


def configure_matplotlib_for_backend():
    """
    Configure matplotlib to use a non-interactive backend.

    This should be called BEFORE importing matplotlib.pyplot
    so charts can be written to disk from the server or tests.
    """
    if os.environ.get('DISPLAY') is None and os.name != 'nt':
        matplotlib.use('Agg')

    matplotlib.rcParams['figure.dpi'] = 100
    matplotlib.rcParams['savefig.dpi'] = 150
    matplotlib.rcParams['figure.figsize'] = [10, 8]
    matplotlib.rcParams['font.size'] = 10
