"""
Terminal Flexbox Library

A terminal UI core built on the Blessed library: a tree of styled nodes, a
flexbox-style layout engine, and a double-buffered cell grid that only
redraws the cells that changed between frames.
"""

import logging

from .style import (
    UNSET,
    AlignItems,
    BorderStyle,
    Display,
    FlexDirection,
    JustifyContent,
    Sides,
    Style,
    merge,
)
from .node import Node, NodeTree, Rect, TreeBuilder, TreeError
from .layout import LayoutEngine, calculate_layout
from .buffer import Cell, CellBuffer, sgr_sequence
from .renderer import Renderer, render
from .terminal import TerminalIO
from .config import AppConfig
from .app import Application
from .logging_config import setup_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'UNSET',
    'AlignItems',
    'BorderStyle',
    'Display',
    'FlexDirection',
    'JustifyContent',
    'Sides',
    'Style',
    'merge',
    'Node',
    'NodeTree',
    'Rect',
    'TreeBuilder',
    'TreeError',
    'LayoutEngine',
    'calculate_layout',
    'Cell',
    'CellBuffer',
    'sgr_sequence',
    'Renderer',
    'render',
    'TerminalIO',
    'AppConfig',
    'Application',
    'setup_logging',
]

__version__ = '0.1.0'
