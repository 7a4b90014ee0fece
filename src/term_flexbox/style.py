"""
Style values and the style cascade.

A Style holds every visual and layout attribute a node can carry. Fields left
unspecified hold the UNSET sentinel, which is distinct from None, False and 0
so that an explicit ``border=False`` can override an inherited border.
"""

import logging
import math
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Iterable, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class _Unset:
    """Marker type for style fields that were never specified."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return 'UNSET'

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


UNSET = _Unset()


class Display(str, Enum):
    BLOCK = 'block'
    FLEX = 'flex'


class FlexDirection(str, Enum):
    ROW = 'row'
    COLUMN = 'column'


class JustifyContent(str, Enum):
    FLEX_START = 'flex-start'
    FLEX_END = 'flex-end'
    CENTER = 'center'
    SPACE_BETWEEN = 'space-between'
    SPACE_AROUND = 'space-around'
    SPACE_EVENLY = 'space-evenly'


class AlignItems(str, Enum):
    FLEX_START = 'flex-start'
    FLEX_END = 'flex-end'
    CENTER = 'center'
    STRETCH = 'stretch'


class BorderStyle(str, Enum):
    SINGLE = 'single'
    DOUBLE = 'double'
    THICK = 'thick'
    ROUNDED = 'rounded'


COLORS = ('black', 'red', 'green', 'yellow', 'blue', 'magenta', 'cyan', 'white')

EMPHASIS = ('bold', 'dim', 'italic', 'underline', 'blink', 'reverse', 'hidden', 'strikethrough')

FILL = 'fill'
AUTO = 'auto'

SizeValue = Optional[Union[int, str]]


@dataclass(frozen=True)
class Sides:
    """A 4-sided box-model record (padding or margin)."""
    top: int = 0
    right: int = 0
    bottom: int = 0
    left: int = 0

    @property
    def horizontal(self) -> int:
        return self.left + self.right

    @property
    def vertical(self) -> int:
        return self.top + self.bottom

    @classmethod
    def parse(cls, value) -> 'Sides':
        """Parse a box value into concrete 4-sided form.

        Accepts an int (all sides), a 1-4 item sequence in CSS shorthand order,
        a mapping with top/right/bottom/left keys, or an existing Sides.
        Negative or unparseable entries are clamped to 0.
        """
        if isinstance(value, Sides):
            return cls(*(_non_negative(v, 'box side') for v in
                         (value.top, value.right, value.bottom, value.left)))
        if value is None:
            return cls()
        if isinstance(value, bool):
            logger.warning("Ignoring boolean box value %r", value)
            return cls()
        if isinstance(value, int):
            v = _non_negative(value, 'box side')
            return cls(v, v, v, v)
        if isinstance(value, dict):
            return cls(
                _non_negative(value.get('top', 0), 'box side'),
                _non_negative(value.get('right', 0), 'box side'),
                _non_negative(value.get('bottom', 0), 'box side'),
                _non_negative(value.get('left', 0), 'box side'),
            )
        if isinstance(value, (list, tuple)) and value:
            vals = [_non_negative(v, 'box side') for v in value[:4]]
            match len(vals):
                case 1:
                    return cls(vals[0], vals[0], vals[0], vals[0])
                case 2:
                    return cls(vals[0], vals[1], vals[0], vals[1])
                case 3:
                    return cls(vals[0], vals[1], vals[2], vals[1])
                case _:
                    return cls(*vals)
        logger.warning("Unrecognized box value %r, using 0", value)
        return cls()


def _non_negative(value, what: str) -> int:
    """Coerce to a non-negative int, clamping bad input to 0."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid %s %r, using 0", what, value)
        return 0
    if number < 0:
        logger.warning("Negative %s %r clamped to 0", what, value)
        return 0
    return number


def _coerce_enum(enum_cls, value, default):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.replace('_', '-').lower())
        except ValueError:
            pass
    logger.warning("Unrecognized %s %r, using %s", enum_cls.__name__, value, default.value)
    return default


def _coerce_color(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        name = value.lower()
        base = name[len('bright_'):] if name.startswith('bright_') else name
        if base in COLORS:
            return name
    logger.warning("Unrecognized color %r, ignoring", value)
    return None


def _coerce_emphasis(value) -> Tuple[str, ...]:
    if value is None:
        return ()
    names = (value,) if isinstance(value, str) else tuple(value)
    result = []
    for name in names:
        if name in EMPHASIS:
            if name not in result:
                result.append(name)
        else:
            logger.warning("Unrecognized emphasis %r, ignoring", name)
    return tuple(result)


def _coerce_size(value) -> SizeValue:
    if value is None or value == FILL:
        return value
    if isinstance(value, bool):
        logger.warning("Invalid size %r, using auto", value)
        return None
    if isinstance(value, int):
        return _non_negative(value, 'size')
    if isinstance(value, float):
        return _non_negative(value, 'size')
    if isinstance(value, str) and value.endswith('%'):
        try:
            percent = float(value[:-1])
        except ValueError:
            percent = None
        if percent is not None and percent >= 0:
            return value
    logger.warning("Invalid size %r, using auto", value)
    return None


def _coerce_max(value) -> Optional[int]:
    return None if value is None else _non_negative(value, 'max size')


def _coerce_factor(value, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid flex factor %r, using %s", value, default)
        return default
    if number < 0 or math.isnan(number):
        logger.warning("Negative flex factor %r clamped to 0", value)
        return 0.0
    return number


def _coerce_basis(value):
    if value == AUTO:
        return AUTO
    if isinstance(value, int) and not isinstance(value, bool):
        return _non_negative(value, 'flex basis')
    logger.warning("Invalid flex basis %r, using auto", value)
    return AUTO


def _coerce_thickness(value) -> int:
    number = _non_negative(value, 'border thickness')
    return min(max(number, 1), 2)


_COERCE = {
    'fg': _coerce_color,
    'bg': _coerce_color,
    'border_color': _coerce_color,
    'emphasis': _coerce_emphasis,
    'padding': Sides.parse,
    'margin': Sides.parse,
    'border': bool,
    'border_style': lambda v: _coerce_enum(BorderStyle, v, BorderStyle.SINGLE),
    'border_thickness': _coerce_thickness,
    'border_radius': bool,
    'width': _coerce_size,
    'height': _coerce_size,
    'min_width': lambda v: _non_negative(v, 'min size'),
    'min_height': lambda v: _non_negative(v, 'min size'),
    'max_width': _coerce_max,
    'max_height': _coerce_max,
    'display': lambda v: _coerce_enum(Display, v, Display.BLOCK),
    'flex_direction': lambda v: _coerce_enum(FlexDirection, v, FlexDirection.ROW),
    'justify_content': lambda v: _coerce_enum(JustifyContent, v, JustifyContent.FLEX_START),
    'align_items': lambda v: _coerce_enum(AlignItems, v, AlignItems.STRETCH),
    'flex_grow': lambda v: _coerce_factor(v, 0.0),
    'flex_shrink': lambda v: _coerce_factor(v, 1.0),
    'flex_basis': _coerce_basis,
}


@dataclass(frozen=True)
class Style:
    """Visual and layout attributes for one node.

    Every field defaults to UNSET. Values passed in are normalised on
    construction: box values become Sides, enum strings become enum members,
    and invalid values are clamped to a safe default with a logged warning.

    Attributes:
        fg, bg: Foreground/background color names ('red', 'bright_blue', ...)
        emphasis: Tuple of emphasis names ('bold', 'underline', ...)
        padding, margin: Sides records
        border: Whether a border is drawn (and a 1-cell inset reserved)
        border_style: BorderStyle variant for the outline glyphs
        border_thickness: 1 or 2; 2 selects the thick glyph set
        border_radius: Round the corners of a single border
        border_color: Border color, falls back to fg
        width, height: int cells, 'N%' of the available size, 'fill', or None (auto)
        min_width, min_height, max_width, max_height: Size clamps
        display: Display.BLOCK stacks children, Display.FLEX uses flexbox
        flex_direction, justify_content, align_items: Flex container settings
        flex_grow, flex_shrink, flex_basis: Flex item settings
    """
    fg: object = UNSET
    bg: object = UNSET
    emphasis: object = UNSET
    padding: object = UNSET
    margin: object = UNSET
    border: object = UNSET
    border_style: object = UNSET
    border_thickness: object = UNSET
    border_radius: object = UNSET
    border_color: object = UNSET
    width: object = UNSET
    height: object = UNSET
    min_width: object = UNSET
    min_height: object = UNSET
    max_width: object = UNSET
    max_height: object = UNSET
    display: object = UNSET
    flex_direction: object = UNSET
    justify_content: object = UNSET
    align_items: object = UNSET
    flex_grow: object = UNSET
    flex_shrink: object = UNSET
    flex_basis: object = UNSET

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not UNSET:
                object.__setattr__(self, f.name, _COERCE[f.name](value))

    def is_set(self, name: str) -> bool:
        """Return True if the field was explicitly given a value."""
        return getattr(self, name) is not UNSET

    def set_fields(self) -> dict:
        """Return a dict of only the explicitly set fields."""
        return {f.name: getattr(self, f.name) for f in fields(self)
                if getattr(self, f.name) is not UNSET}

    def with_(self, **overrides) -> 'Style':
        """Return a copy with the given fields overridden."""
        return replace(self, **overrides)

    def merge(self, own: Optional['Style']) -> 'Style':
        """Cascade ``own`` over this style; see :func:`merge`."""
        return merge(self, own)

    def resolved(self) -> 'Style':
        """Return a copy with every UNSET field filled from DEFAULT_STYLE."""
        return merge(DEFAULT_STYLE, self)


DEFAULT_STYLE = Style(
    fg=None,
    bg=None,
    emphasis=(),
    padding=0,
    margin=0,
    border=False,
    border_style=BorderStyle.SINGLE,
    border_thickness=1,
    border_radius=False,
    border_color=None,
    width=None,
    height=None,
    min_width=0,
    min_height=0,
    max_width=None,
    max_height=None,
    display=Display.BLOCK,
    flex_direction=FlexDirection.ROW,
    justify_content=JustifyContent.FLEX_START,
    align_items=AlignItems.STRETCH,
    flex_grow=0.0,
    flex_shrink=1.0,
    flex_basis=AUTO,
)


def merge(parent_computed: Style, own: Optional[Style]) -> Style:
    """Cascade a node's own style over its parent's computed style.

    Fields set on ``own`` win; fields left UNSET inherit the parent's value.
    Falsy values (False, 0, None) count as set.

    Args:
        parent_computed: The parent's resolved style
        own: The node's own style, or None

    Returns:
        A new Style
    """
    if own is None:
        return parent_computed
    overrides = own.set_fields()
    if not overrides:
        return parent_computed
    return replace(parent_computed, **overrides)


def resolve_length(value: SizeValue, available: float) -> Optional[int]:
    """Resolve a width/height value against the available size.

    Args:
        value: int cells, 'N%', 'fill', or None/UNSET for auto
        available: Available cells; may be math.inf while measuring

    Returns:
        Size in cells, or None when the value is auto or depends on an
        unbounded container.
    """
    if value is None or value is UNSET:
        return None
    if isinstance(value, int):
        return value
    if math.isinf(available):
        return None
    if value == FILL:
        return max(int(available), 0)
    if isinstance(value, str) and value.endswith('%'):
        return max(int(available * float(value[:-1]) / 100), 0)
    return None


def emphasis_names(value: Union[str, Iterable[str], None]) -> Tuple[str, ...]:
    """Normalise an emphasis argument the way Style does."""
    return _coerce_emphasis(value)
