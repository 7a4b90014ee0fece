"""Tests for Style, Sides and the style cascade."""

import logging
import math

import pytest
from term_flexbox import UNSET, AlignItems, BorderStyle, Display, JustifyContent, Sides, Style, merge
from term_flexbox.style import DEFAULT_STYLE, FILL, resolve_length


class TestSides:
    """Tests for box-model parsing."""

    def test_int_applies_to_all_sides(self):
        """Test that a single int sets every side."""
        assert Sides.parse(2) == Sides(2, 2, 2, 2)

    def test_two_values(self):
        """Test vertical/horizontal shorthand."""
        assert Sides.parse([1, 3]) == Sides(1, 3, 1, 3)

    def test_three_values(self):
        """Test top/horizontal/bottom shorthand."""
        assert Sides.parse((1, 2, 3)) == Sides(1, 2, 3, 2)

    def test_four_values(self):
        """Test explicit top/right/bottom/left."""
        assert Sides.parse([1, 2, 3, 4]) == Sides(1, 2, 3, 4)

    def test_dict_with_missing_keys(self):
        """Test that missing dict keys default to 0."""
        assert Sides.parse({'top': 1, 'left': 5}) == Sides(1, 0, 0, 5)

    def test_negative_values_clamped(self, caplog):
        """Test that negative sides are clamped to 0 with a warning."""
        with caplog.at_level(logging.WARNING, logger='term_flexbox.style'):
            assert Sides.parse([-1, 2]) == Sides(0, 2, 0, 2)
        assert 'clamped' in caplog.text

    def test_garbage_is_zero(self):
        """Test that unparseable values become all zeros."""
        assert Sides.parse('wide') == Sides()

    def test_horizontal_and_vertical_totals(self):
        """Test convenience totals."""
        sides = Sides(1, 2, 3, 4)
        assert sides.horizontal == 6
        assert sides.vertical == 4


class TestStyle:
    """Tests for Style construction and normalisation."""

    def test_fields_default_to_unset(self):
        """Test that a bare Style has nothing set."""
        style = Style()
        assert style.border is UNSET
        assert style.width is UNSET
        assert not style.is_set('fg')
        assert style.set_fields() == {}

    def test_falsy_values_count_as_set(self):
        """Test that False and 0 are distinct from UNSET."""
        style = Style(border=False, flex_grow=0)
        assert style.is_set('border')
        assert style.border is False
        assert style.flex_grow == 0

    def test_box_values_normalised(self):
        """Test that padding and margin become Sides."""
        style = Style(padding=1, margin=[0, 2])
        assert style.padding == Sides(1, 1, 1, 1)
        assert style.margin == Sides(0, 2, 0, 2)

    def test_enum_strings_accepted(self):
        """Test that enum fields accept strings with dashes or underscores."""
        style = Style(display='flex', justify_content='space_between',
                      align_items='center', border_style='double')
        assert style.display is Display.FLEX
        assert style.justify_content is JustifyContent.SPACE_BETWEEN
        assert style.align_items is AlignItems.CENTER
        assert style.border_style is BorderStyle.DOUBLE

    def test_unknown_enum_value_falls_back(self, caplog):
        """Test that an unrecognized enum value is replaced by its default."""
        with caplog.at_level(logging.WARNING, logger='term_flexbox.style'):
            style = Style(justify_content='sideways')
        assert style.justify_content is JustifyContent.FLEX_START
        assert 'sideways' in caplog.text

    def test_negative_flex_grow_clamped(self):
        """Test that flex-grow is never negative."""
        assert Style(flex_grow=-3).flex_grow == 0

    def test_negative_size_clamped(self):
        """Test that negative sizes clamp to 0."""
        assert Style(width=-5).width == 0
        assert Style(min_height=-1).min_height == 0

    def test_size_forms(self):
        """Test absolute, percentage, fill and auto sizes."""
        assert Style(width=12).width == 12
        assert Style(width='50%').width == '50%'
        assert Style(height=FILL).height == FILL
        assert Style(width=None).width is None

    def test_invalid_size_becomes_auto(self):
        """Test that an unparseable size becomes auto."""
        assert Style(width='lots').width is None

    def test_colors(self):
        """Test named and bright colors, and rejection of unknown names."""
        assert Style(fg='red').fg == 'red'
        assert Style(bg='bright_cyan').bg == 'bright_cyan'
        assert Style(fg='purple').fg is None

    def test_emphasis_normalised_to_tuple(self):
        """Test that emphasis accepts a name or a list of names."""
        assert Style(emphasis='bold').emphasis == ('bold',)
        assert Style(emphasis=['bold', 'sparkle', 'underline']).emphasis == ('bold', 'underline')

    def test_border_thickness_clamped(self):
        """Test that border thickness stays within 1..2."""
        assert Style(border_thickness=0).border_thickness == 1
        assert Style(border_thickness=7).border_thickness == 2

    def test_flex_basis(self):
        """Test flex-basis accepts ints and 'auto'."""
        assert Style(flex_basis=10).flex_basis == 10
        assert Style(flex_basis='auto').flex_basis == 'auto'
        assert Style(flex_basis='big').flex_basis == 'auto'

    def test_unknown_field_rejected(self):
        """Test that misspelled option names are caught."""
        with pytest.raises(TypeError):
            Style(colour='red')

    def test_with_overrides(self):
        """Test that with_() returns a modified copy."""
        base = Style(fg='red')
        derived = base.with_(bg='blue')
        assert derived.fg == 'red'
        assert derived.bg == 'blue'
        assert base.bg is UNSET


class TestMerge:
    """Tests for the style cascade."""

    def test_unset_fields_inherit(self):
        """Test that unset fields take the parent's value."""
        parent = DEFAULT_STYLE.with_(fg='green', border=True)
        computed = merge(parent, Style(bg='black'))
        assert computed.fg == 'green'
        assert computed.border is True
        assert computed.bg == 'black'

    def test_explicit_false_overrides_inherited_true(self):
        """Test that an explicit border=False beats an inherited border."""
        parent = DEFAULT_STYLE.with_(border=True)
        assert merge(parent, Style(border=False)).border is False

    def test_explicit_zero_overrides(self):
        """Test that padding=0 beats inherited padding."""
        parent = DEFAULT_STYLE.with_(padding=2)
        assert merge(parent, Style(padding=0)).padding == Sides()

    def test_none_own_style(self):
        """Test merging with no own style returns the parent's values."""
        parent = DEFAULT_STYLE.with_(fg='red')
        assert merge(parent, None) == parent

    def test_method_form(self):
        """Test Style.merge delegates to merge()."""
        parent = DEFAULT_STYLE.with_(fg='red')
        assert parent.merge(Style(fg='blue')).fg == 'blue'

    def test_resolved_fills_defaults(self):
        """Test that resolved() leaves no field UNSET."""
        resolved = Style(fg='red').resolved()
        assert resolved.fg == 'red'
        assert all(resolved.is_set(name) for name in DEFAULT_STYLE.set_fields())
        assert resolved.display is Display.BLOCK
        assert resolved.align_items is AlignItems.STRETCH
        assert resolved.flex_shrink == 1


class TestResolveLength:
    """Tests for size resolution."""

    def test_absolute(self):
        """Test that cell counts are returned unchanged."""
        assert resolve_length(10, 80) == 10

    def test_percentage(self):
        """Test that percentages are floored against the available size."""
        assert resolve_length('50%', 80) == 40
        assert resolve_length('33%', 10) == 3

    def test_fill(self):
        """Test that fill takes the whole available size."""
        assert resolve_length(FILL, 80) == 80

    def test_auto(self):
        """Test that auto sizes resolve to None."""
        assert resolve_length(None, 80) is None
        assert resolve_length(UNSET, 80) is None

    def test_unbounded_available(self):
        """Test that relative sizes are auto while measuring."""
        assert resolve_length('50%', math.inf) is None
        assert resolve_length(FILL, math.inf) is None
        assert resolve_length(7, math.inf) == 7
