from __future__ import annotations

import pytest

from blog2html.transform.layout import CssRegistry, css_class_name, gcd_of, layout_row, reduce_ratio


def test_gcd_of_list_and_degenerate_inputs() -> None:
    assert gcd_of([100, 200, 300]) == 100
    assert gcd_of([7, 13]) == 1
    assert gcd_of([]) == 1
    assert gcd_of([125, 125]) == 125


def test_reduce_ratio() -> None:
    assert reduce_ratio(12, 4) == (3, 1)
    assert reduce_ratio(4, 6) == (2, 3)
    with pytest.raises(ValueError):
        reduce_ratio(1, 0)


def test_single_image_takes_whole_row() -> None:
    (unit,) = layout_row([(100, 100)])
    assert unit.width_share == unit.total_share_in_group == 1
    assert unit.image_count == 1
    assert unit.css_class_name == "scale1-1-1"


def test_double_width_image_gets_double_share() -> None:
    a, b = layout_row([(100, 100), (200, 100)])
    assert (a.width_share, b.width_share) == (1, 2)
    assert a.total_share_in_group == b.total_share_in_group == 3
    assert a.total_share_in_group == a.width_share + b.width_share


def test_scale_invariance() -> None:
    small = layout_row([(300, 200), (150, 100), (400, 300)])
    large = layout_row([(3000, 2000), (1500, 1000), (4000, 3000)])
    odd = layout_row([(36, 24), (18, 12), (48, 36)])
    assert [u.css_class_name for u in small] == [u.css_class_name for u in large]
    assert [u.css_class_name for u in small] == [u.css_class_name for u in odd]
    assert [u.width_share for u in small] == [u.width_share for u in large]


def test_images_are_scaled_to_common_height() -> None:
    # A 200x200 square next to a 200x100 landscape: at height 100 the square
    # is 100 wide and the landscape 200 wide.
    square, landscape = layout_row([(200, 200), (200, 100)])
    assert (square.width_share, landscape.width_share) == (1, 2)
    assert square.total_share_in_group == 3


def test_fractional_ratios_use_common_denominator() -> None:
    # Heights 2 and 3 at min height 2: widths 3*2/2=3 and 2*2/3=4/3 -> 9:4.
    a, b = layout_row([(3, 2), (2, 3)])
    assert (a.width_share, b.width_share, a.total_share_in_group) == (9, 4, 13)


def test_css_rule_contents() -> None:
    units = layout_row([(100, 100), (200, 100)])
    css = units[1].css
    assert css.startswith("div.scale2-3-2 {")
    assert "width: calc(2*(100% - 10px) / 3);" in css
    assert "object-fit: contain;" in css


def test_empty_and_invalid_rows() -> None:
    assert layout_row([]) == []
    with pytest.raises(ValueError):
        layout_row([(0, 100)])


def test_css_registry_collapses_identical_rows() -> None:
    registry = CssRegistry()
    for unit in layout_row([(100, 100), (200, 100)]) + layout_row([(50, 50), (100, 50)]):
        registry.register(unit)
    assert registry.class_names == ["scale1-3-2", "scale2-3-2"]
    assert registry.render().count("div.scale") == 2
    assert css_class_name(1, 3, 2) in registry


def test_css_registry_renders_empty_string_without_rules() -> None:
    assert CssRegistry().render() == ""
