"""
Tests for ingredient amount parsing, scaling and fraction display.
"""

import pytest

from services.scaling import (
    parse_fraction, parse_number, parse_ingredient, format_as_fraction,
    scale_ingredient, scale_ingredient_entry, get_scale_label,
)


@pytest.mark.parametrize('text, expected', [
    ('2 1/2', 2.5),
    ('2¾', 2.75),
    ('1/4', 0.25),
    ('¾', 0.75),
    ('3.5', 3.5),
    ('.5', 0.5),
    ('a pinch', 0),
])
def test_parse_number(text, expected):
    assert parse_number(text) == expected


def test_parse_fraction_handles_unlisted_fractions():
    assert parse_fraction('5/6') == 0.83
    assert parse_fraction('1/0') == 0


@pytest.mark.parametrize('num, expected', [
    (2, '2'),
    (1.5, '1½'),
    (0.125, '⅛'),
    (0.333, '⅓'),
    (2.25, '2¼'),
    (1.07, '1.07'),
])
def test_format_as_fraction(num, expected):
    assert format_as_fraction(num) == expected


def test_parse_ingredient_line():
    parsed = parse_ingredient('2 cups flour')
    assert parsed['amounts'] == [2.0]
    assert parsed['unit'] == 'cups'
    assert parsed['ingredient'] == 'flour'
    assert parsed['parseable'] is True


def test_parse_ingredient_range():
    parsed = parse_ingredient('1-2 tbsp olive oil')
    assert parsed['amounts'] == [1.0, 2.0]
    assert parsed['unit'] == 'tbsp'
    assert scale_ingredient(parsed, 2) == '2-4 tbsp olive oil'


def test_unparseable_ingredient_is_kept():
    parsed = parse_ingredient('salt to taste')
    assert parsed['parseable'] is False
    assert scale_ingredient(parsed, 3) == 'salt to taste'


def test_scale_ingredient_entry():
    scaled = scale_ingredient_entry({'amount': 0.5, 'unit': 'cup', 'name': 'milk'}, 3)
    assert scaled['amount'] == 1.5
    assert scaled['displayAmount'] == '1½'

    untouched = scale_ingredient_entry({'amount': None, 'unit': None, 'name': 'salt'}, 3)
    assert untouched == {'amount': None, 'unit': None, 'name': 'salt'}


@pytest.mark.parametrize('scale, label', [
    (1, '1x (Original)'),
    (0.5, '½x'),
    (2, '2x'),
    (1.5, '1.5x'),
])
def test_scale_labels(scale, label):
    assert get_scale_label(scale) == label
