"""
Recipe Scaling Service

Functions for parsing ingredient amounts and scaling recipes up or down,
with display formatting that prefers unicode fractions.
"""

import math
import re

from constants import FRACTION_VALUES, UNICODE_FRACTION_CHARS, DISPLAY_FRACTIONS, UNIT_WORDS

# Number forms: "2 1/2", "1/2", "3", "0.5", ".5"
_NUMBER = r'(\d+(?:\s+\d+/\d+)?|\d+/\d+|\d*\.?\d+)'
_RANGE_PATTERN = re.compile(r'^' + _NUMBER + r'\s*(?:[-–—]|to)\s*' + _NUMBER + r'\s+(.*?)$', re.IGNORECASE)
_SINGLE_PATTERN = re.compile(r'^' + _NUMBER + r'\s+(.*?)$', re.IGNORECASE)
_MIXED_PATTERN = re.compile(r'^(\d+)\s*([' + UNICODE_FRACTION_CHARS + r']|\d+/\d+)$')
_UNICODE_PATTERN = re.compile(r'[' + UNICODE_FRACTION_CHARS + r']')
_UNIT_PATTERN = re.compile(r'\b(' + '|'.join(re.escape(u) for u in UNIT_WORDS) + r')\b', re.IGNORECASE)


def round2(value):
    """Round half up to 2 decimals (round() would bank 0.125 down to 0.12)."""
    return math.floor(value * 100 + 0.5) / 100


def parse_fraction(fraction):
    """
    Convert a fraction string to a decimal.

    Handles the common ASCII and unicode fractions from the lookup table,
    then any other "n/d" form. Returns 0 when it cannot be parsed.
    """
    fraction = fraction.strip()

    if fraction in FRACTION_VALUES:
        return FRACTION_VALUES[fraction]

    parts = fraction.split('/')
    if len(parts) == 2:
        try:
            numerator = int(parts[0])
            denominator = int(parts[1])
        except ValueError:
            return 0
        if denominator != 0:
            return round2(numerator / denominator)

    return 0


def parse_number(text):
    """Parse '2 1/2', '2¾', '1/4', '¾' or '3.5' into a float (0 if unparseable)."""
    text = text.strip()

    mixed = _MIXED_PATTERN.match(text)
    if mixed:
        return round2(int(mixed.group(1)) + parse_fraction(mixed.group(2)))

    if '/' in text or _UNICODE_PATTERN.search(text):
        result = parse_fraction(text)
        return result if result > 0 else 0

    try:
        return round2(float(text))
    except ValueError:
        return 0


def _split_unit(remainder):
    """Pull the first unit word out of the text after the amount."""
    unit_match = _UNIT_PATTERN.search(remainder)
    unit = unit_match.group(0) if unit_match else ''
    ingredient = _UNIT_PATTERN.sub('', remainder, count=1).strip() if unit_match else remainder
    return unit, re.sub(r'\s+', ' ', ingredient)


def parse_ingredient(text):
    """
    Parse free ingredient text like '1-2 cups flour' or '1/2 cup sugar'.

    Returns:
        dict with original, amounts (one or two floats), unit, ingredient
        and parseable. Unparseable text keeps the original as ingredient.
    """
    original = text.strip()

    range_match = _RANGE_PATTERN.match(original)
    if range_match:
        low = parse_number(range_match.group(1))
        high = parse_number(range_match.group(2))
        unit, ingredient = _split_unit(range_match.group(3).strip())
        if low > 0 and high > 0:
            return {'original': original, 'amounts': [low, high], 'unit': unit,
                    'ingredient': ingredient, 'parseable': True}

    single_match = _SINGLE_PATTERN.match(original)
    if single_match:
        amount = parse_number(single_match.group(1))
        unit, ingredient = _split_unit(single_match.group(2).strip())
        if amount > 0:
            return {'original': original, 'amounts': [amount], 'unit': unit,
                    'ingredient': ingredient, 'parseable': True}

    return {'original': original, 'amounts': [], 'unit': '', 'ingredient': original, 'parseable': False}


def _format_decimal(num):
    return f'{num:.2f}'.rstrip('0').rstrip('.')


def format_as_fraction(num):
    """Format an amount for display, preferring unicode fractions (1.5 -> '1½')."""
    num = round2(num)

    if num == int(num):
        return str(int(num))

    if num in DISPLAY_FRACTIONS:
        return DISPLAY_FRACTIONS[num]

    whole = int(math.floor(num))
    fractional = round2(num - whole)
    if fractional in DISPLAY_FRACTIONS:
        symbol = DISPLAY_FRACTIONS[fractional]
        return f'{whole}{symbol}' if whole > 0 else symbol

    return _format_decimal(num)


def scale_ingredient(parsed, multiplier):
    """Render a parsed ingredient scaled by multiplier."""
    if not parsed['parseable'] or not parsed['amounts']:
        return parsed['original']

    amounts = '-'.join(format_as_fraction(amount * multiplier) for amount in parsed['amounts'])
    parts = [amounts]
    if parsed['unit']:
        parts.append(parsed['unit'])
    if parsed['ingredient']:
        parts.append(parsed['ingredient'])
    return ' '.join(parts)


def scale_ingredient_entry(entry, multiplier):
    """Scale a structured ingredient dict ({amount, unit, name}). Missing amounts stay missing."""
    scaled = dict(entry)
    if entry.get('amount') is not None:
        scaled['amount'] = entry['amount'] * multiplier
        scaled['displayAmount'] = format_as_fraction(scaled['amount'])
    return scaled


def scale_ingredients(entries, multiplier):
    if not entries:
        return []
    return [scale_ingredient_entry(entry, multiplier) for entry in entries]


def get_scale_label(scale):
    """Human label for a scale factor: '1x (Original)', '½x', '2x', '1.5x'."""
    if scale == 1:
        return '1x (Original)'
    if scale < 1:
        return f'{format_as_fraction(scale)}x'
    if scale == int(scale):
        return f'{int(scale)}x'
    return f'{scale:.1f}x'
