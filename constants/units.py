"""
Unit and Fraction Constants

Fraction tables and unit words used when parsing and scaling
ingredient amounts.
"""

# Fraction text -> value, rounded to 2 decimals so scaled output lines up
# with DISPLAY_FRACTIONS below
FRACTION_VALUES = {
    # ASCII fractions
    '1/8': 0.125, '1/4': 0.25, '1/3': 0.33, '1/2': 0.5, '2/3': 0.67,
    '3/4': 0.75, '1/6': 0.17, '1/16': 0.06, '3/8': 0.38, '5/8': 0.63,
    '7/8': 0.88, '1/5': 0.2, '2/5': 0.4, '3/5': 0.6, '4/5': 0.8,
    '1/10': 0.1, '3/10': 0.3, '7/10': 0.7, '9/10': 0.9,
    # Unicode fractions
    '½': 0.5,
    '⅓': 0.33,
    '⅔': 0.67,
    '¼': 0.25,
    '¾': 0.75,
    '⅕': 0.2,
    '⅖': 0.4,
    '⅗': 0.6,
    '⅘': 0.8,
    '⅙': 0.17,
    '⅐': 0.14,
    '⅛': 0.125,
    '⅑': 0.11,
    '⅒': 0.1,
    '⅜': 0.38,
    '⅝': 0.63,
    '⅞': 0.88,
}

# Character class matching any single unicode vulgar fraction
UNICODE_FRACTION_CHARS = '¼-¾⅐-⅞'

# Decimal part -> unicode fraction, preferred when displaying amounts
DISPLAY_FRACTIONS = {
    0.5: '½',
    0.33: '⅓',
    0.67: '⅔',
    0.25: '¼',
    0.75: '¾',
    0.2: '⅕',
    0.4: '⅖',
    0.6: '⅗',
    0.8: '⅘',
    0.17: '⅙',
    0.13: '⅛',   # 0.125 rounds to 0.13 at 2 decimals
    0.38: '⅜',
    0.63: '⅝',
    0.88: '⅞',
}

# Unit words recognised in free-text ingredient lines (longest first so
# "fluid ounces" wins over "ounces")
UNIT_WORDS = sorted([
    'cup', 'cups', 'tsp', 'teaspoon', 'teaspoons', 'tbsp', 'tablespoon', 'tablespoons',
    'oz', 'ounce', 'ounces', 'lb', 'lbs', 'pound', 'pounds', 'g', 'gram', 'grams',
    'kg', 'kilogram', 'kilograms', 'ml', 'milliliter', 'milliliters', 'l', 'liter', 'liters',
    'qt', 'quart', 'quarts', 'pt', 'pint', 'pints', 'gal', 'gallon', 'gallons',
    'fl oz', 'fluid ounce', 'fluid ounces', 'inch', 'inches', 'cm', 'centimeter', 'centimeters',
    'clove', 'cloves', 'slice', 'slices', 'piece', 'pieces', 'large', 'medium', 'small',
    'whole', 'pinch', 'pinches', 'dash', 'dashes', 'can', 'cans', 'package', 'packages',
    'box', 'boxes',
], key=len, reverse=True)
