"""
Feature Flags Service

Boolean switches read from app config, overridable per deployment with
FEATURE_<NAME>=true environment variables.
"""

import os

from flask import current_app


def get_feature_flags():
    """Return all flags with environment overrides applied."""
    defaults = current_app.config.get('FEATURE_FLAGS', {})
    flags = {}
    for name, default in defaults.items():
        override = os.environ.get(f'FEATURE_{name.upper()}')
        flags[name] = override.lower() == 'true' if override is not None else bool(default)
    return flags


def is_feature_enabled(name):
    """True if the named flag is on."""
    return get_feature_flags().get(name, False)


def payments_enabled():
    return is_feature_enabled('enable_payments')
