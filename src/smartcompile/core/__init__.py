"""Core domain types shared across the workbench.

This package contains the closed language set and the starter templates
used to seed the editor whenever a language is selected.
"""

from .languages import LANGUAGE_LABELS, Language, default_template

__all__ = ["Language", "LANGUAGE_LABELS", "default_template"]
