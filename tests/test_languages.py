"""Tests for :mod:`smartcompile.core.languages`."""

from __future__ import annotations

import pytest

from smartcompile.core.languages import LANGUAGE_LABELS, Language, default_template


@pytest.mark.parametrize("language", list(Language))
def test_every_language_has_a_template(language: Language) -> None:
    template = default_template(language)
    assert template
    assert default_template(language) == template


def test_template_lookup_accepts_wire_identifiers() -> None:
    assert default_template("cpp") == default_template(Language.CPP)
    assert default_template(" Java ") == default_template(Language.JAVA)


def test_python_template_is_the_sum_example() -> None:
    template = default_template(Language.PYTHON)
    assert template.startswith("def calculate_sum(n):")
    assert template.endswith("print(calculate_sum(10))")


def test_c_template_keeps_escaped_newline_in_source() -> None:
    assert 'printf("Hello, Smart Compile!\\n");' in default_template(Language.C)


def test_unknown_language_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported language 'rust'"):
        default_template("rust")


def test_language_values_match_backend_identifiers() -> None:
    assert [language.value for language in Language] == ["python", "java", "c", "cpp"]
    assert LANGUAGE_LABELS[Language.CPP] == "C++"
