"""Supported editor languages and their starter templates."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Language(str, Enum):
    """Languages understood by the execution backend.

    The values are the exact identifiers sent over the wire.
    """

    PYTHON = "python"
    JAVA = "java"
    C = "c"
    CPP = "cpp"

    @classmethod
    def coerce(cls, value: "Language | str") -> "Language":
        """Return ``value`` as a :class:`Language`, raising ``ValueError`` if unknown."""

        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unsupported language '{value}' (expected one of: {choices})") from None


LANGUAGE_LABELS: Mapping[Language, str] = MappingProxyType(
    {
        Language.PYTHON: "Python",
        Language.JAVA: "Java",
        Language.C: "C",
        Language.CPP: "C++",
    }
)

_PYTHON_TEMPLATE = """def calculate_sum(n):
    # This loop calculates the sum of numbers from 1 to n
    total = 0
    for i in range(n + 1):
        total += i
    return total

print(calculate_sum(10))"""

_JAVA_TEMPLATE = """public class Main {
    // Finds the largest element in an array
    public static int findMax(int[] arr) {
        int max = arr[0]; // Assume first element is max
        for (int i = 1; i < arr.length; i++) {
            if (arr[i] > max) {
                max = arr[i]; // Update max if current element is greater
            }
        }
        return max;
    }
    public static void main(String[] args) {
        int[] numbers = {10, 50, 30, 20, 40};
        System.out.println("Max is: " + findMax(numbers));
    }
}"""

_C_TEMPLATE = """#include <stdio.h>

int main() {
    printf("Hello, Smart Compile!\\n");
    return 0;
}"""

# Kept verbatim, including the compile error in ``std.endl``.
_CPP_TEMPLATE = """#include <iostream>

int main() {
    std::cout << "Hello, Smart Compile!" << std.endl;
    return 0;
}"""

_TEMPLATES: Mapping[Language, str] = MappingProxyType(
    {
        Language.PYTHON: _PYTHON_TEMPLATE,
        Language.JAVA: _JAVA_TEMPLATE,
        Language.C: _C_TEMPLATE,
        Language.CPP: _CPP_TEMPLATE,
    }
)


def default_template(language: Language | str) -> str:
    """Return the starter source text for ``language``."""

    return _TEMPLATES[Language.coerce(language)]


__all__ = ["Language", "LANGUAGE_LABELS", "default_template"]
