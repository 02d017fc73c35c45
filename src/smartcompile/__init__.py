"""Smart Compile: a multi-language code workbench backed by a remote execution and review service."""

__version__ = "0.1.0"
