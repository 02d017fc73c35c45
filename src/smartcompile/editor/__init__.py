"""Code editor widget and syntax highlighting."""
