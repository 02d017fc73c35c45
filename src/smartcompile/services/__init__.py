"""Service layer: backend client and settings persistence."""
