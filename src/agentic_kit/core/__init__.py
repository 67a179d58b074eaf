"""Core primitives: configuration, errors, logging, shell, migrations."""
