"""Schema migration runner for agentic-kit.

Applies version-numbered ``.sql`` files in filename order, one transaction
per file, tracking applied versions in ``schema_migrations``.

Modules
-------
runner    MigrationRunner class with apply_pending() / status()
"""

from agentic_kit.core.migrations.runner import (
    MigrationRecord,
    MigrationResult,
    MigrationRunner,
    MigrationStatus,
)

__all__ = ["MigrationRecord", "MigrationResult", "MigrationRunner", "MigrationStatus"]
