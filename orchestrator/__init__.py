"""
Orchestration package for coordinating the migration pipeline.

Every post is transformed, localized, has its assets fetched and is written
to its own directory; the report summarizes the run.
"""

from .migration_orchestrator import MigrationOrchestrator
from .migration_report import MigrationReport

__all__ = [
    'MigrationOrchestrator',
    'MigrationReport'
]
