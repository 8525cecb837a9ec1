"""Fake/mock implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeDatabasePort, FakeStoragePort, FakeAuthPort, FakeEdgeFunctionPort:
  Supabase collaborators with configurable failures
- FakeSyncServicePort: Settable sync status and statistics
- FakeConfigSource, FakeRuntimeCapabilities: Environment probes
- FakeReportPort: Captured reports for assertion
- FakeDiagnosticsPort: Canned diagnostic runs
"""

from .diagnostics import FakeDiagnosticsPort
from .environment import FakeConfigSource, FakeRuntimeCapabilities
from .report import FakeReportPort
from .supabase import (
    FakeAuthPort,
    FakeDatabasePort,
    FakeEdgeFunctionPort,
    FakeStoragePort,
)
from .sync import FakeSyncServicePort

__all__ = [
    "FakeAuthPort",
    "FakeConfigSource",
    "FakeDatabasePort",
    "FakeDiagnosticsPort",
    "FakeEdgeFunctionPort",
    "FakeReportPort",
    "FakeRuntimeCapabilities",
    "FakeStoragePort",
    "FakeSyncServicePort",
]
