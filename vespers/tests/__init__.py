"""Test suite for the Vespers admin diagnostics.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - Minimal dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Tests for adapter implementations
   - HTTP adapters run against httpx mock transports
   - Validates adapter behavior and error handling

3. fakes/: Port implementations for testing
   - In-memory implementations of every driven and driving port
   - Used by core unit tests
"""
