"""
Test suite for cal-bridge.

This package contains:
- Unit tests for the bridge, models, configuration, and stores
- CLI tests driven through the in-memory backend
- Mocked EventKit tests that work without PyObjC
"""
