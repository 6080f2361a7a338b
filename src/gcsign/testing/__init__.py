"""Test support for code that signs Cloud Storage requests."""
