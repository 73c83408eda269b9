"""Browser tests against the documentation site."""
