"""Browser-driven tests, page objects and the framework they share."""
