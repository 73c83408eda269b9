"""Browser-free tests of the framework and tooling."""
