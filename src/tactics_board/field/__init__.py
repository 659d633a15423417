"""Interactive field editing model."""
