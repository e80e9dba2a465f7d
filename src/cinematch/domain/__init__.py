"""Domain layer for catalog reconciliation."""
