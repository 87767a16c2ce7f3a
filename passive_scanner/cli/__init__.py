"""Command-line interface for passive-scanner."""
