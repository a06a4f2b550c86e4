"""Command-line interface for genage-eda."""
