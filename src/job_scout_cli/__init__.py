"""Command-line interface for job-scout."""
