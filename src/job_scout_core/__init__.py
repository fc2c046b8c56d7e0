"""Core models, settings, and interfaces for job-scout."""
