"""Browser and output tools used by the agents."""
