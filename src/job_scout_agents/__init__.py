"""Pipeline agents, tools, observability, and orchestration for job-scout."""
