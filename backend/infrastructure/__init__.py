"""Infrastructure layer: persistence, caching, remote clients and background jobs."""
