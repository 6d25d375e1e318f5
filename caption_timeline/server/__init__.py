"""HTTP API for building caption timelines (FastAPI)."""
