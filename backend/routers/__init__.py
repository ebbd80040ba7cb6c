"""API routers for the fishing session backend."""
