"""FastAPI backend hosting a single fishing session."""
