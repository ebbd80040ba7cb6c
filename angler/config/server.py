"""Server configuration constants."""

DEFAULT_API_PORT = 8000  # Default port for FastAPI backend
DEFAULT_DATA_DIR = "data/profiles"
DEFAULT_PROFILE_ID = "default"
WEBSOCKET_UPDATE_INTERVAL = 2  # Broadcast every N frames
