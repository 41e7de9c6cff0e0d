import os
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

# Origin shared by the agent and every application instance it relays to
RELAY_ORIGIN = os.getenv("RELAY_ORIGIN", "http://localhost:3000").rstrip("/")

# Fallback icon/badge for notifications that don't name one
DEFAULT_ICON = os.getenv("RELAY_DEFAULT_ICON", "/favicon.ico")

# Confirmation notification auto-close delay
CONFIRMATION_CLOSE_MS = int(os.getenv("RELAY_CONFIRMATION_CLOSE_MS", "3000"))

# Host window manager (unset = opening windows is unsupported)
WINDOW_MANAGER_URL = os.getenv("RELAY_WINDOW_MANAGER_URL")
WINDOW_MANAGER_TIMEOUT = float(os.getenv("RELAY_WINDOW_MANAGER_TIMEOUT", "10.0"))

# CORS
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("RELAY_ALLOWED_ORIGINS", "*").split(",")
    if origin.strip()
]
