# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Nothing here is imported by the application.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKBOARD_APP_NAME": "App display name (default: taskboard).",
    "TASKBOARD_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "TASKBOARD_DATA_DIR": "Local data directory for taskboard.log (default: .local/taskboard).",
    # Backend
    "TASKBOARD_API_URL": "Task service base URL, without /api (default: http://localhost:8001).",
    "API_URL": "Fallback for TASKBOARD_API_URL (same name as the web frontend uses).",
    "TASKBOARD_CONNECT_TIMEOUT_SECONDS": "Connect timeout per request (default: 5).",
    "TASKBOARD_READ_TIMEOUT_SECONDS": "Read timeout per request (default: 15).",
    "TASKBOARD_OFFLINE": "Use the in-memory demo backend instead of HTTP (true/false).",
    # View
    "TASKBOARD_DEFAULT_FILTER": "Initial filter tab: all, todo, in_progress, done, cancelled.",
}
