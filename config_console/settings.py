"""
Console settings.
All environment variables are read via python-decouple.
"""
from pathlib import Path

from decouple import config

SERVER_URL = config("CONFIG_SERVER_URL", default="http://localhost:8000/api/v1")

#: Seconds before an HTTP call to the config server is abandoned.
TIMEOUT = config("CONFIG_CONSOLE_TIMEOUT", default=10.0, cast=float)

SESSION_FILE = Path(
    config(
        "CONFIG_CONSOLE_SESSION_FILE",
        default=str(Path.home() / ".config-console" / "session.json"),
    )
)

#: Quiescence window for inline value edits, in seconds.
EDIT_DELAY = config("CONFIG_CONSOLE_EDIT_DELAY", default=0.5, cast=float)
