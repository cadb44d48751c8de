"""
Runtime configuration.

Values come from the environment (a .env file is loaded if present).
Constructor arguments elsewhere always win over these defaults.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Canonical language: default display language and resolution fallback
CANONICAL_LANGUAGE = os.getenv("LIFELINE_LANGUAGE", "javascript")

# Persistence keys
NAV_KEY = os.getenv("LIFELINE_NAV_KEY", "tl_state")
LANG_KEY = os.getenv("LIFELINE_LANG_KEY", "tl_lang")

STATE_FILE = os.getenv(
    "LIFELINE_STATE_FILE",
    os.path.join(os.path.expanduser("~"), ".lifeline", "state.json"),
)

LOG_LEVEL = os.getenv("LIFELINE_LOG_LEVEL", "WARNING").upper()
