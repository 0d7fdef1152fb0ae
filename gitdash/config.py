"""
Configuration management for gitdash.

Loads GitHub credentials and display settings from environment variables.
"""

import os
from dotenv import load_dotenv

# Load .env file from project root
load_dotenv()

GITHUB_TOKEN = os.getenv("GITHUB_TOKEN") or os.getenv("GH_TOKEN")
GITHUB_USERNAME = os.getenv("GITHUB_USERNAME")

THEME = os.getenv("GITDASH_THEME", "github-dark")
LOG_LEVEL = os.getenv("GITDASH_LOG_LEVEL", "WARNING").upper()
REQUEST_TIMEOUT = float(os.getenv("GITDASH_TIMEOUT", "10"))


def validate_config():
    """Validate that required configuration is present."""
    missing = []

    if not GITHUB_TOKEN or GITHUB_TOKEN == "your_token_here":
        missing.append("GITHUB_TOKEN")

    if missing:
        raise ValueError(
            f"Missing required configuration: {', '.join(missing)}\n"
            "Set GITHUB_TOKEN (or GH_TOKEN), or copy .env.example to .env and fill in your values.\n"
            "Get a GitHub token at: https://github.com/settings/tokens"
        )
