"""
Configuration file for the Daily Challenge Discord Bot
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _split_csv(value: str) -> list:
    return [part.strip() for part in value.split(",") if part.strip()]


# Bot Configuration
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN")
COMMAND_PREFIX = os.getenv("COMMAND_PREFIX", "!")
BOT_DESCRIPTION = "Daily coding challenge with reviewer-approved submissions and campaigns"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Database Configuration - PostgreSQL
# Checked in main.py so that importing config never fails (tests, scripts)
DATABASE_URL = os.getenv("DATABASE_URL")

# Users listed here are promoted to reviewers when their profile is created
ADMIN_USER_IDS = set(_split_csv(os.getenv("ADMIN_USER_IDS", "")))

# Problem Sources (tried in order on a cache miss)
PROBLEM_SOURCES = _split_csv(os.getenv("PROBLEM_SOURCES", "leetcode,codeforces"))
LEETCODE_PROBLEMS_URL = os.getenv(
    "LEETCODE_PROBLEMS_URL",
    "https://raw.githubusercontent.com/noworneverev/leetcode-api/refs/heads/main/data/leetcode_questions.json"
)
CODEFORCES_API_URL = os.getenv("CODEFORCES_API_URL", "https://codeforces.com/api")

# Timeouts (seconds)
SOURCE_TIMEOUT_SECONDS = float(os.getenv("SOURCE_TIMEOUT_SECONDS", "15"))
SOURCE_MAX_RETRIES = int(os.getenv("SOURCE_MAX_RETRIES", "3"))
SOURCE_RETRY_DELAY = float(os.getenv("SOURCE_RETRY_DELAY", "1.0"))
FETCH_BUDGET_SECONDS = float(os.getenv("FETCH_BUDGET_SECONDS", "45"))

# Submissions
SUPPORTED_LANGUAGES = [
    "python",
    "javascript",
    "typescript",
    "java",
    "cpp",
    "c",
    "csharp",
    "go",
    "rust",
]
MAX_CODE_LENGTH = 20000

# Health server (Render, Railway...)
PORT = int(os.getenv("PORT", "8080"))

# Bot Settings
LEADERBOARD_SIZE = 10
RECENT_SUBMISSIONS_LIMIT = 5
REVIEW_QUEUE_LIMIT = 10

# Embed Colors (in hex)
COLOR_PRIMARY = 0x7289DA  # Discord Blurple
COLOR_SUCCESS = 0x00FF00  # Green
COLOR_ERROR = 0xFF0000    # Red
COLOR_INFO = 0x0099FF     # Blue
COLOR_WARNING = 0xFFAA00  # Orange
