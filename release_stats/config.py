import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# GitHub API Token (for higher rate limits: 5000/hour vs 60/hour)
# Support for multiple tokens (comma separated) for rotation
GITHUB_TOKENS_STR = os.getenv("GITHUB_TOKENS", "")
if GITHUB_TOKENS_STR:
    GITHUB_TOKENS = [t.strip() for t in GITHUB_TOKENS_STR.split(",") if t.strip()]
else:
    # Fallback to single token
    single_token = os.getenv("GITHUB_TOKEN", "")
    GITHUB_TOKENS = [single_token] if single_token else []

GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")

# Repositories to collect, "owner/repo" comma separated
REPOS_STR = os.getenv("REPOS", "daangn/stackflow,daangn/seed-design")
REPOS = [r.strip() for r in REPOS_STR.split(",") if r.strip()]

# Crawling Configuration
REQUEST_TIMEOUT = 30  # seconds
MAX_RETRIES = 5
BASE_RETRY_DELAY = 1  # seconds (will exponentially backoff)
MAX_RETRY_DELAY = 30  # seconds
MAX_RATE_LIMIT_WAIT = 900  # seconds, cap for X-RateLimit-Reset sleeps
PER_PAGE = 100  # GitHub API max page size

# Stats Configuration
LOCAL_UTC_OFFSET_HOURS = int(os.getenv("LOCAL_UTC_OFFSET_HOURS", 9))
BODY_SNIPPET_LENGTH = 100
TOP_AUTHORS_LIMIT = int(os.getenv("TOP_AUTHORS_LIMIT", 5))

# Output Configuration
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "data")
RAW_DATA_CSV = os.getenv("RAW_DATA_CSV", os.path.join(OUTPUT_DIR, "release_raw_data.csv"))
STATS_CSV = os.getenv("STATS_CSV", os.path.join(OUTPUT_DIR, "release_stats.csv"))

# Database Configuration
DB_URL = os.getenv("DB_URL", "")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_NAME = os.getenv("DB_NAME", "release_stats")
DB_USER = os.getenv("DB_USER", "postgres")
# Do NOT hardcode passwords here -- read from environment variables or secure secret storage.
DB_PASS = os.getenv("DB_PASSWORD", "")
DB_PORT = int(os.getenv("DB_PORT", 5432))
BATCH_SIZE = 100

# Redis Configuration
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))
REPORT_CACHE_TTL = int(os.getenv("REPORT_CACHE_TTL", 3600))  # seconds

# Logging Configuration
LOG_FILE = os.getenv("LOG_FILE", "release_stats.log")
JSON_LOG_FILE = os.getenv("JSON_LOG_FILE", "")
METRICS_PORT = int(os.getenv("METRICS_PORT", 0))
