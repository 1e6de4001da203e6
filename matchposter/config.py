import logging
import os

from dotenv import load_dotenv

load_dotenv()

# API Keys and Config - loaded from .env
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-image")
GENERATOR_BACKEND_URL = os.getenv("GENERATOR_BACKEND_URL")

# Background generation rate limiting (seconds)
MIN_REQUEST_INTERVAL = float(os.getenv("MIN_REQUEST_INTERVAL", "2.0"))
MAX_RATE_LIMIT_RETRIES = int(os.getenv("MAX_RATE_LIMIT_RETRIES", "3"))
BACKOFF_BASE = float(os.getenv("BACKOFF_BASE", "5.0"))
BACKOFF_CAP = float(os.getenv("BACKOFF_CAP", "60.0"))
MAX_RETRY_WAIT = float(os.getenv("MAX_RETRY_WAIT", "120.0"))

# Image loading
IMAGE_PROXY_URL = os.getenv("IMAGE_PROXY_URL", "https://wsrv.nl/?url=")
IMAGE_TIMEOUT = int(os.getenv("IMAGE_TIMEOUT", "10"))

# Poster surface
POSTER_WIDTH = int(os.getenv("POSTER_WIDTH", "1080"))
POSTER_HEIGHT = int(os.getenv("POSTER_HEIGHT", "1920"))
POSTER_JPEG_QUALITY = int(os.getenv("POSTER_JPEG_QUALITY", "95"))
PREVIEW_WIDTH = int(os.getenv("PREVIEW_WIDTH", "270"))
FONT_CANDIDATES = [
    f.strip()
    for f in os.getenv("FONT_CANDIDATES", "Montserrat-Regular.ttf,DejaVuSans.ttf").split(",")
    if f.strip()
]

# Storage (S3 + DynamoDB)
POSTER_BUCKET = os.getenv("POSTER_BUCKET", "match-posters")
POSTER_TABLE = os.getenv("POSTER_TABLE", "match-posters")
POSTER_OWNER_INDEX = os.getenv("POSTER_OWNER_INDEX", "owner-match-date-index")
AWS_REGION = os.getenv("AWS_REGION", "eu-west-3")

# Branding defaults
BRAND_NAME = os.getenv("BRAND_NAME", "All Sports")
DEFAULT_BACKGROUND_URL = os.getenv(
    "DEFAULT_BACKGROUND_URL",
    "https://all-sports.co/app/img/bg/foot/standard/bg-standard-1.jpg",
)
DEFAULT_OWNER_LOGO_URL = os.getenv(
    "DEFAULT_OWNER_LOGO_URL",
    "https://all-sports.co/app/img/Allsports-logo.png",
)
DEFAULT_OWNER_ADDRESS = os.getenv("DEFAULT_OWNER_ADDRESS", "123 Sport Ave, Paris")

# Program mode eligibility (fixtures sharing one date)
PROGRAM_MIN_FIXTURES = int(os.getenv("PROGRAM_MIN_FIXTURES", "2"))
PROGRAM_MAX_FIXTURES = int(os.getenv("PROGRAM_MAX_FIXTURES", "5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging() -> None:
    """Set the root log level (Lambda installs its own handler)."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    root.setLevel(LOG_LEVEL.upper())
