from dotenv import load_dotenv
import os

# Load environment variables
load_dotenv()

# MongoDB
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "sih_db")
USERS_COLLECTION = os.getenv("USERS_COLLECTION", "users")
COLLECTION_NAME = os.getenv("COLLECTION_NAME", "internships")

# Auth
JWT_SECRET = os.getenv("JWT_SECRET", "changeme_secret")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_HOURS = int(os.getenv("JWT_EXPIRE_HOURS", "2"))

# External scoring model
MODEL_URL = os.getenv("MODEL_URL", "http://localhost:8000/recommend")
MODEL_TIMEOUT_SECONDS = float(os.getenv("MODEL_TIMEOUT_SECONDS", "8"))
DEFAULT_MAX_DISTANCE_KM = 150

# Cache lifetimes, in minutes
RECOMMENDATION_TTL_MINUTES = 5
FALLBACK_TTL_MINUTES = 2
INTERNSHIP_PAGE_TTL_MINUTES = 10
INTERNSHIP_DETAIL_TTL_MINUTES = 15
FEATURED_TTL_MINUTES = 30
SEARCH_TTL_MINUTES = 5

# Ranking / paging
PAGE_SIZE = 10
FALLBACK_LIMIT = 10
HYDRATION_WORKERS = int(os.getenv("HYDRATION_WORKERS", "8"))
NEARBY_MINIMUM = 5

PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
