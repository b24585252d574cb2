import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


TMDB_API_KEY = os.getenv("TMDB_API_KEY", "")
TMDB_BASE_URL = os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3")
TMDB_RATE_PER_SEC = float(os.getenv("TMDB_RATE_PER_SEC", "3.0"))
COUNTRY_PRIORITY = os.getenv("AGE_TAGS_COUNTRY_PRIORITY", "FR,US")
HOME_REGION = os.getenv("AGE_TAGS_HOME_REGION", "")
# Dry-run unless explicitly enabled.
ENABLE_WRITE = _env_flag("AGE_TAGS_ENABLE_WRITE")
