# ===== CONFIGURATION & CONSTANTS =====
import os

# --- General Settings ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CACHE_DIR = os.getenv("CACHE_DIR", "cache")
DEFAULT_CACHE_TTL = int(os.getenv("DEFAULT_CACHE_TTL", "86400"))  # 1 day in seconds
DATABASE_PATH = os.getenv("DATABASE_PATH", "data/steamcompass.db")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "6"))
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "2"))
RETRY_INITIAL_DELAY = float(os.getenv("RETRY_INITIAL_DELAY", "1.0"))
LIBRARY_REQUEST_TIMEOUT = float(os.getenv("LIBRARY_REQUEST_TIMEOUT", "25"))

# --- User / Library Settings ---
STEAM_API_KEY = os.getenv("STEAM_API_KEY")
STEAM_ID = os.getenv("STEAM_ID")
USER_ID = os.getenv("USER_ID", STEAM_ID or "local")

# --- Batch & Pacing Settings ---
BATCH_SIZE = int(os.getenv("BATCH_SIZE", "5"))
BATCH_DELAY_MS = int(os.getenv("BATCH_DELAY_MS", "2000"))
# Must cover MAX_RETRIES requests of REQUEST_TIMEOUT plus the backoff between them
SIGNAL_TIMEOUT = float(os.getenv("SIGNAL_TIMEOUT", "15"))
RESOLVER_ATTEMPT_DELAY = float(os.getenv("RESOLVER_ATTEMPT_DELAY", "0.5"))
MIN_CANDIDATE_LENGTH = 3

# --- Web Scraping & API Headers ---
COMMON_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36',
    'Accept-Language': 'en-US,en;q=0.9',
    'Accept': 'application/json, text/plain, */*',
    'Accept-Encoding': 'gzip, deflate, br',
    'Connection': 'keep-alive'
}

# --- Steam Library Source ---
STEAM_OWNED_GAMES_URL = "https://api.steampowered.com/IPlayerService/GetOwnedGames/v1/?key={api_key}&steamid={steam_id}&include_appinfo=1&include_played_free_games=1&format=json"

# --- Steam Reviews Enricher ---
STEAM_REVIEWS_URL = "https://store.steampowered.com/appreviews/{app_id}?json=1&language=all&filter=all&review_type=all&purchase_type=all&num_per_page=0"

# --- Metacritic Enricher ---
METACRITIC_BASE_URL = "https://www.metacritic.com"
METACRITIC_SEARCH_URL = "https://www.metacritic.com/search/{query}/?category=13"

# --- HowLongToBeat Enricher ---
HLTB_BASE_URL = "https://howlongtobeat.com"
HLTB_SEARCH_URL = "https://howlongtobeat.com/api/search"
HLTB_HEADERS = {**COMMON_HEADERS, 'Content-Type': 'application/json', 'Referer': HLTB_BASE_URL, 'Origin': HLTB_BASE_URL}

# --- Star Rating Fallback ---
# Known-franchise defaults used only when no critic, review or user signal exists.
# Checked in order against the lowercased display name.
KNOWN_FRANCHISE_RATINGS = [
    (("elden ring", "witcher 3", "red dead redemption 2"), 4.8),
    (("god of war", "bloodborne", "sekiro"), 4.5),
    (("hollow knight", "celeste", "hades"), 4.4),
    (("horizon", "dark souls", "persona 5"), 4.3),
    (("counter-strike", "dota", "overwatch"), 4.0),
    (("cyberpunk", "assassin", "call of duty"), 3.5),
]

# --- Review Summary Labels ---
# (minimum positive percentage, label); fewer than MIN_REVIEWS_FOR_SUMMARY reviews means no summary.
MIN_REVIEWS_FOR_SUMMARY = 10
REVIEW_SCORE_LABELS = [
    (95, "Overwhelmingly Positive"),
    (80, "Very Positive"),
    (70, "Mostly Positive"),
    (60, "Mixed"),
    (40, "Mostly Negative"),
    (20, "Very Negative"),
    (0, "Overwhelmingly Negative"),
]
