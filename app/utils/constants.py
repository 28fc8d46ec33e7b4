"""Application-wide constants."""

# API Configuration
API_VERSION = "v1"
API_PREFIX = f"/api/{API_VERSION}"

# Search input limits
MIN_RADIUS_KM = 1
MAX_RADIUS_KM = 100
MAX_CITY_LENGTH = 200
MAX_BUSINESS_TYPE_LENGTH = 100

# Distance
EARTH_RADIUS_KM = 6371

# Result cache
CACHE_TTL_MINUTES = 15
CACHE_RETENTION_HOURS = 24  # Sweep horizon, also the sweep interval

# Rate limiting (per originating address)
RATE_LIMIT_WINDOW_SECONDS = 60
RATE_LIMIT_MAX_REQUESTS = 10

# Trial quota
DEFAULT_TRIAL_SEARCHES = 3

# Abuse prevention
SUSPICIOUS_IP_ACCOUNT_THRESHOLD = 3  # More accounts than this from one address is suspicious
ACTIVE_USER_WINDOW_DAYS = 30

# Admin listings
MAX_ADMIN_SEARCHES = 500
RECENT_SEARCHES_LIMIT = 10
TOP_BREAKDOWN_LIMIT = 5

# Pagination defaults
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Places "type" values offered to clients, with display labels
BUSINESS_TYPE_LABELS = {
    "restaurant": "Restaurants",
    "gas_station": "Gas Stations",
    "hospital": "Hospitals",
    "pharmacy": "Pharmacies",
    "bank": "Banks",
    "atm": "ATMs",
    "supermarket": "Supermarkets",
    "shopping_mall": "Shopping Malls",
    "hotel": "Hotels",
    "school": "Schools",
    "gym": "Gyms",
    "beauty_salon": "Beauty Salons",
    "car_repair": "Car Repair Shops",
    "dentist": "Dentists",
    "lawyer": "Lawyers",
    "real_estate_agency": "Real Estate Agencies",
    "tourist_attraction": "Tourist Attractions",
}
