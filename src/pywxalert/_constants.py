"""Internal constants shared across the library."""

KMA_BASE_URL = "http://apis.data.go.kr/1360000/VilageFcstInfoService_2.0"
KMA_ULTRA_SHORT_FORECAST = "/getUltraSrtFcst"
KMA_SUCCESS_CODE = "00"
KMA_PAGE_SIZE = 60

#: Ultra-short forecasts for hour HH are published at HH:45.
KMA_PUBLICATION_MINUTE = 45

FCM_BASE_URL = "https://fcm.googleapis.com"

DEFAULT_TIME_ZONE = "Asia/Seoul"
DEFAULT_HTTP_TIMEOUT = 10.0
WEATHER_CACHE_TTL = 300
WEATHER_CACHE_PREFIX = "weather"
SCHEDULER_INTERVAL = 60.0

#: Precipitation probability (percent) at which an umbrella reminder is added.
UMBRELLA_THRESHOLD = 30

# KMA forecast categories
CATEGORY_TEMPERATURE = "T1H"
CATEGORY_HUMIDITY = "REH"
CATEGORY_PRECIPITATION = "RN1"
CATEGORY_WIND_SPEED = "WSD"
CATEGORY_SKY = "SKY"
CATEGORY_PRECIPITATION_TYPE = "PTY"
CATEGORY_PRECIPITATION_PROBABILITY = "POP"

REQUIRED_CATEGORIES: tuple[str, ...] = (CATEGORY_TEMPERATURE, CATEGORY_SKY)
