"""Default chart geometry and user-facing messages."""

from weatherdeck.config.schema import ChartGeometry, ChartsConfig

HOURLY_GEOMETRY: ChartGeometry = ChartsConfig().hourly
DAILY_GEOMETRY: ChartGeometry = ChartsConfig().daily

CITY_SEARCH_FAILED = "City not found or API error. Please try again."
COORDINATE_SEARCH_FAILED = "Could not fetch weather data for your location."
FORECAST_FAILED = "Could not fetch forecast data."
GEOLOCATION_FAILED = "Geolocation not supported or denied."

API_KEY_ENV = "OPENWEATHER_API_KEY"
