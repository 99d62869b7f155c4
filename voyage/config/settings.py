"""
Ustawienia główne aplikacji.

Zawiera adresy usług zewnętrznych, domyślne wartości i konfigurację systemową.
Wszystkie wartości można nadpisać przez zmienne środowiskowe.
"""

import os

# === MODEL JĘZYKOWY (PLANY PODRÓŻY) ===
# Klucz API - brak wartości domyślnej, użytkownik podaje go w /api/config
LLM_API_KEY = os.environ.get('LLM_API_KEY', '')

# Adres bazowy API zgodnego z /chat/completions
LLM_BASE_URL = os.environ.get('LLM_BASE_URL', 'https://open.bigmodel.cn/api/paas/v4')

# Identyfikator modelu
LLM_MODEL = os.environ.get('LLM_MODEL', 'glm-4-flash')

LLM_TEMPERATURE = float(os.environ.get('LLM_TEMPERATURE', '0.7'))
LLM_MAX_TOKENS = int(os.environ.get('LLM_MAX_TOKENS', '4000'))

# Timeout zapytania [s]
LLM_TIMEOUT = int(os.environ.get('LLM_TIMEOUT', '60'))

# === ROUTING (OPENROUTESERVICE) ===
ORS_API_KEY = os.environ.get('ORS_API_KEY', '')
ORS_BASE_URL = os.environ.get('ORS_BASE_URL', 'https://api.openrouteservice.org/v2')

# Profil routingu: driving-car, driving-hgv, ...
ROUTING_PROFILE = os.environ.get('ROUTING_PROFILE', 'driving-car')

# Timeout zapytania [s]
ROUTING_TIMEOUT = int(os.environ.get('ROUTING_TIMEOUT', '15'))

# === GEOKODOWANIE (NOMINATIM) ===
NOMINATIM_USER_AGENT = os.environ.get('NOMINATIM_USER_AGENT', 'VoyageAI/1.0')
GEOCODER_TIMEOUT = int(os.environ.get('GEOCODER_TIMEOUT', '15'))

# === TRASA SZACOWANA (GDY ROUTING NIEDOSTĘPNY) ===
# Promień Ziemi [km]
EARTH_RADIUS_KM = 6371

# Współczynnik zamiany odległości w linii prostej na odległość drogową
ROAD_FACTOR = 1.3

# Założona średnia prędkość [km/h]
FALLBACK_SPEED_KMH = 80

# Liczba odcinków linii prostej (punktów = kroki + 1)
FALLBACK_STEPS = 20

# === PLANOWANIE ===
# Preferencje używane przy pierwszym planie (przed rozmową)
DEFAULT_PREFERENCES = os.environ.get('DEFAULT_PREFERENCES', 'General tourism, medium budget')

# Czas wyświetlania komunikatu błędu [s]
ERROR_DISPLAY_SECONDS = int(os.environ.get('ERROR_DISPLAY_SECONDS', '5'))

# === USTAWIENIA HISTORII ===
# Maksymalna liczba zapamiętanych planów na sesję
HISTORY_LIMIT = int(os.environ.get('HISTORY_LIMIT', '10'))
HISTORY_CACHE_DIR = os.environ.get('HISTORY_CACHE_DIR', 'history_cache')

# === USTAWIENIA SESJI ===
# Maksymalny czas życia sesji użytkownika [godziny]
SESSION_MAX_AGE_HOURS = int(os.environ.get('SESSION_MAX_AGE_HOURS', '24'))

# === USTAWIENIA LOGOWANIA ===
# Poziom logowania: DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
LOG_FILE = os.environ.get('LOG_FILE', 'app.log')

# === USTAWIENIA FLASK ===
# Klucz sekretny dla sesji Flask (None = losowy przy starcie)
FLASK_SECRET_KEY = os.environ.get('FLASK_SECRET_KEY')

# Tryb debug
FLASK_DEBUG = os.environ.get('FLASK_DEBUG', 'false').lower() == 'true'

# Host i port
FLASK_HOST = os.environ.get('FLASK_HOST', '0.0.0.0')
FLASK_PORT = int(os.environ.get('FLASK_PORT', '5000'))
