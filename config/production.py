import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "chapelle_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "/var/lib/chapelle/uploads")
PHOTO_URL_PREFIX = os.getenv("PHOTO_URL_PREFIX", "/photos")
MAX_PHOTO_BYTES = int(os.getenv("MAX_PHOTO_BYTES", str(5 * 1024 * 1024)))
PHOTO_FETCH_TIMEOUT = float(os.getenv("PHOTO_FETCH_TIMEOUT", "10"))

CHURCH_NAME = os.getenv("CHURCH_NAME", "Chapelle Pleine de Gloire")
