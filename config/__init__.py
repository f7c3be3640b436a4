import os

_ALIASES = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
    "dev": "config.development",
    "development": "config.development",
}


def get_settings_module() -> str:
    """Dotted path of the settings module to load.

    APP_SETTINGS names a module explicitly (e.g. a deployment-specific one);
    otherwise APP_ENV picks one of the bundled modules, development by default.
    """
    explicit = os.getenv("APP_SETTINGS", "").strip()
    if explicit:
        return explicit

    env = os.getenv("APP_ENV", "development").strip().lower()
    return _ALIASES.get(env, "config.development")
