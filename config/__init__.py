import os

_ENVIRONMENTS = {
    "prod": "production",
    "production": "production",
    "test": "testing",
    "testing": "testing",
    "dev": "development",
    "development": "development",
}


def get_settings_module() -> str:
    # STRATA_SETTINGS names a module outright; otherwise APP_ENV picks one (unknown -> development).
    explicit = os.getenv("STRATA_SETTINGS")
    if explicit:
        return explicit
    env = os.getenv("APP_ENV", "development").strip().lower()
    return f"config.{_ENVIRONMENTS.get(env, 'development')}"
