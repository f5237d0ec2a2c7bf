import os


def get_settings_module() -> str:
    # Environment comes from APP_ENV, 'development' by default
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "bunk_tracker.config.production"

    if env in {"test", "testing"}:
        return "bunk_tracker.config.testing"

    return "bunk_tracker.config.development"
