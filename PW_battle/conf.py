from django.conf import settings
from django.utils.module_loading import import_string

# Override any of these through the PW_BATTLE dict in settings.
DEFAULTS = {
    "TRIAL_COUNT": 100,        # battles per simulate request
    "SESSION_TTL": 3600,       # seconds a battle session stays guessable
    "MAX_WORKERS": 4,          # trial worker threads per request
    "SIMULATION_TIMEOUT": 30.0,
    "DEFAULT_LEVEL": 50,
    "DEFAULT_GENERATION": 9,
    "EXECUTOR": "PW_battle.engine.battle.DuelExecutor",
}


def engine_setting(name: str):
    # read on every call so test overrides take effect
    user = getattr(settings, "PW_BATTLE", None) or {}
    if name in user:
        return user[name]
    return DEFAULTS[name]


def get_executor():
    executor_cls = import_string(engine_setting("EXECUTOR"))
    return executor_cls()
