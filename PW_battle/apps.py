from django.apps import AppConfig

class PWBattleConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "PW_battle"
    verbose_name = "PokeWave battles"
