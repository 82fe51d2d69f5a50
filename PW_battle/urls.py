from django.urls import path
from . import views

urlpatterns = [
    path("api/creatures/", views.creature_list, name="creature-list"),

    path("api/battle/simulate/", views.simulate_battle, name="api-battle-simulate"),
    path("api/battle/simulate-single/", views.simulate_single, name="api-battle-simulate-single"),
    path("api/battle/guess/", views.submit_guess, name="api-battle-guess"),
    path("api/battle/<uuid:battle_id>/", views.battle_detail, name="api-battle-detail"),
    path("api/battle/<uuid:battle_id>/stats/", views.battle_stats, name="api-battle-stats"),
]
