import threading

import pytest
from django.core.exceptions import ImproperlyConfigured

from PW_battle import catalog, services
from PW_battle.engine.contracts import BattleOptions, CombatantOptions
from PW_battle.engine.rules import Cancelled, UnknownCreature
from PW_battle.models import BattleSession, GuessStat

pytestmark = pytest.mark.django_db


def test_catalog_record_from_fixture(starter_catalog):
    record = catalog.load_creature(25)
    assert record.name == "Pikachu"
    assert record.types == ("electric",)
    assert record.competitive_moves == ("thunderbolt", "irontail", "quickattack", "thunderwave")
    assert record.moves_at_level(10) == ("quickattack", "thunderwave")
    assert catalog.load_move_table()["surf"].power == 90


@pytest.mark.parametrize("creature_id", [9999, "abc", None])
def test_unknown_creature(starter_catalog, creature_id):
    with pytest.raises(UnknownCreature):
        catalog.load_creature(creature_id)


def test_build_combatant_is_seeded(starter_catalog):
    options = CombatantOptions(level=60, with_item=True)
    assert services.build_combatant(6, options, seed=5) == services.build_combatant(6, options, seed=5)


def test_seeded_simulation_is_reproducible(starter_catalog, engine_settings):
    engine_settings.update({"EXECUTOR": "tests.stubs.SeedParity", "MAX_WORKERS": 3})
    first = services.simulate_battle(3, 9, BattleOptions(), seed=2024)
    second = services.simulate_battle(3, 9, BattleOptions(), seed=2024)
    assert first.pk != second.pk
    assert (first.creature1_wins, first.creature2_wins) == (second.creature1_wins, second.creature2_wins)
    assert first.combatant1 == second.combatant1


def test_cancelled_simulation_stores_nothing(starter_catalog, engine_settings):
    event = threading.Event()
    event.set()
    with pytest.raises(Cancelled):
        services.simulate_battle(25, 6, BattleOptions(), cancel_event=event)
    assert BattleSession.objects.count() == 0


def test_non_positive_ttl_fails_before_simulating(starter_catalog, engine_settings):
    engine_settings["SESSION_TTL"] = 0
    engine_settings["EXECUTOR"] = "tests.stubs.FailOnCall"
    with pytest.raises(ImproperlyConfigured):
        services.simulate_battle(25, 6, BattleOptions())
    assert BattleSession.objects.count() == 0


def test_guess_attempts_are_recorded(starter_catalog, engine_settings):
    session = services.simulate_battle(25, 6, BattleOptions())
    services.submit_guess(session.id, 1.0)
    services.submit_guess(session.id, 0.0)
    services.submit_guess(session.id, 0.91)
    stat = services.battle_stats(session.id)
    assert (stat.attempts, stat.successes) == (3, 2)
    assert stat.success_rate == 66.67


def test_stats_are_deleted_with_their_session(starter_catalog, engine_settings):
    session = services.simulate_battle(25, 6, BattleOptions())
    services.submit_guess(session.id, 0.5)
    BattleSession.objects.filter(pk=session.id).delete()
    assert GuessStat.objects.count() == 0
