import pytest
from django.core.management import call_command

from PW_battle.catalog import CreatureRecord, MoveRecord
from PW_battle.models import Creature

MOVES = [
    MoveRecord("quickattack", "Quick Attack", "normal", "physical", 40, 100),
    MoveRecord("thunderbolt", "Thunderbolt", "electric", "special", 90, 100),
    MoveRecord("thunderwave", "Thunder Wave", "electric", "status", 0, 90),
    MoveRecord("irontail", "Iron Tail", "steel", "physical", 100, 75),
    MoveRecord("ember", "Ember", "fire", "special", 40, 100),
    MoveRecord("flamethrower", "Flamethrower", "fire", "special", 90, 100),
    MoveRecord("swift", "Swift", "normal", "special", 60, None),
]


@pytest.fixture
def move_table():
    return {m.code: m for m in MOVES}


@pytest.fixture
def pikachu():
    return CreatureRecord(
        dex_number=25,
        name="Pikachu",
        species="pikachu",
        types=("electric",),
        base_stats={"hp": 35, "atk": 55, "def": 40, "spa": 50, "spd": 50, "spe": 90},
        abilities=("static", "lightningrod"),
        learnset=((1, "quickattack"), (4, "thunderwave"), (36, "thunderbolt"), (40, "irontail"), (45, "swift")),
        competitive_moves=("thunderbolt", "irontail", "quickattack", "thunderwave"),
        competitive_ability="lightningrod",
        competitive_item="lightball",
        competitive_nature="Timid",
    )


@pytest.fixture
def charmander():
    return CreatureRecord(
        dex_number=4,
        name="Charmander",
        species="charmander",
        types=("fire",),
        base_stats={"hp": 39, "atk": 52, "def": 43, "spa": 60, "spd": 50, "spe": 65},
        abilities=("blaze",),
        learnset=((1, "ember"), (1, "quickattack"), (30, "flamethrower")),
        competitive_moves=("flamethrower", "swift"),
    )


@pytest.fixture
def moveless():
    return CreatureRecord(
        dex_number=129,
        name="Magikarp",
        species="magikarp",
        types=("water",),
        base_stats={"hp": 20, "atk": 10, "def": 55, "spa": 15, "spd": 20, "spe": 80},
        abilities=(),
        learnset=(),
        competitive_moves=(),
    )


@pytest.fixture
def starter_catalog(db):
    """The shipped fixture plus one creature that knows no moves."""
    call_command("loaddata", "starter_catalog", verbosity=0)
    Creature.objects.create(
        dex_number=129, name="Magikarp", species_key="magikarp", primary_type="water",
        base_hp=20, base_atk=10, base_def=55, base_spa=15, base_spd=20, base_spe=80,
    )
    return Creature.objects.all()


@pytest.fixture
def engine_settings(settings):
    """Serial, stubbed engine; tests tweak the dict further as needed."""
    settings.PW_BATTLE = {
        "EXECUTOR": "tests.stubs.AlwaysSideOne",
        "TRIAL_COUNT": 100,
        "MAX_WORKERS": 1,
        "SESSION_TTL": 3600,
    }
    return settings.PW_BATTLE
