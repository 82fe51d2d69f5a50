from PW_battle.engine.stats import NATURES, calc_stats, nature_multiplier

PIKACHU = {"hp": 35, "atk": 55, "def": 40, "spa": 50, "spd": 50, "spe": 90}


def test_neutral_stats_at_level_50():
    stats = calc_stats(PIKACHU, 50)
    assert stats["hp"] == 110
    assert stats["atk"] == 75
    assert stats["def"] == 60
    assert stats["spe"] == 110


def test_hp_at_level_100():
    assert calc_stats(PIKACHU, 100)["hp"] == 211


def test_nature_raises_one_stat_and_lowers_another():
    neutral = calc_stats(PIKACHU, 50, "Hardy")
    timid = calc_stats(PIKACHU, 50, "Timid")
    assert timid["spe"] == 121
    assert timid["atk"] == 67
    assert timid["hp"] == neutral["hp"]
    assert timid["spa"] == neutral["spa"]


def test_natures_table():
    assert len(NATURES) == 25
    assert nature_multiplier("Adamant", "atk") == 1.1
    assert nature_multiplier("Adamant", "spa") == 0.9
    assert nature_multiplier("Quirky", "atk") == 1.0
    # unknown natures are neutral
    assert nature_multiplier("Grumpy", "spe") == 1.0
