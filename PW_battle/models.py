import uuid
from fractions import Fraction

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


TYPE_CHOICES = [
    (t, t.title()) for t in (
        "normal", "fire", "water", "electric", "grass", "ice",
        "fighting", "poison", "ground", "flying", "psychic", "bug",
        "rock", "ghost", "dragon", "dark", "steel", "fairy",
    )
]


class Move(models.Model):
    CATEGORY_CHOICES = [
        ("physical", "Physical"),
        ("special", "Special"),
        ("status", "Status"),
    ]

    code = models.CharField(max_length=60, unique=True)  # engine move id, e.g. "thunderbolt"
    name = models.CharField(max_length=120)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default="physical")
    power = models.IntegerField(default=0)
    accuracy = models.IntegerField(null=True, blank=True)  # None = never misses

    class Meta:
        ordering = ["code"]

    def __str__(self):
        return self.name


class Creature(models.Model):
    dex_number = models.PositiveIntegerField(unique=True)
    name = models.CharField(max_length=100, unique=True)
    species_key = models.CharField(max_length=100, unique=True)

    primary_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    secondary_type = models.CharField(max_length=20, choices=TYPE_CHOICES, blank=True, default="")

    base_hp = models.PositiveIntegerField()
    base_atk = models.PositiveIntegerField()
    base_def = models.PositiveIntegerField()
    base_spa = models.PositiveIntegerField()
    base_spd = models.PositiveIntegerField()
    base_spe = models.PositiveIntegerField()

    # comma separated engine ids, e.g. "static,lightningrod"
    abilities = models.CharField(max_length=200, blank=True, default="")

    # curated competitive set (moves live in CompetitiveMoveSlot)
    competitive_ability = models.CharField(max_length=60, blank=True, default="")
    competitive_item = models.CharField(max_length=60, blank=True, default="")
    competitive_nature = models.CharField(max_length=20, default="Hardy")

    class Meta:
        ordering = ["dex_number"]

    def __str__(self):
        return f"#{self.dex_number} {self.name}"

    @property
    def types(self) -> list:
        return [t for t in (self.primary_type, self.secondary_type) if t]

    @property
    def ability_list(self) -> list:
        return [a.strip() for a in self.abilities.split(",") if a.strip()]

    @property
    def base_stats(self) -> dict:
        return {
            "hp": self.base_hp,
            "atk": self.base_atk,
            "def": self.base_def,
            "spa": self.base_spa,
            "spd": self.base_spd,
            "spe": self.base_spe,
        }


class Learnset(models.Model):
    creature = models.ForeignKey(Creature, on_delete=models.CASCADE, related_name="learnset")
    move = models.ForeignKey(Move, on_delete=models.CASCADE, related_name="learned_by")
    learn_level = models.IntegerField(default=1)

    class Meta:
        unique_together = [("creature", "move")]
        ordering = ["learn_level", "move__code"]

    def __str__(self):
        return f"{self.creature.name} L{self.learn_level}: {self.move.name}"


class CompetitiveMoveSlot(models.Model):
    creature = models.ForeignKey(Creature, on_delete=models.CASCADE, related_name="competitive_moves")
    move = models.ForeignKey(Move, on_delete=models.CASCADE, related_name="competitive_on")
    slot = models.IntegerField()  # 1..4

    class Meta:
        unique_together = [("creature", "slot")]
        ordering = ["slot"]

    def clean(self):
        if self.slot < 1 or self.slot > 4:
            raise ValidationError("slot must be 1..4")

    def __str__(self):
        return f"{self.creature.name} slot{self.slot}: {self.move.name}"


class BattleSession(models.Model):
    """
    One aggregated simulate request. Written once by the session store,
    never edited afterwards; expired rows are deleted, not updated.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    combatant1 = models.JSONField()
    combatant2 = models.JSONField()
    options = models.JSONField(default=dict)

    total_battles = models.PositiveIntegerField()
    creature1_wins = models.PositiveIntegerField()
    creature2_wins = models.PositiveIntegerField()
    execution_ms = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField(db_index=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.combatant1.get('name')} vs {self.combatant2.get('name')} ({self.id})"

    def clean(self):
        if self.total_battles < 1:
            raise ValidationError("total_battles must be at least 1")
        if self.creature1_wins + self.creature2_wins > self.total_battles:
            raise ValidationError("win counts exceed total battles")

    @property
    def draws(self) -> int:
        return self.total_battles - self.creature1_wins - self.creature2_wins

    @property
    def win_rate(self) -> Fraction:
        # creature 1 perspective, recomputed from the counts every time
        return Fraction(self.creature1_wins, self.total_battles)


class GuessStat(models.Model):
    """Running guess counters for one battle session; deleted with it."""
    session = models.OneToOneField(BattleSession, on_delete=models.CASCADE, related_name="guess_stats")
    attempts = models.PositiveIntegerField(default=0)
    successes = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.session_id}: {self.successes}/{self.attempts}"

    @property
    def success_rate(self) -> float:
        # percentage, 0 when nobody has guessed yet
        if not self.attempts:
            return 0.0
        return round(self.successes * 100 / self.attempts, 2)
