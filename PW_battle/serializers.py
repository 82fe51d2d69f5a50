from rest_framework import serializers

from .conf import engine_setting
from .engine.contracts import BattleOptions
from .engine.rules import (
    AI_DIFFICULTIES,
    AI_RANDOM,
    MAX_GENERATION,
    MAX_LEVEL,
    MIN_GENERATION,
    MIN_LEVEL,
    MOVESET_POLICIES,
    MOVESET_RANDOM,
)
from .models import BattleSession, Creature


class CreatureSerializer(serializers.ModelSerializer):
    types = serializers.ListField(child=serializers.CharField(), read_only=True)
    abilities = serializers.ListField(source="ability_list", child=serializers.CharField(), read_only=True)
    baseStats = serializers.DictField(source="base_stats", read_only=True)

    class Meta:
        model = Creature
        fields = ["dex_number", "name", "species_key", "types", "abilities", "baseStats"]


class SimulateOptionsSerializer(serializers.Serializer):
    generation = serializers.IntegerField(min_value=MIN_GENERATION, max_value=MAX_GENERATION, required=False)
    pokemon1Level = serializers.IntegerField(min_value=MIN_LEVEL, max_value=MAX_LEVEL, required=False)
    pokemon2Level = serializers.IntegerField(min_value=MIN_LEVEL, max_value=MAX_LEVEL, required=False)
    withItems = serializers.BooleanField(default=False)
    movesetType = serializers.ChoiceField(choices=MOVESET_POLICIES, default=MOVESET_RANDOM)
    aiDifficulty = serializers.ChoiceField(choices=AI_DIFFICULTIES, default=AI_RANDOM)


class SimulateRequestSerializer(serializers.Serializer):
    pokemon1Id = serializers.IntegerField(min_value=1)
    pokemon2Id = serializers.IntegerField(min_value=1)
    options = SimulateOptionsSerializer(required=False)

    def battle_options(self) -> BattleOptions:
        raw = self.validated_data.get("options") or {}
        level = engine_setting("DEFAULT_LEVEL")
        return BattleOptions(
            generation=raw.get("generation", engine_setting("DEFAULT_GENERATION")),
            pokemon1_level=raw.get("pokemon1Level", level),
            pokemon2_level=raw.get("pokemon2Level", level),
            with_items=raw.get("withItems", False),
            moveset=raw.get("movesetType", MOVESET_RANDOM),
            ai_difficulty=raw.get("aiDifficulty", AI_RANDOM),
        )


class GuessRequestSerializer(serializers.Serializer):
    battleId = serializers.CharField(max_length=64)
    # range is checked by the scoring engine so the error kind stays INVALID_GUESS
    guessedWinRate = serializers.FloatField()

    def validate(self, attrs):
        # FloatField would coerce "0.5" and true
        raw = self.initial_data.get("guessedWinRate")
        if isinstance(raw, (str, bool)):
            raise serializers.ValidationError({"guessedWinRate": ["Must be a JSON number."]})
        return attrs


class BattleSessionSerializer(serializers.ModelSerializer):
    battleId = serializers.UUIDField(source="id", read_only=True)
    pokemon1 = serializers.SerializerMethodField()
    pokemon2 = serializers.SerializerMethodField()
    totalBattles = serializers.IntegerField(source="total_battles", read_only=True)
    draws = serializers.IntegerField(read_only=True)
    winRate = serializers.SerializerMethodField()
    executionTime = serializers.IntegerField(source="execution_ms", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    expiresAt = serializers.DateTimeField(source="expires_at", read_only=True)

    class Meta:
        model = BattleSession
        fields = [
            "battleId", "pokemon1", "pokemon2", "totalBattles", "draws",
            "winRate", "executionTime", "options", "createdAt", "expiresAt",
        ]

    def get_pokemon1(self, obj):
        return {**obj.combatant1, "wins": obj.creature1_wins}

    def get_pokemon2(self, obj):
        return {**obj.combatant2, "wins": obj.creature2_wins}

    def get_winRate(self, obj) -> float:
        return float(obj.win_rate)
