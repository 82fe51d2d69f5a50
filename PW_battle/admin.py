from django.contrib import admin
from django.core.exceptions import ValidationError
from django.forms.models import BaseInlineFormSet

from .engine.rules import MAX_MOVES
from .models import (
    BattleSession,
    CompetitiveMoveSlot,
    Creature,
    GuessStat,
    Learnset,
    Move,
)


# -----------------------------
# Helpers
# -----------------------------

class CompetitiveMoveInlineFormSet(BaseInlineFormSet):
    """
    Enforce:
    - slot is unique (also enforced by unique_together)
    - slot is within 1..4
    - the same move is not curated twice
    """
    def clean(self):
        super().clean()

        # inline forms can be empty/deleted
        forms = [
            f for f in self.forms
            if hasattr(f, "cleaned_data")
            and f.cleaned_data
            and not f.cleaned_data.get("DELETE", False)
        ]

        slots = []
        moves = []
        for f in forms:
            slot = f.cleaned_data.get("slot")
            if slot is not None:
                if slot < 1 or slot > MAX_MOVES:
                    raise ValidationError(f"Move slot must be between 1 and {MAX_MOVES}.")
                slots.append(slot)
            move = f.cleaned_data.get("move")
            if move is not None:
                moves.append(move.pk)

        if len(slots) != len(set(slots)):
            raise ValidationError(f"Duplicate move slots detected. Each slot (1-{MAX_MOVES}) must be unique.")
        if len(moves) != len(set(moves)):
            raise ValidationError("A competitive set cannot list the same move twice.")


# -----------------------------
# Move Admin
# -----------------------------

@admin.register(Move)
class MoveAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "type", "category", "power", "accuracy")
    list_filter = ("type", "category")
    search_fields = ("name", "code")


# -----------------------------
# Creature Admin (with inline learnset and competitive set)
# -----------------------------

class LearnsetInline(admin.TabularInline):
    model = Learnset
    extra = 0
    fields = ("learn_level", "move")
    autocomplete_fields = ("move",)
    ordering = ("learn_level",)


class CompetitiveMoveSlotInline(admin.TabularInline):
    model = CompetitiveMoveSlot
    formset = CompetitiveMoveInlineFormSet
    extra = 0
    max_num = MAX_MOVES
    fields = ("slot", "move")
    autocomplete_fields = ("move",)
    ordering = ("slot",)


@admin.register(Creature)
class CreatureAdmin(admin.ModelAdmin):
    list_display = ("dex_number", "name", "primary_type", "secondary_type", "base_spe")
    list_filter = ("primary_type", "secondary_type")
    search_fields = ("name", "species_key")

    inlines = [LearnsetInline, CompetitiveMoveSlotInline]


# -----------------------------
# Sessions (read only)
# -----------------------------

@admin.register(BattleSession)
class BattleSessionAdmin(admin.ModelAdmin):
    list_display = ("id", "__str__", "total_battles", "creature1_wins", "creature2_wins", "expires_at")
    list_filter = ("expires_at",)
    readonly_fields = (
        "id", "combatant1", "combatant2", "options", "total_battles",
        "creature1_wins", "creature2_wins", "execution_ms", "created_at", "expires_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(GuessStat)
class GuessStatAdmin(admin.ModelAdmin):
    list_display = ("session", "attempts", "successes", "success_rate", "updated_at")
    readonly_fields = ("session", "attempts", "successes", "updated_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
