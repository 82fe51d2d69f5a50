import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


TYPE_CHOICES = [
    ("normal", "Normal"), ("fire", "Fire"), ("water", "Water"), ("electric", "Electric"),
    ("grass", "Grass"), ("ice", "Ice"), ("fighting", "Fighting"), ("poison", "Poison"),
    ("ground", "Ground"), ("flying", "Flying"), ("psychic", "Psychic"), ("bug", "Bug"),
    ("rock", "Rock"), ("ghost", "Ghost"), ("dragon", "Dragon"), ("dark", "Dark"),
    ("steel", "Steel"), ("fairy", "Fairy"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Move",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=60, unique=True)),
                ("name", models.CharField(max_length=120)),
                ("type", models.CharField(choices=TYPE_CHOICES, max_length=20)),
                ("category", models.CharField(
                    choices=[("physical", "Physical"), ("special", "Special"), ("status", "Status")],
                    default="physical", max_length=20)),
                ("power", models.IntegerField(default=0)),
                ("accuracy", models.IntegerField(blank=True, null=True)),
            ],
            options={"ordering": ["code"]},
        ),
        migrations.CreateModel(
            name="Creature",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("dex_number", models.PositiveIntegerField(unique=True)),
                ("name", models.CharField(max_length=100, unique=True)),
                ("species_key", models.CharField(max_length=100, unique=True)),
                ("primary_type", models.CharField(choices=TYPE_CHOICES, max_length=20)),
                ("secondary_type", models.CharField(blank=True, choices=TYPE_CHOICES, default="", max_length=20)),
                ("base_hp", models.PositiveIntegerField()),
                ("base_atk", models.PositiveIntegerField()),
                ("base_def", models.PositiveIntegerField()),
                ("base_spa", models.PositiveIntegerField()),
                ("base_spd", models.PositiveIntegerField()),
                ("base_spe", models.PositiveIntegerField()),
                ("abilities", models.CharField(blank=True, default="", max_length=200)),
                ("competitive_ability", models.CharField(blank=True, default="", max_length=60)),
                ("competitive_item", models.CharField(blank=True, default="", max_length=60)),
                ("competitive_nature", models.CharField(default="Hardy", max_length=20)),
            ],
            options={"ordering": ["dex_number"]},
        ),
        migrations.CreateModel(
            name="BattleSession",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("combatant1", models.JSONField()),
                ("combatant2", models.JSONField()),
                ("options", models.JSONField(default=dict)),
                ("total_battles", models.PositiveIntegerField()),
                ("creature1_wins", models.PositiveIntegerField()),
                ("creature2_wins", models.PositiveIntegerField()),
                ("execution_ms", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("expires_at", models.DateTimeField(db_index=True)),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="Learnset",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("learn_level", models.IntegerField(default=1)),
                ("creature", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="learnset", to="PW_battle.creature")),
                ("move", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="learned_by", to="PW_battle.move")),
            ],
            options={
                "ordering": ["learn_level", "move__code"],
                "unique_together": {("creature", "move")},
            },
        ),
        migrations.CreateModel(
            name="CompetitiveMoveSlot",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("slot", models.IntegerField()),
                ("creature", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="competitive_moves",
                    to="PW_battle.creature")),
                ("move", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="competitive_on",
                    to="PW_battle.move")),
            ],
            options={
                "ordering": ["slot"],
                "unique_together": {("creature", "slot")},
            },
        ),
    ]
