"""
Battle session store.

Lifecycle policy: every session lives for SESSION_TTL seconds from creation.
Expired rows are invisible to `get` and are removed with a single DELETE,
never edited in place.
"""
import logging
import uuid
from datetime import timedelta

from django.core.exceptions import ImproperlyConfigured
from django.db import transaction
from django.utils import timezone

from .conf import engine_setting
from .engine.rules import NotFound
from .models import BattleSession

logger = logging.getLogger(__name__)


def session_ttl() -> int:
    ttl = int(engine_setting("SESSION_TTL"))
    if ttl <= 0:
        raise ImproperlyConfigured(f"PW_BATTLE['SESSION_TTL'] must be a positive number of seconds, got {ttl}.")
    return ttl


def create(outcome) -> uuid.UUID:
    now = timezone.now()
    ttl = session_ttl()

    with transaction.atomic():
        purge_expired(now)
        session = BattleSession(
            id=uuid.uuid4(),
            combatant1=outcome.combatant1.to_dict(),
            combatant2=outcome.combatant2.to_dict(),
            options=outcome.options.to_dict(),
            total_battles=outcome.total_battles,
            creature1_wins=outcome.creature1_wins,
            creature2_wins=outcome.creature2_wins,
            execution_ms=outcome.execution_ms,
            created_at=now,
            expires_at=now + timedelta(seconds=ttl),
        )
        session.full_clean()
        session.save(force_insert=True)

    logger.debug("Stored battle session %s (expires %s)", session.id, session.expires_at.isoformat())
    return session.id


def get(battle_id) -> BattleSession:
    try:
        key = battle_id if isinstance(battle_id, uuid.UUID) else uuid.UUID(str(battle_id))
    except (TypeError, ValueError, AttributeError):
        raise NotFound(
            message="Guess submitted for an expired or unknown battle.",
            details={"battle_id": str(battle_id)},
        )

    session = BattleSession.objects.filter(pk=key, expires_at__gt=timezone.now()).first()
    if session is None:
        raise NotFound(
            message="Guess submitted for an expired or unknown battle.",
            details={"battle_id": str(key)},
        )
    return session


def purge_expired(now=None) -> int:
    deleted, _ = BattleSession.objects.filter(expires_at__lte=now or timezone.now()).delete()
    if deleted:
        logger.info("Purged %s expired battle sessions", deleted)
    return deleted
