import logging

from rest_framework.decorators import api_view
from rest_framework.response import Response

from . import services, store
from .engine.rules import InvalidGuess, InvalidOptions, RuleError
from .models import Creature
from .serializers import (
    BattleSessionSerializer,
    CreatureSerializer,
    GuessRequestSerializer,
    SimulateRequestSerializer,
)

logger = logging.getLogger(__name__)


def _error(e: RuleError) -> Response:
    return Response(e.as_dict(), status=e.status)


def _simulate_request(request):
    serializer = SimulateRequestSerializer(data=request.data)
    if not serializer.is_valid():
        raise InvalidOptions(message="Invalid battle request.", details=serializer.errors)
    data = serializer.validated_data
    return data["pokemon1Id"], data["pokemon2Id"], serializer.battle_options()


@api_view(["GET"])
def creature_list(request):
    creatures = Creature.objects.all()
    serializer = CreatureSerializer(creatures, many=True)
    return Response(serializer.data)


@api_view(["POST"])
def simulate_battle(request):
    try:
        creature1_id, creature2_id, options = _simulate_request(request)
        session = services.simulate_battle(creature1_id, creature2_id, options)
    except RuleError as e:
        return _error(e)

    return Response(BattleSessionSerializer(session).data, status=201)


@api_view(["POST"])
def submit_guess(request):
    serializer = GuessRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return _error(InvalidGuess(message="Invalid guess request.", details=serializer.errors))

    battle_id = serializer.validated_data["battleId"]
    try:
        result = services.submit_guess(battle_id, serializer.validated_data["guessedWinRate"])
    except RuleError as e:
        return _error(e)

    return Response({"battleId": battle_id, **result.to_dict()})


@api_view(["GET"])
def battle_detail(request, battle_id):
    try:
        session = store.get(battle_id)
    except RuleError as e:
        return _error(e)
    return Response(BattleSessionSerializer(session).data)


@api_view(["GET"])
def battle_stats(request, battle_id):
    try:
        stat = services.battle_stats(battle_id)
    except RuleError as e:
        return _error(e)
    return Response({
        "battleId": str(stat.session_id),
        "totalAttempts": stat.attempts,
        "successfulAttempts": stat.successes,
        "successRate": stat.success_rate,
    })


@api_view(["POST"])
def simulate_single(request):
    try:
        creature1_id, creature2_id, options = _simulate_request(request)
        spec1, spec2, result = services.simulate_single(creature1_id, creature2_id, options)
    except RuleError as e:
        return _error(e)

    logger.debug("Single battle %s vs %s: winner=%s turns=%s", spec1.name, spec2.name,
                 result.winner, result.turns)
    return Response({
        "winner": result.winner,
        "totalTurns": result.turns,
        "log": result.log,
        "pokemon1": spec1.to_dict(),
        "pokemon2": spec2.to_dict(),
    })
