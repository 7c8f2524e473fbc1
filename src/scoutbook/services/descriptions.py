"""Generate scouting reports once per player and serve the stored copy afterwards."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from scoutbook.errors import GenerationUnavailable, PlayerNotFound
from scoutbook.llm import TextGenerator
from scoutbook.models import Player
from scoutbook.services.players import PlayerService


logger = logging.getLogger(__name__)

FALLBACK_DESCRIPTION = "No description available."
GENERATION_TEMPERATURE = 0.7
GENERATION_MAX_TOKENS = 150


@dataclass(frozen=True)
class DescriptionResult:
    description: str
    cached: bool


def build_prompt(player: Player) -> str:
    return (
        "Generate a brief scouting report (2-3 sentences) for this baseball player "
        "based on their career statistics:\n"
        "\n"
        f"Player: {player.name}\n"
        f"Position: {player.position}\n"
        f"Games: {player.games}\n"
        f"Hits: {player.hits}\n"
        f"Home Runs: {player.home_runs}\n"
        f"RBI: {player.rbi}\n"
        f"Batting Average: {player.avg:.3f}\n"
        f"OPS: {player.ops:.3f}\n"
        "\n"
        "Focus on their strengths and what made them notable."
    )


class DescriptionService:
    """Reuses a stored description or generates and persists a new one.

    Stored descriptions are never regenerated when stats change later.
    """

    def __init__(self, players: PlayerService, generator: Optional[TextGenerator]):
        self.players = players
        self.generator = generator

    async def get_or_generate(self, player_id: str) -> DescriptionResult:
        player = await self.players.get_by_id(player_id)
        if player is None:
            raise PlayerNotFound(player_id)
        if player.description:
            logger.debug("Serving stored description for %s", player_id)
            return DescriptionResult(description=player.description, cached=True)

        generator = self.generator
        if generator is None or not generator.configured:
            raise GenerationUnavailable("Text generation is not configured")

        text = await generator.generate(
            build_prompt(player),
            temperature=GENERATION_TEMPERATURE,
            max_tokens=GENERATION_MAX_TOKENS,
        )
        description = (text or "").strip() or FALLBACK_DESCRIPTION
        await self.players.update(player_id, {"description": description})
        logger.info("Generated description for %s (%s chars)", player_id, len(description))
        return DescriptionResult(description=description, cached=False)
