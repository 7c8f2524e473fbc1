"""Reconcile upstream players with locally persisted overrides."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Protocol

from scoutbook.errors import PlayerNotFound
from scoutbook.models import MUTABLE_FIELDS, OverridePatch, Player, PlayerPatch
from scoutbook.persistence import OverrideRecord, OverrideStore


logger = logging.getLogger(__name__)


class PlayerSource(Protocol):
    async def fetch_all(self) -> List[Player]: ...


def apply_override(player: Player, record: Optional[OverrideRecord]) -> Player:
    """Overlay every field present in ``record`` onto ``player``."""
    if record is None:
        return player
    overrides = {key: value for key, value in record.fields.items() if key in MUTABLE_FIELDS}
    return Player.model_validate({**player.model_dump(), **overrides, "id": player.id})


class PlayerService:
    def __init__(self, source: PlayerSource, store: OverrideStore):
        self.source = source
        self.store = store

    async def get_all(self) -> List[Player]:
        upstream = await self.source.fetch_all()
        overrides = {record.player_id: record for record in self.store.list_all()}
        return [apply_override(player, overrides.get(player.id)) for player in upstream]

    async def get_by_id(self, player_id: str) -> Optional[Player]:
        for player in await self.get_all():
            if player.id == player_id:
                return player
        return None

    async def update(self, player_id: str, patch: PlayerPatch | Mapping[str, Any]) -> Player:
        """Persist ``patch`` for ``player_id`` and return the stored record as a player.

        The first write seeds the override with the full merged player so later
        partial edits accumulate instead of reverting untouched fields. Mapping
        patches are validated like ``PlayerPatch``; ``None`` values count as absent.
        """
        if not isinstance(patch, PlayerPatch):
            patch = OverridePatch.model_validate(patch)
        fields = patch.to_fields()
        existing = await self.get_by_id(player_id)
        if existing is None:
            raise PlayerNotFound(player_id)
        record = self.store.upsert(player_id, fields, create=existing.mutable_fields())
        logger.info("Applied edit to %s: %s", player_id, sorted(fields))
        return Player.model_validate({**record.fields, "id": player_id})
