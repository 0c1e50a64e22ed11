"""Recompute a load's stored stage flags from its packs."""

from uuid import UUID

from lumbertrack.application.ports import UnitOfWork
from lumbertrack.domain.exceptions import NotFound
from lumbertrack.domain.services import StageFlags, derive_stage_flags


async def refresh_stage_flags(uow: UnitOfWork, load_id: UUID) -> StageFlags:
    """Store the live stage flags of ``load_id`` within the caller's transaction."""
    snapshot = await uow.loads.get_stage_snapshot(load_id)
    if snapshot is None:
        raise NotFound("Load", str(load_id))
    flags = derive_stage_flags(snapshot)
    if flags != snapshot.flags:
        await uow.loads.set_stage_flags(load_id, flags)
    return flags
