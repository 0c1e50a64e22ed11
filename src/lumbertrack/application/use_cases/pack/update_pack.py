"""Update pack use case."""

from datetime import UTC, date, datetime
from uuid import UUID

from lumbertrack.application.dto.pack_dto import PACK_UPDATABLE_FIELDS
from lumbertrack.application.guards import require_actor
from lumbertrack.application.use_cases.stage.refresh_stage_flags import (
    refresh_stage_flags,
)
from lumbertrack.domain.entities import Pack
from lumbertrack.domain.exceptions import (
    Conflict,
    DuplicatePackId,
    NotFound,
    PackFinished,
    ValidationError,
)
from lumbertrack.domain.value_objects import positive_board_feet, rip_yield


class UpdatePackUseCase:
    """Update any subset of a pack's tally, rip and crew fields.

    Finished packs are frozen; they must be reopened first. Packs never move
    to another load or item.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        user_id: str | None,
        pack_id: UUID,
        changes: dict[str, object],
        expected_version: int | None = None,
    ) -> Pack:
        require_actor(user_id)
        if not changes:
            raise ValidationError("No fields to update")
        unknown = sorted(set(changes) - PACK_UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(unknown)}", field=unknown[0]
            )
        for field in ("tally_board_feet", "actual_board_feet"):
            if field in changes:
                positive_board_feet(changes[field], field)

        async with self._uow_factory() as uow:
            pack = await uow.packs.get_by_id(pack_id)
            if not pack:
                raise NotFound("Pack", str(pack_id))
            if pack.is_finished:
                raise PackFinished(pack.pack_id)
            read_version = pack.version if expected_version is None else expected_version
            if pack.version != read_version:
                raise Conflict(
                    f"Pack {pack.pack_id} changed since it was read",
                    pack_id=pack.pack_id,
                    expected_version=read_version,
                    current_version=pack.version,
                )

            if "pack_id" in changes:
                new_code = str(changes["pack_id"] or "").strip()
                if not new_code:
                    raise ValidationError("pack_id is required", field="pack_id")
                if new_code != pack.pack_id and await uow.packs.get_by_pack_id(
                    pack.load_id, new_code
                ):
                    raise DuplicatePackId(pack.load_id, new_code)
                changes = {**changes, "pack_id": new_code}

            for field, value in changes.items():
                setattr(pack, field, value)
            if "tally_board_feet" in changes or "actual_board_feet" in changes:
                pack.rip_yield = rip_yield(pack.tally_board_feet, pack.actual_board_feet)
            if changes.get("is_finished") and "finished_at" not in changes:
                pack.finished_at = date.today()
            elif changes.get("is_finished") is False:
                pack.finished_at = None
            pack.updated_at = datetime.now(UTC)

            pack = await uow.packs.update(pack, expected_version=read_version)
            await refresh_stage_flags(uow, pack.load_id)

        return pack
