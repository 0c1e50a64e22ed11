"""Finish pack use case (full finish)."""

from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID

from lumbertrack.application.dto.pack_dto import CrewInput
from lumbertrack.application.guards import require_actor
from lumbertrack.application.use_cases.stage.refresh_stage_flags import (
    refresh_stage_flags,
)
from lumbertrack.domain.entities import Pack
from lumbertrack.domain.exceptions import (
    Conflict,
    NotFound,
    PackFinished,
    ValidationError,
)
from lumbertrack.domain.value_objects import positive_board_feet, rip_yield


class FinishPackUseCase:
    """Record the rip of a whole pack and mark it finished."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        user_id: str | None,
        pack_id: UUID,
        expected_version: int,
        actual_board_feet: Decimal | None = None,
        crew: CrewInput | None = None,
    ) -> Pack:
        """Finish pack; actual footage defaults to the tally."""
        require_actor(user_id)
        positive_board_feet(actual_board_feet, "actual_board_feet")
        async with self._uow_factory() as uow:
            pack = await uow.packs.get_by_id(pack_id)
            if not pack:
                raise NotFound("Pack", str(pack_id))
            if pack.is_finished:
                raise PackFinished(pack.pack_id)
            if pack.version != expected_version:
                raise Conflict(
                    f"Pack {pack.pack_id} changed since it was read",
                    pack_id=pack.pack_id,
                    expected_version=expected_version,
                    current_version=pack.version,
                )

            actual = actual_board_feet if actual_board_feet is not None else pack.tally_board_feet
            if actual is None:
                raise ValidationError(
                    "actual_board_feet is required when the pack has no tally",
                    field="actual_board_feet",
                )

            pack.actual_board_feet = actual
            pack.rip_yield = rip_yield(pack.tally_board_feet, actual)
            pack.is_finished = True
            pack.finished_at = date.today()
            (crew or CrewInput()).apply_to(pack)
            pack.updated_at = datetime.now(UTC)

            pack = await uow.packs.update(pack, expected_version=expected_version)
            await refresh_stage_flags(uow, pack.load_id)

        return pack
