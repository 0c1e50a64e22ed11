"""Application entry point and composition root."""

import logging

import falcon.asgi

from lumbertrack import __version__
from lumbertrack.application.use_cases.load.bulk_create_loads import BulkCreateLoadsUseCase
from lumbertrack.application.use_cases.load.create_load import CreateLoadUseCase
from lumbertrack.application.use_cases.load.delete_load import DeleteLoadUseCase
from lumbertrack.application.use_cases.load.get_load import GetLoadUseCase
from lumbertrack.application.use_cases.load.mark_po_generated import MarkPoGeneratedUseCase
from lumbertrack.application.use_cases.load.update_load import UpdateLoadUseCase
from lumbertrack.application.use_cases.load.update_load_item import UpdateLoadItemUseCase
from lumbertrack.application.use_cases.maintenance.check_data_health import (
    CheckDataHealthUseCase,
)
from lumbertrack.application.use_cases.maintenance.purge_lumber_data import (
    PurgeLumberDataUseCase,
)
from lumbertrack.application.use_cases.maintenance.repair_duplicate_packs import (
    RepairDuplicatePacksUseCase,
)
from lumbertrack.application.use_cases.maintenance.repair_orphans import RepairOrphansUseCase
from lumbertrack.application.use_cases.pack.create_pack_tallies import (
    CreatePackTalliesUseCase,
)
from lumbertrack.application.use_cases.pack.delete_pack import DeletePackUseCase
from lumbertrack.application.use_cases.pack.finish_pack import FinishPackUseCase
from lumbertrack.application.use_cases.pack.list_packs import ListPacksUseCase
from lumbertrack.application.use_cases.pack.partial_finish_pack import (
    PartialFinishPackUseCase,
)
from lumbertrack.application.use_cases.pack.reopen_pack import ReopenPackUseCase
from lumbertrack.application.use_cases.pack.update_pack import UpdatePackUseCase
from lumbertrack.application.use_cases.stage.diagnose_load import DiagnoseLoadUseCase
from lumbertrack.application.use_cases.stage.list_stage_queue import ListStageQueueUseCase
from lumbertrack.application.use_cases.stage.sync_stage_flags import SyncStageFlagsUseCase
from lumbertrack.config import Settings, get_settings
from lumbertrack.domain.exceptions import LumberTrackError
from lumbertrack.infrastructure.auth.keycloak_provider import KeycloakProvider
from lumbertrack.infrastructure.permission.permission_checker import SettingsPermissionChecker
from lumbertrack.infrastructure.persistence.postgres.connection import create_pool
from lumbertrack.infrastructure.persistence.postgres.unit_of_work import (
    create_uow_factory,
)
from lumbertrack.interfaces.api.errors import handle_domain_error, handle_unexpected_error
from lumbertrack.interfaces.api.middleware.auth import AuthMiddleware
from lumbertrack.interfaces.api.middleware.cors import CORSMiddleware
from lumbertrack.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from lumbertrack.interfaces.api.resources.health import HealthResource
from lumbertrack.interfaces.api.resources.items import ItemPacksResource, ItemResource
from lumbertrack.interfaces.api.resources.loads import (
    BulkLoadsResource,
    LoadByCodeResource,
    LoadPoGeneratedResource,
    LoadResource,
    LoadsResource,
)
from lumbertrack.interfaces.api.resources.maintenance import MaintenanceResource
from lumbertrack.interfaces.api.resources.packs import LoadPacksResource, PackResource
from lumbertrack.interfaces.api.resources.stages import LoadStagesResource, StageQueueResource
from lumbertrack.logging_conf import configure_logging

logger = logging.getLogger(__name__)


def add_routes(
    app: falcon.asgi.App,
    uow_factory: type,
    permission_checker,
    health_resource: HealthResource,
) -> None:
    """Wire use cases into resources and register every route."""
    get_load = GetLoadUseCase(unit_of_work_factory=uow_factory)
    loads_resource = LoadsResource(CreateLoadUseCase(unit_of_work_factory=uow_factory), uow_factory)
    bulk_loads_resource = BulkLoadsResource(BulkCreateLoadsUseCase(unit_of_work_factory=uow_factory))
    load_resource = LoadResource(
        get_load,
        UpdateLoadUseCase(unit_of_work_factory=uow_factory),
        DeleteLoadUseCase(unit_of_work_factory=uow_factory),
    )
    load_by_code_resource = LoadByCodeResource(get_load)
    po_resource = LoadPoGeneratedResource(MarkPoGeneratedUseCase(unit_of_work_factory=uow_factory))
    load_packs_resource = LoadPacksResource(ListPacksUseCase(unit_of_work_factory=uow_factory))
    load_stages_resource = LoadStagesResource(DiagnoseLoadUseCase(unit_of_work_factory=uow_factory))
    item_resource = ItemResource(UpdateLoadItemUseCase(unit_of_work_factory=uow_factory))
    item_packs_resource = ItemPacksResource(
        CreatePackTalliesUseCase(unit_of_work_factory=uow_factory)
    )
    pack_resource = PackResource(
        update_pack=UpdatePackUseCase(unit_of_work_factory=uow_factory),
        delete_pack=DeletePackUseCase(unit_of_work_factory=uow_factory),
        finish_pack=FinishPackUseCase(unit_of_work_factory=uow_factory),
        partial_finish_pack=PartialFinishPackUseCase(unit_of_work_factory=uow_factory),
        reopen_pack=ReopenPackUseCase(unit_of_work_factory=uow_factory),
    )
    stage_queue_resource = StageQueueResource(
        ListStageQueueUseCase(unit_of_work_factory=uow_factory)
    )
    maintenance_resource = MaintenanceResource(
        check_data_health=CheckDataHealthUseCase(uow_factory, permission_checker),
        repair_duplicate_packs=RepairDuplicatePacksUseCase(uow_factory, permission_checker),
        repair_orphans=RepairOrphansUseCase(uow_factory, permission_checker),
        sync_stage_flags=SyncStageFlagsUseCase(uow_factory, permission_checker),
        purge_lumber_data=PurgeLumberDataUseCase(uow_factory, permission_checker),
    )

    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/loads", loads_resource)
    app.add_route("/v1/loads/bulk", bulk_loads_resource)
    app.add_route("/v1/loads/by-code/{code}", load_by_code_resource)
    app.add_route("/v1/loads/{load_id}", load_resource)
    app.add_route("/v1/loads/{load_id}/po-generated", po_resource)
    app.add_route("/v1/loads/{load_id}/packs", load_packs_resource)
    app.add_route("/v1/loads/{load_id}/stages", load_stages_resource)
    app.add_route("/v1/items/{item_id}", item_resource)
    app.add_route("/v1/items/{item_id}/packs", item_packs_resource)
    app.add_route("/v1/packs/{pack_id}", pack_resource)
    app.add_route("/v1/packs/{pack_id}/finish", pack_resource, suffix="finish")
    app.add_route(
        "/v1/packs/{pack_id}/partial-finish", pack_resource, suffix="partial_finish"
    )
    app.add_route("/v1/packs/{pack_id}/reopen", pack_resource, suffix="reopen")
    app.add_route("/v1/stages/{queue}", stage_queue_resource)
    app.add_route("/v1/maintenance/report", maintenance_resource, suffix="report")
    app.add_route("/v1/maintenance/duplicates", maintenance_resource, suffix="duplicates")
    app.add_route("/v1/maintenance/orphans", maintenance_resource, suffix="orphans")
    app.add_route("/v1/maintenance/stage-flags", maintenance_resource, suffix="stage_flags")
    app.add_route("/v1/maintenance/purge", maintenance_resource, suffix="purge")


def add_error_handlers(app: falcon.asgi.App) -> None:
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(LumberTrackError, handle_domain_error)


def create_lumbertrack_app(settings: Settings | None = None) -> falcon.asgi.App:
    """Composition root - build Falcon app with all dependencies."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    pool = create_pool(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    uow_factory = create_uow_factory(pool)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("Keycloak not configured; all requests are unauthenticated")

    permission_checker = SettingsPermissionChecker(settings.maintenance_admin_ids)

    app = falcon.asgi.App(
        middleware=[
            CORSMiddleware(settings.cors_origin_list),
            PoolLifespanMiddleware(pool),
            AuthMiddleware(keycloak),
        ],
    )
    add_error_handlers(app)
    add_routes(app, uow_factory, permission_checker, HealthResource(pool))

    logger.info("LumberTrack v%s app created (%s)", __version__, settings.environment)
    return app


def main() -> None:
    """CLI entry point - run the API under uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "lumbertrack.main:create_lumbertrack_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
