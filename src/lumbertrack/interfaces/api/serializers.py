"""JSON representations of entities and reports."""

from datetime import date, datetime
from decimal import Decimal

from lumbertrack.application.dto.load_dto import LoadDetails
from lumbertrack.application.dto.maintenance_dto import (
    DataHealthReport,
    DeletedRow,
    PurgeReport,
    RepairReport,
)
from lumbertrack.application.dto.pack_dto import PartialFinishOutput
from lumbertrack.application.dto.stage_dto import LoadDiagnosis, StageQueuePage
from lumbertrack.domain.entities import Load, LoadItem, Pack
from lumbertrack.domain.services import StageClassification
from lumbertrack.domain.value_objects import IntegrityViolation


def _num(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _str(value: object) -> str | None:
    return str(value) if value is not None else None


def load_to_dict(load: Load) -> dict:
    return {
        "id": str(load.id),
        "code": load.code,
        "supplier_id": str(load.supplier_id),
        "supplier_location_id": _str(load.supplier_location_id),
        "lumber_type": _str(load.lumber_type),
        "pickup_or_delivery": _str(load.pickup_or_delivery),
        "estimated_delivery_date": _iso(load.estimated_delivery_date),
        "actual_arrival_date": _iso(load.actual_arrival_date),
        "comments": load.comments,
        "pickup_number": load.pickup_number,
        "plant": load.plant,
        "pickup_date": _iso(load.pickup_date),
        "invoice_number": load.invoice_number,
        "invoice_total": _num(load.invoice_total),
        "invoice_date": _iso(load.invoice_date),
        "load_quality": load.load_quality,
        "is_entered": load.is_entered,
        "is_paid": load.is_paid,
        "paid_at": _iso(load.paid_at),
        "po_generated": load.po_generated,
        "po_generated_at": _iso(load.po_generated_at),
        "all_packs_tallied": load.all_packs_tallied,
        "all_packs_finished": load.all_packs_finished,
        "created_by": load.created_by,
        "created_at": load.created_at.isoformat(),
        "updated_at": load.updated_at.isoformat(),
    }


def item_to_dict(item: LoadItem) -> dict:
    return {
        "id": str(item.id),
        "load_id": str(item.load_id),
        "species": item.species,
        "grade": item.grade,
        "thickness": str(item.thickness),
        "estimated_footage": _num(item.estimated_footage),
        "actual_footage": _num(item.actual_footage),
        "actual_footage_entered_at": _iso(item.actual_footage_entered_at),
        "price": _num(item.price),
        "created_at": item.created_at.isoformat(),
        "updated_at": item.updated_at.isoformat(),
    }


def load_details_to_dict(details: LoadDetails) -> dict:
    return {**load_to_dict(details.load), "items": [item_to_dict(i) for i in details.items]}


def pack_to_dict(pack: Pack) -> dict:
    return {
        "id": str(pack.id),
        "load_id": str(pack.load_id),
        "item_id": str(pack.item_id),
        "pack_id": pack.pack_id,
        "length": pack.length,
        "tally_board_feet": _num(pack.tally_board_feet),
        "actual_board_feet": _num(pack.actual_board_feet),
        "rip_yield": _num(pack.rip_yield),
        "rip_comments": pack.rip_comments,
        "is_finished": pack.is_finished,
        "finished_at": _iso(pack.finished_at),
        "operator_id": pack.operator_id,
        "stacker_1_id": pack.stacker_1_id,
        "stacker_2_id": pack.stacker_2_id,
        "stacker_3_id": pack.stacker_3_id,
        "stacker_4_id": pack.stacker_4_id,
        "version": pack.version,
        "created_at": pack.created_at.isoformat(),
        "updated_at": pack.updated_at.isoformat(),
    }


def split_to_dict(result: PartialFinishOutput) -> dict:
    return {
        "finished_pack": pack_to_dict(result.finished_pack),
        "remainder_pack": pack_to_dict(result.remainder_pack),
        "replayed": result.replayed,
    }


def classification_to_dict(classification: StageClassification) -> dict:
    return {
        "queues": [str(q) for q in classification.queues],
        "memberships": {
            str(queue): {
                "member": m.member,
                "reasons": m.reasons,
                "conditions": [
                    {"description": c.description, "satisfied": c.satisfied}
                    for c in m.conditions
                ],
            }
            for queue, m in classification.memberships.items()
        },
    }


def diagnosis_to_dict(diagnosis: LoadDiagnosis) -> dict:
    s = diagnosis.snapshot
    return {
        "load_id": str(s.load_id),
        "code": s.code,
        "stale": diagnosis.stale,
        "stored_flags": {
            "all_packs_tallied": s.all_packs_tallied,
            "all_packs_finished": s.all_packs_finished,
        },
        "live_flags": {
            "all_packs_tallied": diagnosis.live_flags.all_packs_tallied,
            "all_packs_finished": diagnosis.live_flags.all_packs_finished,
        },
        "counts": {
            "items": s.item_count,
            "items_with_actual_footage": s.items_with_actual_footage,
            "items_with_packs": s.items_with_packs,
            "packs": s.pack_count,
            "finished_packs": s.finished_pack_count,
        },
        "stored": classification_to_dict(diagnosis.stored),
        "live": classification_to_dict(diagnosis.live),
    }


def stage_page_to_dict(page: StageQueuePage) -> dict:
    return {
        "queue": str(page.queue),
        "total": page.total,
        "items": [load_details_to_dict(d) for d in page.loads],
    }


def violation_to_dict(v: IntegrityViolation) -> dict:
    return {
        "severity": str(v.severity),
        "table": v.table,
        "issue": v.issue,
        "count": v.count,
        "fix": v.fix,
        "details": v.details,
    }


def health_report_to_dict(report: DataHealthReport) -> dict:
    return {
        "tables": report.tables,
        "row_counts": report.row_counts,
        "duplicate_groups": [
            {"load_id": str(g.load_id), "pack_id": g.pack_id, "count": g.count}
            for g in report.duplicate_groups
        ],
        "orphan_items": report.orphan_items,
        "orphan_packs": report.orphan_packs,
        "has_unique_constraint": report.has_unique_constraint,
        "issues": [violation_to_dict(v) for v in report.issues],
        "warnings": [violation_to_dict(v) for v in report.warnings],
        "safe_to_migrate": report.safe_to_migrate,
    }


def _deleted_to_dict(row: DeletedRow) -> dict:
    return {
        "table": row.table,
        "id": str(row.id),
        "load_id": _str(row.load_id),
        "pack_id": row.pack_id,
    }


def repair_report_to_dict(report: RepairReport) -> dict:
    return {
        "actions": [
            {
                "action": a.action,
                "rows_deleted": a.rows_deleted,
                "deleted": [_deleted_to_dict(r) for r in a.deleted],
            }
            for a in report.actions
        ],
        "rows_affected": report.rows_affected,
    }


def purge_report_to_dict(report: PurgeReport) -> dict:
    return {
        "tables": [
            {"table": t.table, "status": t.status, "reason": t.reason} for t in report.tables
        ],
        "summary": report.summary,
    }
