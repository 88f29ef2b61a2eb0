import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.db import atomic
from app.errors import NotFound
from app.models.report import Report, ReportStatus
from app.repositories.ledger_repository import LedgerRepository
from app.services.award_service import award_once
from app.services.notification_service import notify
from app.services.points_calculator import REPORT_FILED


logger = logging.getLogger(__name__)


def file_report(db: Session, user_id: UUID, data) -> Report:
    """
    Store a new issue report, credit the author with report_filed points and
    alert every admin. One transaction.
    """
    with atomic(db):
        repo = LedgerRepository(db)
        author = repo.get_user(user_id)
        if author is None:
            raise NotFound("User", user_id)

        report = repo.add(
            Report(
                user_id=user_id,
                type=data.type,
                title=data.title,
                description=data.description,
                location=data.location,
                priority=data.priority,
                status=ReportStatus.PENDING.value,
            )
        )

        award_once(db, user_id=user_id, kind=REPORT_FILED, source_entity_id=report.id)

        reporter = author.name or "A resident"
        for admin_id in repo.list_user_ids_by_role("admin"):
            notify(
                repo,
                admin_id,
                type="issue_report",
                title="New Issue Reported",
                message=f"{reporter} reported: {report.title}",
                link=f"/reports/{report.id}",
            )

    logger.info("report filed", extra={"report_id": str(report.id), "user_id": str(user_id)})
    db.refresh(report)
    return report


def list_reports(
    db: Session,
    *,
    user_id: UUID | None = None,
    status: str | None = None,
    limit: int = 50,
    offset: int = 0,
):
    q = db.query(Report)
    if user_id:
        q = q.filter(Report.user_id == user_id)
    if status:
        q = q.filter(Report.status == status)

    limit = max(1, min(limit, 200))
    offset = max(0, offset)

    return (
        q.order_by(Report.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def get_report(db: Session, report_id: UUID) -> Report:
    report = LedgerRepository(db).get_report(report_id)
    if not report:
        raise NotFound("Report", report_id)
    return report
