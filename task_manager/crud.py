from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from . import models


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_task(db: Session, task_id: int) -> Optional[models.Task]:
    return db.query(models.Task).filter(models.Task.id == task_id).first()


def get_tasks(db: Session) -> List[models.Task]:
    return db.query(models.Task).order_by(models.Task.due_date.asc(), models.Task.id.asc()).all()


def create_task(db: Session, fields: dict) -> models.Task:
    now = utcnow()
    task = models.Task(**fields, created_at=now, updated_at=now)
    db.add(task)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(task)
    return task


def update_task_fields(db: Session, task_id: int, fields: dict) -> Optional[models.Task]:
    values = dict(fields)
    values["updated_at"] = utcnow()
    try:
        affected = (
            db.query(models.Task)
            .filter(models.Task.id == task_id)
            .update(values, synchronize_session=False)
        )
        if affected == 0:
            db.rollback()
            return None
        # read inside the same transaction, detached so commit does not expire it
        task = db.query(models.Task).populate_existing().filter(models.Task.id == task_id).one()
        db.expunge(task)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return task


def update_task_status(db: Session, task_id: int, status: str) -> Optional[models.Task]:
    return update_task_fields(db, task_id, {"status": status})


def delete_task(db: Session, task_id: int) -> bool:
    try:
        affected = db.query(models.Task).filter(models.Task.id == task_id).delete(synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return affected > 0
