import logging
from contextlib import contextmanager
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud, models, schemas
from .errors import NoFieldsToUpdateFault, NotFoundFault, StorageFault

logger = logging.getLogger(__name__)


@contextmanager
def _storage(summary: str):
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("%s", summary)
        raise StorageFault(summary, str(exc)) from exc


class TaskService:
    def __init__(self, db: Session):
        self.db = db

    def create(self, task_in: schemas.TaskCreate) -> models.Task:
        fields = task_in.model_dump()
        fields["status"] = task_in.status.value
        with _storage("Failed to create task"):
            task = crud.create_task(self.db, fields)
        logger.info("Created task id=%s status=%s", task.id, task.status)
        return task

    def get(self, task_id: int) -> models.Task:
        with _storage("Failed to fetch task"):
            task = crud.get_task(self.db, task_id)
        if task is None:
            raise NotFoundFault(task_id)
        return task

    def list_all(self) -> List[models.Task]:
        with _storage("Failed to fetch tasks"):
            return crud.get_tasks(self.db)

    def replace(self, task_id: int, task_in: schemas.TaskUpdate) -> models.Task:
        fields = task_in.changes()
        if not fields:
            raise NoFieldsToUpdateFault()
        with _storage("Failed to update task"):
            task = crud.update_task_fields(self.db, task_id, fields)
        if task is None:
            raise NotFoundFault(task_id)
        logger.info("Updated task id=%s fields=%s", task_id, sorted(fields))
        return task

    def update_status(self, task_id: int, status: schemas.TaskStatus) -> models.Task:
        with _storage("Failed to update task status"):
            task = crud.update_task_status(self.db, task_id, schemas.TaskStatus(status).value)
        if task is None:
            raise NotFoundFault(task_id)
        logger.info("Task id=%s status -> %s", task_id, task.status)
        return task

    def delete(self, task_id: int) -> None:
        with _storage("Failed to delete task"):
            deleted = crud.delete_task(self.db, task_id)
        if not deleted:
            raise NotFoundFault(task_id)
        logger.info("Deleted task id=%s", task_id)
