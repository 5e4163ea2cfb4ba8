from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Text

from .database import Base

TASK_STATUSES = ("pending", "in_progress", "completed", "cancelled")


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{s}'" for s in TASK_STATUSES)),
            name="ck_tasks_status",
        ),
        # AUTOINCREMENT keeps SQLite from reusing ids of deleted rows
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False)
    due_date = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
