"""
Project model, the central entity of the delivery pipeline.

A project moves through the stages in ``ProjectStage``. Its ``version``
column is the optimistic concurrency counter: SQLAlchemy issues every UPDATE
with ``WHERE version = <loaded version>`` and bumps it by one, so a write
based on a stale read affects zero rows and is rejected.
"""

from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel, utcnow
from .enums import Priority, ProjectStage


class Project(BaseModel):
    """
    Represents a client project and its lifecycle state.

    :ivar stage: Current lifecycle stage.
    :ivar overall_deadline: Baseline deadline, never changed after creation.
    :ivar current_deadline: Working deadline, changed only by an admin with a justification.
    :ivar completed_at: Set only while the project is COMPLETED.
    :ivar qa_fail_count: Number of QA rejections, never decremented.
    :ivar version: Optimistic concurrency counter, starts at 1.
    """

    __tablename__ = "projects"

    tenant_id = Column(UUID(), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    client_name = Column(String(255), nullable=False)
    scope = Column(Text)
    priority = Column(
        Enum(Priority, native_enum=False, length=10), nullable=False, default=Priority.MEDIUM
    )
    stage = Column(
        Enum(ProjectStage, native_enum=False, length=20),
        nullable=False,
        default=ProjectStage.UPCOMING,
        index=True,
    )

    overall_deadline = Column(DateTime, nullable=False)
    current_deadline = Column(DateTime, nullable=False)
    completed_at = Column(DateTime)

    assigned_designer_id = Column(UUID(), ForeignKey("users.id"))
    assigned_dev_manager_id = Column(UUID(), ForeignKey("users.id"), index=True)
    assigned_qa_id = Column(UUID(), ForeignKey("users.id"))

    # Lists of {"id", "label", "completed"}; always reassigned, never mutated in place
    design_checklist = Column(JSON, nullable=False, default=list)
    dev_checklist = Column(JSON, nullable=False, default=list)
    qa_checklist = Column(JSON, nullable=False, default=list)
    final_checklist = Column(JSON, nullable=False, default=list)

    qa_fail_count = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    assigned_designer = relationship("User", foreign_keys=[assigned_designer_id])
    assigned_dev_manager = relationship("User", foreign_keys=[assigned_dev_manager_id])
    assigned_qa = relationship("User", foreign_keys=[assigned_qa_id])

    history = relationship(
        "HistoryItem",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="HistoryItem.timestamp",
    )
    scores = relationship("ScoreEntry", back_populates="project", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="project", cascade="all, delete-orphan")
    team_members = relationship(
        "ProjectTeamMember", back_populates="project", cascade="all, delete-orphan"
    )

    @property
    def is_delayed(self) -> bool:
        """Derived at read time, never persisted."""
        if self.stage == ProjectStage.COMPLETED or self.current_deadline is None:
            return False
        return utcnow() > self.current_deadline
