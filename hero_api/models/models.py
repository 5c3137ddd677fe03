from hero_api.config import Base
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Boolean, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from hero_api.utils.common import utcnow


class Student(Base):
    __tablename__ = "students"
    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    details = Column(String(1000), nullable=False, default="")
    is_chat_blocked = Column(Boolean, default=False, nullable=False)

    # Insertion order is the profile's stored order.
    conditions = relationship(
        "StudentCondition",
        back_populates="student",
        cascade="all, delete-orphan",
        order_by="StudentCondition.id",
    )
    prompts = relationship("StudentPrompt", back_populates="student")

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Condition(Base):
    __tablename__ = "conditions"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False, default="")


class StudentCondition(Base):
    __tablename__ = "student_conditions"
    __table_args__ = (UniqueConstraint("student_id", "condition_id", name="uq_student_condition"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id"), index=True, nullable=False)
    condition_id = Column(Integer, ForeignKey("conditions.id"), index=True, nullable=False)
    comments = Column(String(1000), nullable=False, default="")

    student = relationship("Student", back_populates="conditions")
    condition = relationship("Condition")


class HomeworkItem(Base):
    __tablename__ = "homework_items"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    subject = Column(String(100), nullable=False)
    text_content = Column(String(4000), nullable=True)

    prompts = relationship("StudentPrompt", back_populates="homework_item")


class StudentPrompt(Base):
    """One conversation turn: the student's prompt and its terminal response."""

    __tablename__ = "student_prompts"
    __table_args__ = (
        Index(
            "ix_student_prompts_session",
            "student_id",
            "homework_item_id",
            "session_id",
            "created_at",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    homework_item_id = Column(Integer, ForeignKey("homework_items.id"), nullable=False)
    session_id = Column(String(100), nullable=False, default="")
    prompt_text = Column(String(2000), nullable=False)
    response_text = Column(Text, nullable=True)  # set once, on the terminal transition
    created_at = Column(DateTime, default=utcnow, nullable=False)

    student = relationship("Student", back_populates="prompts")
    homework_item = relationship("HomeworkItem", back_populates="prompts")


class Parameter(Base):
    """Named configuration value, e.g. the student base prompt template."""

    __tablename__ = "parameters"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, index=True, nullable=False)
    value = Column(Text, nullable=False, default="")
