from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, Uuid
from db.database import Base
from services.time_utils import utc_now_naive
import uuid


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    category = Column(String, nullable=False, default="General")
    priority = Column(String, nullable=False, default="Medium")  # Low / Medium / High
    # DB には UTC naive で保存する
    deadline = Column(DateTime)
    completed = Column(Boolean, nullable=False, default=False)
    # ユーザーごとの作成順（1, 2, 3, ...）。created_at が同じでも順序が決まる
    seq = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utc_now_naive)
    updated_at = Column(DateTime, default=utc_now_naive, onupdate=utc_now_naive)
