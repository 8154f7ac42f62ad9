from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, TypeDecorator
from sqlalchemy.orm import declarative_base
import json

Base = declarative_base()

class JSONType(TypeDecorator):
    """JSON stored as TEXT so the schema works on SQLite and Postgres alike."""
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return json.loads(value)


class User(Base):
    __tablename__ = "users"
    id = Column(String(32), primary_key=True)
    username = Column(String, nullable=False, unique=True)


class Resume(Base):
    __tablename__ = "resumes"
    id = Column(String(32), primary_key=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=True)
    filename = Column(String, nullable=False)
    original_text = Column(Text, nullable=False)
    file_size = Column(Integer, nullable=False)
    uploaded_at = Column(DateTime, nullable=False)


class JobDescription(Base):
    __tablename__ = "job_descriptions"
    id = Column(String(32), primary_key=True)
    title = Column(String, nullable=False)
    company = Column(String, nullable=True)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False)


class Analysis(Base):
    __tablename__ = "analyses"
    id = Column(String(32), primary_key=True)
    resume_id = Column(String(32), ForeignKey("resumes.id"), nullable=False, index=True)
    job_description_id = Column(String(32), ForeignKey("job_descriptions.id"), nullable=False)
    overall_score = Column(Integer, nullable=False)
    keyword_match_score = Column(Integer, nullable=False)
    format_score = Column(Integer, nullable=False)
    skills_match_score = Column(Integer, nullable=False)
    found_keywords = Column(JSONType)
    missing_keywords = Column(JSONType)
    recommendations = Column(JSONType)
    formatting_checks = Column(JSONType)
    skills_gap = Column(JSONType)
    analyzed_at = Column(DateTime, nullable=False, index=True)
