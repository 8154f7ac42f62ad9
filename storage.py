import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, List, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from models import Analysis, Base, JobDescription, Resume, User
from schemas import AnalysisOut, AnalysisResult, JobDescriptionOut, ResumeOut, UserOut

logger = logging.getLogger(__name__)


class DuplicateUsernameError(ValueError):
    pass


def make_engine(database_url: str) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False}, future=True)
    return create_engine(database_url, future=True)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_id() -> str:
    return uuid.uuid4().hex


class Storage:
    """Insert-and-read persistence for users, resumes, job descriptions and analyses.

    Records are never updated in place; every create gets a fresh id and its
    own session, so concurrent requests cannot interleave rows.
    """

    def __init__(self, engine: Engine, clock: Callable[[], datetime] = _utcnow):
        self.engine = engine
        self.Session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)
        self.clock = clock
        self._lock = threading.Lock()

    @classmethod
    def from_url(cls, database_url: str) -> "Storage":
        storage = cls(make_engine(database_url))
        storage.create_all()
        return storage

    def create_all(self) -> None:
        Base.metadata.create_all(self.engine)

    @contextmanager
    def _session(self):
        # SQLite connections are shared between threads, so sessions are serialized
        with self._lock, self.Session() as s:
            yield s

    def _add(self, row):
        with self._session() as s:
            s.add(row)
            s.commit()
            s.refresh(row)
            return row

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def create_user(self, username: str) -> UserOut:
        try:
            row = self._add(User(id=_new_id(), username=username))
        except IntegrityError as e:
            raise DuplicateUsernameError(f"Username already exists: {username}") from e
        return UserOut.model_validate(row)

    def get_user(self, user_id: str) -> Optional[UserOut]:
        with self._session() as s:
            row = s.get(User, user_id)
            return UserOut.model_validate(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[UserOut]:
        with self._session() as s:
            row = s.execute(select(User).where(User.username == username)).scalar_one_or_none()
            return UserOut.model_validate(row) if row else None

    # ------------------------------------------------------------------
    # Resumes
    # ------------------------------------------------------------------
    def create_resume(self, filename: str, original_text: str, file_size: int,
                      user_id: Optional[str] = None) -> ResumeOut:
        row = self._add(Resume(
            id=_new_id(),
            user_id=user_id,
            filename=filename,
            original_text=original_text,
            file_size=file_size,
            uploaded_at=self.clock(),
        ))
        logger.info(f"Stored resume {row.id} ({file_size} bytes)")
        return ResumeOut.model_validate(row)

    def get_resume(self, resume_id: str) -> Optional[ResumeOut]:
        with self._session() as s:
            row = s.get(Resume, resume_id)
            return ResumeOut.model_validate(row) if row else None

    def get_resumes_by_user(self, user_id: str) -> List[ResumeOut]:
        with self._session() as s:
            rows = s.execute(
                select(Resume).where(Resume.user_id == user_id).order_by(Resume.uploaded_at.desc())
            ).scalars().all()
            return [ResumeOut.model_validate(r) for r in rows]

    # ------------------------------------------------------------------
    # Job descriptions
    # ------------------------------------------------------------------
    def create_job_description(self, title: str, description: str,
                               company: Optional[str] = None) -> JobDescriptionOut:
        row = self._add(JobDescription(
            id=_new_id(),
            title=title,
            company=company,
            description=description,
            created_at=self.clock(),
        ))
        return JobDescriptionOut.model_validate(row)

    def get_job_description(self, job_description_id: str) -> Optional[JobDescriptionOut]:
        with self._session() as s:
            row = s.get(JobDescription, job_description_id)
            return JobDescriptionOut.model_validate(row) if row else None

    # ------------------------------------------------------------------
    # Analyses
    # ------------------------------------------------------------------
    def create_analysis(self, resume_id: str, job_description_id: str,
                        result: AnalysisResult) -> AnalysisOut:
        payload = result.model_dump(mode="json")
        row = self._add(Analysis(
            id=_new_id(),
            resume_id=resume_id,
            job_description_id=job_description_id,
            analyzed_at=self.clock(),
            **payload,
        ))
        logger.info(f"Stored analysis {row.id} (overall={row.overall_score})")
        return AnalysisOut.model_validate(row)

    def get_analysis(self, analysis_id: str) -> Optional[AnalysisOut]:
        with self._session() as s:
            row = s.get(Analysis, analysis_id)
            return AnalysisOut.model_validate(row) if row else None

    def get_analyses_by_resume(self, resume_id: str) -> List[AnalysisOut]:
        with self._session() as s:
            rows = s.execute(
                select(Analysis).where(Analysis.resume_id == resume_id).order_by(Analysis.analyzed_at.desc())
            ).scalars().all()
            return [AnalysisOut.model_validate(r) for r in rows]

    def get_recent_analyses(self, limit: int = 10) -> List[AnalysisOut]:
        with self._session() as s:
            rows = s.execute(
                select(Analysis).order_by(Analysis.analyzed_at.desc()).limit(limit)
            ).scalars().all()
            return [AnalysisOut.model_validate(r) for r in rows]
