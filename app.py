from __future__ import annotations
import asyncio, logging, os, re, uuid
from contextlib import asynccontextmanager
from typing import List, Optional
from fastapi import FastAPI, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from config import Settings, load_settings
from storage import DuplicateUsernameError, Storage
from schemas import (
    AnalysisOut, AnalyzeRequest, AnalyzeResponse, JobDescriptionIn, JobDescriptionOut,
    ResumeOut, UserIn, UserOut,
)
from parsers.extract import (
    EmptyDocumentError, InvalidDocumentError, UnsupportedFormatError, extract_text, validate_file_size,
    validate_file_type,
)
from matching.engine import AnalysisEngine, AnalysisFailedError
from matching.llm_client import KeywordOracle, LLMClient

logger = logging.getLogger(__name__)


def _safe_filename(original: str) -> str:
    base = re.sub(r"[^A-Za-z0-9._-]", "_", original or "upload")
    return f"{uuid.uuid4().hex[:8]}_{base}"


def create_app(settings: Optional[Settings] = None, storage: Optional[Storage] = None,
               oracle: Optional[KeywordOracle] = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build storage and the oracle client once; missing credentials fail here."""
        logging.basicConfig(
            level=settings.log_level.upper(),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        )
        os.makedirs(settings.upload_dir, exist_ok=True)

        app.state.storage = storage or Storage.from_url(settings.db_url)
        client = oracle or LLMClient.from_settings(settings)
        app.state.engine = AnalysisEngine(client, timeout=settings.llm_timeout)
        logger.info(f"Using base directory: {settings.base_dir}")
        yield
        logger.info("Application shutting down.")

    app = FastAPI(title="ATS Resume Optimizer", lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # OK for demo; restrict for prod
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:
    # -------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------
    @app.get("/health")
    def health():
        return {"status": "healthy"}

    @app.post("/api/users", response_model=UserOut)
    def create_user(user: UserIn, request: Request):
        storage: Storage = request.app.state.storage
        if storage.get_user_by_username(user.username):
            raise HTTPException(status_code=409, detail="Username already exists")
        try:
            return storage.create_user(user.username)
        except DuplicateUsernameError:
            raise HTTPException(status_code=409, detail="Username already exists")

    @app.get("/api/users/{user_id}/resumes", response_model=List[ResumeOut])
    def list_user_resumes(user_id: str, request: Request):
        storage: Storage = request.app.state.storage
        if not storage.get_user(user_id):
            raise HTTPException(status_code=404, detail="User not found")
        return storage.get_resumes_by_user(user_id)

    @app.post("/api/resume/upload", response_model=ResumeOut)
    async def upload_resume(request: Request, resume: UploadFile = File(...),
                            user_id: Optional[str] = Form(None)):
        settings: Settings = request.app.state.settings
        storage: Storage = request.app.state.storage

        if not validate_file_type(resume.content_type or ""):
            raise HTTPException(status_code=400, detail="Invalid file type. Only PDF and DOCX files are allowed.")
        if user_id and not await asyncio.to_thread(storage.get_user, user_id):
            raise HTTPException(status_code=404, detail="User not found")

        content = await resume.read()
        if not validate_file_size(len(content), settings.max_upload_mb):
            raise HTTPException(status_code=413, detail=f"File size exceeds {settings.max_upload_mb}MB limit")

        save_path = os.path.join(settings.upload_dir, _safe_filename(resume.filename))
        try:
            with open(save_path, "wb") as f:
                f.write(content)
            text = await asyncio.to_thread(extract_text, save_path, resume.content_type)
        except (UnsupportedFormatError, InvalidDocumentError, EmptyDocumentError) as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Resume upload error: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Failed to process resume upload")
        finally:
            if os.path.exists(save_path):
                os.remove(save_path)

        return await asyncio.to_thread(
            storage.create_resume,
            filename=resume.filename or "resume",
            original_text=text,
            file_size=len(content),
            user_id=user_id,
        )

    @app.get("/api/resume/{resume_id}", response_model=ResumeOut)
    def get_resume(resume_id: str, request: Request):
        resume = request.app.state.storage.get_resume(resume_id)
        if not resume:
            raise HTTPException(status_code=404, detail="Resume not found")
        return resume

    @app.get("/api/resume/{resume_id}/analyses", response_model=List[AnalysisOut])
    def list_resume_analyses(resume_id: str, request: Request):
        storage: Storage = request.app.state.storage
        if not storage.get_resume(resume_id):
            raise HTTPException(status_code=404, detail="Resume not found")
        return storage.get_analyses_by_resume(resume_id)

    @app.post("/api/job-description", response_model=JobDescriptionOut)
    def create_job_description(job: JobDescriptionIn, request: Request):
        if not job.title.strip() or not job.description.strip():
            raise HTTPException(status_code=400, detail="Job title and description are required")
        company = job.company.strip() if job.company and job.company.strip() else None
        return request.app.state.storage.create_job_description(
            title=job.title.strip(),
            description=job.description,
            company=company,
        )

    @app.get("/api/job-description/{job_description_id}", response_model=JobDescriptionOut)
    def get_job_description(job_description_id: str, request: Request):
        job = request.app.state.storage.get_job_description(job_description_id)
        if not job:
            raise HTTPException(status_code=404, detail="Job description not found")
        return job

    @app.post("/api/analyze", response_model=AnalyzeResponse)
    async def analyze(body: AnalyzeRequest, request: Request):
        storage: Storage = request.app.state.storage
        engine: AnalysisEngine = request.app.state.engine

        # storage calls block on a lock, keep them off the event loop
        resume = await asyncio.to_thread(storage.get_resume, body.resume_id)
        if not resume:
            raise HTTPException(status_code=404, detail="Resume not found")
        job = await asyncio.to_thread(storage.get_job_description, body.job_description_id)
        if not job:
            raise HTTPException(status_code=404, detail="Job description not found")

        try:
            result = await engine.analyze(resume.original_text, job.description)
        except AnalysisFailedError:
            raise HTTPException(status_code=500, detail="Failed to analyze resume")

        analysis = await asyncio.to_thread(storage.create_analysis, resume.id, job.id, result)
        return AnalyzeResponse(analysis=analysis, result=result)

    @app.get("/api/analysis/{analysis_id}", response_model=AnalysisOut)
    def get_analysis(analysis_id: str, request: Request):
        analysis = request.app.state.storage.get_analysis(analysis_id)
        if not analysis:
            raise HTTPException(status_code=404, detail="Analysis not found")
        return analysis

    @app.get("/api/analyses/recent", response_model=List[AnalysisOut])
    def recent_analyses(request: Request, limit: int = Query(10, ge=1, le=100)):
        return request.app.state.storage.get_recent_analyses(limit)


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
