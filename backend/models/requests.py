from pydantic import BaseModel, Field

from models.schemas.resume_profile import ResumeProfile


class AnalyzeRequest(BaseModel):
    resume_text: str = Field(..., max_length=50000, description="Plain text resume content")
    job_description: str = Field(..., max_length=10000, description="Job description text")


class ProfileAnalyzeRequest(BaseModel):
    profile: ResumeProfile = Field(..., description="Already-structured resume profile")
    job_description: str = Field(..., max_length=10000, description="Job description text")
