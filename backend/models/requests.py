from typing import Literal

from pydantic import BaseModel, Field

from models.responses import FinalResult


class QuickAnalyzeRequest(BaseModel):
    resume_text: str = Field(..., max_length=50000, description="Plain text resume content")
    job_description: str = Field(..., max_length=10000, description="Job description text")
    mode: Literal["both", "keyword", "ai"] = Field("both", description="Which analysis paths to run")


class OptimizeRequest(BaseModel):
    resume_text: str = Field(..., min_length=1, max_length=50000, description="Plain text resume content")
    job_description: str = Field(..., min_length=1, max_length=10000, description="Job description text")
    level: Literal["honest", "aggressive"] = "honest"
    analysis: FinalResult | None = Field(None, description="Result of a previous /analyze call")
