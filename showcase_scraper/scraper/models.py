"""Pydantic data models for the showcase scraper.

This module defines type-safe models for listing pages, scraped projects,
failures and the per-project outcome union handed from the batch processor
to the orchestrator.
"""

from datetime import datetime, timezone
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


FAILED_PROJECT_NAME = "Failed to load project"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PageResult(BaseModel):
    """Item URLs found on one listing page."""

    urls: list[str] = Field(default_factory=list, description="Absolute item URLs, document order, unique")
    has_next_page: bool = Field(default=False, description="A link to the following page exists")


class ProjectRecord(BaseModel):
    """Model representing a single showcase project."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="", description="Project name")
    url: str = Field(..., description="Project page URL")
    event: str = Field(default="", description="Hackathon the project was built at")
    description: str = Field(default="")
    how_its_made: str = Field(default="", alias="howItsMade")
    technologies: list[str] = Field(default_factory=list, description="Matched keywords, canonical order")
    github: str = Field(default="")
    twitter: str = Field(default="")
    website: str = Field(default="")
    discord: str = Field(default="")
    linkedin: str = Field(default="")
    sponsors: list[str] = Field(default_factory=list, description="Prize/sponsor image alt texts")
    last_updated: datetime = Field(default_factory=_utcnow, alias="lastUpdated")

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError("URL must start with http:// or https://")
        return v


class FailureRecord(BaseModel):
    """A project that could not be scraped after every retry."""

    url: str
    error: str
    name: str = FAILED_PROJECT_NAME
    status: Literal["failed"] = "failed"


class ProjectSuccess(BaseModel):
    status: Literal["success"] = "success"
    record: ProjectRecord


class ProjectFailure(BaseModel):
    status: Literal["failed"] = "failed"
    record: FailureRecord


ItemOutcome = Annotated[Union[ProjectSuccess, ProjectFailure], Field(discriminator="status")]


class ProcessingResult(BaseModel):
    """Successes and failures of a batch run, each in input order."""

    successes: list[ProjectRecord] = Field(default_factory=list)
    failures: list[FailureRecord] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.successes) + len(self.failures)

    def add(self, outcome: ItemOutcome) -> None:
        """Route one outcome into the matching list."""
        if isinstance(outcome, ProjectSuccess):
            self.successes.append(outcome.record)
        else:
            self.failures.append(outcome.record)


class RunSummary(BaseModel):
    """Aggregate figures for one scraping run."""

    discovered: int = Field(..., ge=0, description="Unique project URLs found")
    succeeded: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    duration_seconds: float = Field(..., ge=0.0)
    csv_path: Optional[str] = None
    failures_path: Optional[str] = None

    @property
    def success_rate(self) -> float:
        """Percentage of processed projects that succeeded (0 when nothing ran)."""
        processed = self.succeeded + self.failed
        if processed == 0:
            return 0.0
        return self.succeeded / processed * 100

    @property
    def duration_minutes(self) -> float:
        return self.duration_seconds / 60
