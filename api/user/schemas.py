from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ArrayChangesRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    addSkills: list[str] = Field(default_factory=list)
    removeSkills: list[str] = Field(default_factory=list)
    addCertificates: list[str] = Field(default_factory=list)
    removeCertificates: list[str] = Field(default_factory=list)
    skills: list[str] | None = Field(default=None, description="Full desired skills list (replaces add/remove)")
    certifications: list[str] | None = Field(default=None, description="Full desired certifications list")
    certificates: list[str] | None = Field(default=None, description="Alias of certifications")


class UserListResponse(BaseModel):
    message: str
    users: list[dict[str, Any]]


class PhotoUploadResponse(BaseModel):
    success: bool
    avatarUrl: str
    user: dict[str, Any]


class ProfileOptionsResponse(BaseModel):
    availability: list[str]
    jobTypes: list[str]


class ProfileUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    phone: str | None = None
    address: str | None = None
    locationText: str | None = None
    avatarUrl: str | None = None
    title: str | None = None
    summary: str | None = None
    hourlyRate: float | str | None = None
    availability: str | None = None
    jobType: str | None = None
    education: str | None = Field(default=None, description="Legacy plain-text education")
    experience: str | None = Field(default=None, description="Legacy plain-text experience")


class ExperienceItemRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    company: str | None = None
    startDate: str | None = Field(default=None, description="YYYY-MM or ISO date")
    endDate: str | None = Field(default=None, description="YYYY-MM or ISO date; null means unknown")
    ongoing: bool | None = None
    location: str | None = None
    workMode: str | None = None
    description: str | None = None


class EducationItemRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    degree: str | None = None
    school: str | None = None
    location: str | None = None
    startDate: str | None = Field(default=None, description="YYYY-MM or ISO date")
    endDate: str | None = Field(default=None, description="YYYY-MM or ISO date; null means unknown")
    ongoing: bool | None = None
    description: str | None = None
