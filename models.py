from datetime import date, datetime
from typing import Any, Optional, Union

from bson import ObjectId
from pydantic import BaseModel, Field, field_validator
from pymongo import ASCENDING, MongoClient

from config import COLLECTION_NAME, DB_NAME, MONGODB_URI, USERS_COLLECTION

DEFAULT_EDUCATION_LEVEL = "graduate"

# -------------------------------
# Pydantic Schemas
# -------------------------------

class RegisterModel(BaseModel):
    username: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    confirmPassword: str = Field(min_length=1)


class LoginModel(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class EducationRecord(BaseModel):
    """Education stored as one flag per completed level."""
    tenth: bool = False
    twelfth: bool = False
    diploma: bool = False
    graduate: bool = False

    @property
    def level(self) -> str:
        # highest completed level wins
        if self.graduate:
            return "graduate"
        if self.diploma:
            return "diploma"
        if self.twelfth:
            return "12th"
        if self.tenth:
            return "10th"
        return DEFAULT_EDUCATION_LEVEL


Education = Union[EducationRecord, str]


def _as_list(value):
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


class ProfileUpdateModel(BaseModel):
    skills: Optional[list[str]] = None
    sectors: Optional[list[str]] = None
    education: Optional[Education] = None
    location: Optional[str] = None

    @field_validator("skills", "sectors", mode="before")
    @classmethod
    def wrap_scalar(cls, value):
        if value is None or value == "":
            return None
        return _as_list(value)

    def changes(self) -> dict:
        """Fields the client actually supplied with a non-empty value."""
        update = {}
        for name in ("skills", "sectors", "education", "location"):
            value = getattr(self, name)
            if not value:
                continue
            update[name] = value.model_dump() if isinstance(value, EducationRecord) else value
        return update


class UserProfile(BaseModel):
    id: str
    skills: list[str] = Field(default_factory=list)
    sectors: list[str] = Field(default_factory=list)
    education: Optional[Education] = None
    location: str = ""

    @field_validator("skills", "sectors", mode="before")
    @classmethod
    def wrap_scalar(cls, value):
        return _as_list(value)

    @field_validator("location", mode="before")
    @classmethod
    def blank_location(cls, value):
        return value or ""

    @field_validator("education", mode="before")
    @classmethod
    def blank_education(cls, value):
        return value or None

    @classmethod
    def from_document(cls, doc: dict) -> "UserProfile":
        return cls(
            id=str(doc["_id"]),
            skills=doc.get("skills"),
            sectors=doc.get("sectors"),
            education=doc.get("education"),
            location=doc.get("location"),
        )

    @property
    def education_level(self) -> str:
        if isinstance(self.education, EducationRecord):
            return self.education.level
        if isinstance(self.education, str) and self.education.strip():
            return self.education.strip()
        return DEFAULT_EDUCATION_LEVEL

    def summary(self) -> dict:
        return {
            "skills": self.skills,
            "sectors": self.sectors,
            "education_level": self.education_level,
            "location": self.location,
        }


class InternshipRecord(BaseModel):
    internship_id: Optional[int] = None
    title: str
    company_name: str
    description: str = ""
    sector: str = ""
    skills: list[str] = Field(default_factory=list)
    min_education: str = ""
    location_city: str = ""
    location_state: str = ""
    duration_weeks: int = 0
    stipend: float = 0
    mode: str = ""
    application_link: str = ""
    posted_date: Optional[str] = None
    application_deadline: Optional[str] = None
    slots_available: int = 1
    company_size: str = ""
    remote_work_allowed: bool = False
    certificate_provided: bool = False


# Fields returned when hydrating internships by id
INTERNSHIP_PROJECTION = {name: 1 for name in InternshipRecord.model_fields}


class Recommendations(BaseModel):
    nearby_ids: list[str] = Field(default_factory=list)
    remote_ids: list[str] = Field(default_factory=list)
    nearby_internships: list[dict] = Field(default_factory=list)
    remote_internships: list[dict] = Field(default_factory=list)


class RecommendationResult(BaseModel):
    recommendations: Recommendations
    user_profile: dict
    fallback_mode: Optional[bool] = None
    message: Optional[str] = None

    @classmethod
    def build(cls, profile: UserProfile, nearby: list, remote: list, **extra) -> "RecommendationResult":
        nearby = [serialize_doc(doc) for doc in nearby]
        remote = [serialize_doc(doc) for doc in remote]
        return cls(
            recommendations=Recommendations(
                nearby_ids=[doc["_id"] for doc in nearby],
                remote_ids=[doc["_id"] for doc in remote],
                nearby_internships=nearby,
                remote_internships=remote,
            ),
            user_profile=profile.summary(),
            **extra,
        )

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)


# -------------------------------
# Document helpers
# -------------------------------

def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    return value


def serialize_doc(doc: dict) -> dict:
    """Copy of a Mongo document that both JSON and MessagePack can encode."""
    return {k: _serialize_value(v) for k, v in doc.items()}


def to_object_id(value) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def create_indexes(db):
    users = db[USERS_COLLECTION]
    users.create_index([("email", ASCENDING)], unique=True)
    users.create_index([("username", ASCENDING)], unique=True)

    internships = db[COLLECTION_NAME]
    internships.create_index([("sector", ASCENDING)])
    internships.create_index([("location_city", ASCENDING)])
    internships.create_index([("internship_id", ASCENDING)])
    print("Indexes created successfully.")


if __name__ == "__main__":
    create_indexes(MongoClient(MONGODB_URI)[DB_NAME])
