"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.

Stored documents are loosely typed, so most responses are plain dicts;
schemas here mostly guard what the client is allowed to send. Field names
are camelCase to match the documents they end up in.
"""

from urllib.parse import urlparse
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional, List, Any
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    alumni = "alumni"
    faculty = "faculty"
    admin = "admin"


class SubmissionKind(str, Enum):
    job = "job"
    event = "event"


class ApprovalAction(str, Enum):
    approve = "approve"
    reject = "reject"


class RequestAction(str, Enum):
    accept = "accept"
    reject = "reject"


class PostAction(str, Enum):
    like = "like"
    comment = "comment"


class ResourceType(str, Enum):
    document = "document"
    link = "link"
    video = "video"
    other = "other"


class ResourceSort(str, Enum):
    newest = "newest"
    popular = "popular"
    oldest = "oldest"
    title = "title"
    updated = "updated"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=100)
    role: UserRole = UserRole.student
    adminPassword: Optional[str] = None

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class CompleteRegistrationRequest(BaseModel):
    role: UserRole
    adminPassword: Optional[str] = None

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: dict


# ============================================================
# USER SCHEMAS
# ============================================================

class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    image: Optional[str] = None
    department: Optional[str] = None
    batch: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=1000)


# ============================================================
# POST SCHEMAS
# ============================================================

class PostCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)
    tags: List[str] = []

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content cannot be empty")
        return v

class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=500)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment cannot be empty")
        return v

class PostActionRequest(BaseModel):
    action: str
    comment: Optional[CommentCreate] = None


# ============================================================
# EVENT / JOB SCHEMAS
# ============================================================

class EventCreate(BaseModel):
    # Clients may attach extra fields; they are stored as sent.
    model_config = ConfigDict(extra="allow")

    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    date: Optional[str] = None
    time: Optional[str] = None
    location: Optional[str] = None
    type: str = "in-person"
    notes: Optional[str] = None

class JobCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = Field(..., min_length=1, max_length=200)
    company: Optional[str] = None
    location: Optional[str] = None
    type: str = "Full-time"
    experience: Optional[str] = None
    salary: Optional[str] = None
    description: str = ""
    requirements: List[str] = []
    skills: List[str] = []
    benefits: List[str] = []
    deadline: Optional[str] = None

    @field_validator("requirements", "skills", "benefits")
    @classmethod
    def drop_blank_entries(cls, v: List[str]) -> List[str]:
        return [item.strip() for item in v if item and item.strip()]

class JoinEventRequest(BaseModel):
    eventId: str


# ============================================================
# APPROVAL SCHEMAS
# ============================================================

class ApprovalDecision(BaseModel):
    type: SubmissionKind
    itemId: str
    action: ApprovalAction
    reason: Optional[str] = None


# ============================================================
# NOTIFICATION SCHEMAS
# ============================================================

class MarkNotificationRequest(BaseModel):
    notificationId: str

class NotificationReadUpdate(BaseModel):
    read: bool = True


# ============================================================
# CONNECTION SCHEMAS
# ============================================================

class ConnectionRequestCreate(BaseModel):
    receiverId: str

class ConnectionRequestUpdate(BaseModel):
    action: RequestAction


# ============================================================
# CHAT SCHEMAS
# ============================================================

class ConversationCreate(BaseModel):
    participantId: str

class MessageCreate(BaseModel):
    conversationId: str
    content: str = Field(..., max_length=5000)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Content is required")
        return v

class MarkReadRequest(BaseModel):
    conversationId: str


# ============================================================
# RESOURCE SCHEMAS
# ============================================================

def _check_url(v: Optional[str]) -> Optional[str]:
    if not v:
        return None
    parsed = urlparse(v)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid URL format")
    return v


def _split_tags(v: Any) -> List[str]:
    if v is None:
        return []
    if isinstance(v, str):
        return [t.strip() for t in v.split(",") if t.strip()]
    return [str(t).strip() for t in v if str(t).strip()]


class ResourceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    type: ResourceType
    category: str = "general"
    url: Optional[str] = None
    downloadUrl: Optional[str] = None
    tags: List[str] = []
    fileSize: Optional[int] = None
    fileName: Optional[str] = None
    isPublic: bool = True

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("url")
    @classmethod
    def valid_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v)

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v: Any) -> List[str]:
        return _split_tags(v)

class ResourceUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    type: Optional[ResourceType] = None
    category: Optional[str] = None
    url: Optional[str] = None
    downloadUrl: Optional[str] = None
    tags: Optional[List[str]] = None
    isPublic: Optional[bool] = None

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("url")
    @classmethod
    def valid_url(cls, v: Optional[str]) -> Optional[str]:
        # "" clears the stored url
        if v == "":
            return ""
        return _check_url(v)

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v: Any) -> Optional[List[str]]:
        if v is None:
            return None
        return _split_tags(v)

