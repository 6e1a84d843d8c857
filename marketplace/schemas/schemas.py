"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    client = "client"
    talent = "talent"
    agency = "agency"
    trainer = "trainer"
    admin = "admin"


class SignupRole(str, Enum):
    """Roles open to self-registration. Admins are created with scripts/create_user.py."""
    client = "client"
    talent = "talent"
    agency = "agency"
    trainer = "trainer"


class ProjectType(str, Enum):
    fixed = "fixed"
    hourly = "hourly"


class ProjectStatus(str, Enum):
    open = "open"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class ApplicationStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class TierLevel(str, Enum):
    bronze = "bronze"
    silver = "silver"
    gold = "gold"


class ConversationAction(str, Enum):
    archive = "archive"
    delete = "delete"


class ReviewDecision(str, Enum):
    approved = "approved"
    rejected = "rejected"


class MilestoneStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"


class TaskStatus(str, Enum):
    todo = "todo"
    in_progress = "in_progress"
    done = "done"


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class AccountType(str, Enum):
    """Admin user listing filter; ``all`` disables it."""
    talent = "talent"
    client = "client"
    agency = "agency"
    all = "all"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=200)
    role: SignupRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company_name: Optional[str] = None
    agency_name: Optional[str] = None

class RegisterResponse(BaseModel):
    message: str
    user_id: str

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str

class UserResponse(BaseModel):
    user_id: str
    email: str
    name: Optional[str] = None
    role: str
    is_active: bool
    created_at: datetime


# ============================================================
# PROJECT SCHEMAS
# ============================================================

class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    budget: float = Field(..., gt=0)
    deadline: datetime
    category: str = Field(..., min_length=1)
    skills: List[str] = Field(..., min_length=1)
    project_type: ProjectType = ProjectType.fixed
    minimum_tier: TierLevel = TierLevel.bronze

class UserSummary(BaseModel):
    id: str
    name: Optional[str] = None
    email: str

class ProjectResponse(BaseModel):
    id: str
    title: str
    description: str
    budget: float
    deadline: datetime
    category: str
    skills: List[str] = []
    project_type: str
    status: str
    minimum_tier: str
    client: UserSummary
    created_at: datetime

class ProjectListResponse(BaseModel):
    projects: List[ProjectResponse]

class ProjectCreatedResponse(BaseModel):
    message: str
    project: ProjectResponse


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    project_id: str
    cover_letter: Optional[str] = None
    proposed_rate: Optional[float] = Field(None, ge=0)

class ApplicationStatusUpdate(BaseModel):
    application_id: str
    status: ApplicationStatus

class PickRequest(BaseModel):
    application_id: str

class ApplicantSummary(BaseModel):
    id: str
    name: Optional[str] = None
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    title: Optional[str] = None
    tier: Optional[str] = None

class ApplicationResponse(BaseModel):
    id: str
    project_id: str
    talent_id: str
    cover_letter: Optional[str] = None
    proposed_rate: Optional[float] = None
    status: str
    is_picked: bool
    picked_at: Optional[datetime] = None
    created_at: datetime
    project: Optional[ProjectResponse] = None
    talent: Optional[ApplicantSummary] = None

class ApplicationListResponse(BaseModel):
    applications: List[ApplicationResponse]

class ApplicationCreatedResponse(BaseModel):
    message: str
    application: ApplicationResponse

class PickResponse(BaseModel):
    success: bool = True
    application: ApplicationResponse
    active_picks: int


# ============================================================
# MILESTONE / TASK SCHEMAS
# ============================================================

class MilestoneCreate(BaseModel):
    project_id: str
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    amount: float = Field(..., gt=0)
    start_date: datetime
    end_date: datetime

class MilestoneUpdate(BaseModel):
    """Only the fields sent are changed."""
    milestone_id: str
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    amount: Optional[float] = Field(None, gt=0)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[MilestoneStatus] = None

class MilestoneOut(BaseModel):
    id: str
    project_id: str
    title: str
    description: Optional[str] = None
    amount: float
    start_date: datetime
    end_date: datetime
    status: str
    completed_at: Optional[datetime] = None
    created_by: str
    created_at: datetime
    updated_at: datetime

class MilestoneListResponse(BaseModel):
    milestones: List[MilestoneOut]

class MilestoneEnvelope(BaseModel):
    milestone: MilestoneOut

class TaskCreate(BaseModel):
    project_id: str
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.todo
    priority: TaskPriority = TaskPriority.medium
    due_date: Optional[datetime] = None
    assigned_to: Optional[str] = None

class TaskPatch(BaseModel):
    """Board moves and inline edits. Only the fields sent are changed."""
    task_id: str
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    assigned_to: Optional[str] = None

class TaskReplace(BaseModel):
    """Edit form: title, description, priority and due date are all overwritten."""
    task_id: str
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    priority: TaskPriority
    due_date: Optional[datetime] = None

class TaskOut(BaseModel):
    id: str
    project_id: str
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    due_date: Optional[datetime] = None
    assigned_to: Optional[str] = None
    created_by: str
    created_at: datetime
    updated_at: datetime

class TaskListResponse(BaseModel):
    tasks: List[TaskOut]

class TaskEnvelope(BaseModel):
    task: TaskOut


# ============================================================
# TALENT / AGENCY / TRAINER SCHEMAS
# ============================================================

class TalentCardProfile(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    title: Optional[str] = None
    skills: List[str] = []
    experience: Optional[str] = None
    hourly_rate: Optional[float] = None
    portfolio: Optional[str] = None
    tier: str = "bronze"

class TalentCard(BaseModel):
    id: str
    name: Optional[str] = None
    email: str
    profile: Optional[TalentCardProfile] = None

class TalentListResponse(BaseModel):
    talents: List[TalentCard]

class TalentProfileDetail(TalentCardProfile):
    bio: Optional[str] = None
    portfolio_url: Optional[str] = None
    certifications: List[str] = []
    active_picks: int = 0
    completed_projects: int = 0
    success_rate: float = 0
    total_earnings: float = 0
    verification_status: str = "pending"
    platform_access: bool = False

class TalentProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    title: Optional[str] = None
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    experience: Optional[str] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    portfolio: Optional[str] = None
    portfolio_url: Optional[str] = None
    certifications: Optional[List[str]] = None

class AgencyCardProfile(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    agency_name: Optional[str] = None
    description: Optional[str] = None
    company_size: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    founded_year: Optional[int] = None

class AgencyCard(BaseModel):
    id: str
    name: Optional[str] = None
    email: str
    profile: Optional[AgencyCardProfile] = None

class AgencyListResponse(BaseModel):
    agencies: List[AgencyCard]

class TrainerProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    title: Optional[str] = None
    specialization: Optional[str] = None
    bio: Optional[str] = None
    skills: List[str] = []
    experience: Optional[str] = None
    certifications: List[str] = []
    hourly_rate: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None

class TrainerProfileResponse(BaseModel):
    id: str
    user_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    title: Optional[str] = None
    specialization: Optional[str] = None
    bio: Optional[str] = None
    skills: List[str] = []
    experience: Optional[str] = None
    certifications: List[str] = []
    hourly_rate: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    updated_at: datetime


# ============================================================
# CONVERSATION / MESSAGE SCHEMAS
# ============================================================

class ConversationCreate(BaseModel):
    other_user_id: str
    project_id: Optional[str] = None

class ConversationUpdate(BaseModel):
    action: ConversationAction

class Participant(BaseModel):
    id: str
    name: Optional[str] = None
    email: str
    role: str
    display_name: str

class MessageCreate(BaseModel):
    conversation_id: str
    content: str = Field(..., min_length=1)

class MarkReadRequest(BaseModel):
    conversation_id: str

class MessageOut(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    content: str
    is_read: bool
    created_at: datetime
    sender: Optional[UserSummary] = None

class ConversationResponse(BaseModel):
    id: str
    client_id: str
    talent_id: str
    project_id: Optional[str] = None
    client: Participant
    talent: Participant
    last_message: Optional[MessageOut] = None
    unread_count: int = 0
    archived: bool = False
    created_at: datetime
    updated_at: datetime

class CountResponse(BaseModel):
    count: int


# ============================================================
# NOTIFICATION SCHEMAS
# ============================================================

class NotificationOut(BaseModel):
    id: str
    type: str
    title: str
    message: str
    is_read: bool
    related_project_id: Optional[str] = None
    related_application_id: Optional[str] = None
    created_at: datetime

class NotificationListResponse(BaseModel):
    notifications: List[NotificationOut]

class NotificationUpdate(BaseModel):
    notification_id: Optional[str] = None
    mark_all_as_read: bool = False


# ============================================================
# VERIFICATION SCHEMAS
# ============================================================

class VerificationSubmit(BaseModel):
    portfolio_url: Optional[str] = None
    portfolio_projects: Optional[str] = None
    github_username: Optional[str] = None
    gitlab_username: Optional[str] = None
    code_repository_url: Optional[str] = None
    linkedin_url: Optional[str] = None

class VerificationReview(BaseModel):
    talent_profile_id: str
    decision: ReviewDecision
    portfolio_score: Optional[float] = Field(None, ge=0, le=100)
    code_sample_score: Optional[float] = Field(None, ge=0, le=100)
    skill_tests_score: Optional[float] = Field(None, ge=0, le=100)
    overall_score: Optional[float] = Field(None, ge=0, le=100)
    rejection_reason: Optional[str] = None
    portfolio_notes: Optional[str] = None
    code_sample_notes: Optional[str] = None


# ============================================================
# ADMIN / WAITLIST SCHEMAS
# ============================================================

class AdminUserOut(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    role: str
    is_active: bool
    created_at: datetime
    type: str
    profile: Optional[dict] = None
    verification: Optional[dict] = None

class Pagination(BaseModel):
    page: int
    limit: int
    total_count: int
    total_pages: int

class AdminUserListResponse(BaseModel):
    users: List[AdminUserOut]
    pagination: Pagination

class WaitlistJoin(BaseModel):
    email: EmailStr

class WaitlistEntry(BaseModel):
    id: str
    email: str
    created_at: datetime

class WaitlistJoinResponse(BaseModel):
    success: bool = True
    message: str
    data: WaitlistEntry


# ============================================================
# VIEW SCHEMAS (role-gated pages)
# ============================================================

class ProjectView(BaseModel):
    items: List[ProjectResponse]
    total: int
    empty: bool
    empty_message: Optional[str] = None

class TalentView(BaseModel):
    items: List[TalentCard]
    total: int
    empty: bool
    empty_message: Optional[str] = None


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
