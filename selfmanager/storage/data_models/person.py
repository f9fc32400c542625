"""Data models for the people directory."""

from dataclasses import dataclass, field

from selfmanager.utils.dates import now_iso

SKILL_LEVELS = ('beginner', 'intermediate', 'advanced', 'expert')

SKILL_CATEGORIES = (
    'debt / lending',
    'ui ux',
    'coding',
    'seo',
    'thumbnail',
    'marketing',
    'video editing',
    'project management',
    'startup funding',
    'design',
    'content creation',
    'sales',
    'business development',
    'legal',
    'accounting',
    'networking',
    'mentoring',
    'consulting',
)

RELATIONSHIP_TYPES = (
    'colleague',
    'friend',
    'family',
    'business_partner',
    'mentor',
    'mentee',
    'client',
    'vendor',
    'other',
)


@dataclass(frozen=True)
class PersonSkill:
    skill_name: str
    skill_level: str = 'intermediate'  # 'beginner', 'intermediate', 'advanced', 'expert'


@dataclass
class Person:
    """A contact, rated by how helpful they have been (0-5, None if unrated)."""

    id: str  # UUID
    name: str
    mobile: str | None = None
    email: str | None = None
    linkedin_url: str | None = None
    facebook_url: str | None = None
    whatsapp_url: str | None = None
    notes: str = ''
    helpfulness_rating: int | None = None
    tags: list[str] = field(default_factory=list)
    skills: list[PersonSkill] = field(default_factory=list)
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)


@dataclass
class PersonConnection:
    """A directed link from one person to another."""

    id: str  # UUID
    person_a_id: str
    person_b_id: str
    relationship_type: str = 'other'
    relationship_notes: str = ''
    created_at: str = field(default_factory=now_iso)
