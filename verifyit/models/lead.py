"""
Lead input schemas — validated once at the HTTP boundary, immutable afterwards.
"""
from enum import Enum
from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

from verifyit.config import HISTORY_WINDOW_DAYS

_URL = TypeAdapter(HttpUrl)


class HistoryWindow(str, Enum):
    """Look-back period bounding which platform activity counts as recent."""
    THREE_MONTHS = '3months'
    SIX_MONTHS = '6months'
    ONE_YEAR = '1year'

    @property
    def days(self) -> int:
        return HISTORY_WINDOW_DAYS[self.value]


class ProfileLinks(BaseModel):
    """Optional profile URLs. Empty strings are accepted and stored as None."""
    model_config = ConfigDict(frozen=True)

    linkedin: Optional[str] = None
    x: Optional[str] = None
    other: Optional[str] = None

    @field_validator('linkedin', 'x', 'other', mode='before')
    @classmethod
    def _url_or_empty(cls, value):
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError('must be a URL string')
        value = value.strip()
        if not value:
            return None
        try:
            _URL.validate_python(value)
        except ValidationError:
            raise ValueError('must be a valid URL') from None
        return value


class LeadData(BaseModel):
    """A sales prospect: person + company + how far back to look."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: EmailStr
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    location: str = Field(min_length=1)
    history_window: HistoryWindow = Field(alias='historyWindow')
    profile_links: ProfileLinks = Field(default_factory=ProfileLinks, alias='profileLinks')

    @field_validator('profile_links', mode='before')
    @classmethod
    def _links_default(cls, value):
        return ProfileLinks() if value is None else value

    def to_dict(self) -> Dict:
        """Wire shape (camelCase keys, absent links omitted)."""
        data = self.model_dump(mode='json', by_alias=True)
        data['profileLinks'] = {k: v for k, v in data['profileLinks'].items() if v}
        return data

    def summary(self) -> Dict[str, str]:
        """The minimal identity the report renderers need."""
        return {'name': self.name, 'title': self.title, 'company': self.company}


class VerifyRequest(BaseModel):
    """POST /api/verify body. Both consent flags must be literally true."""
    lead: LeadData
    consent_scraping: Literal[True]
    consent_deletion: Literal[True]


class SendEmailRequest(BaseModel):
    """POST /api/send-email body."""
    model_config = ConfigDict(str_strip_whitespace=True)

    analysis_id: str = Field(min_length=1)
    email_address: EmailStr
    recipient_name: Optional[str] = Field(default=None, min_length=1)


def validation_details(exc: ValidationError) -> Dict[str, str]:
    """Flatten a pydantic ValidationError into {dotted.field: message}."""
    details = {}
    for err in exc.errors(include_url=False):
        field = '.'.join(str(part) for part in err.get('loc', ())) or '__root__'
        details.setdefault(field, err.get('msg', 'Invalid value'))
    return details
