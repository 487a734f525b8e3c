"""
TREE Uniformes - Content Schemas
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

COLOR_PATTERN = r'^#[0-9A-Fa-f]{6}$'


class IndustrySectionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    subtitle: Optional[str] = Field(None, max_length=300)
    industry: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    image_url: Optional[str] = None
    background_color: str = Field("#1F4287", pattern=COLOR_PATTERN)
    text_color: str = Field("#FFFFFF", pattern=COLOR_PATTERN)
    link_url: Optional[str] = Field(None, max_length=500)
    button_text: str = Field("Explorar productos", max_length=100)
    is_active: bool = True
    sort_order: int = 0


class IndustrySectionUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    subtitle: Optional[str] = Field(None, max_length=300)
    industry: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    image_url: Optional[str] = None
    background_color: Optional[str] = Field(None, pattern=COLOR_PATTERN)
    text_color: Optional[str] = Field(None, pattern=COLOR_PATTERN)
    link_url: Optional[str] = Field(None, max_length=500)
    button_text: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class ContactMessageCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    subject: Optional[str] = Field(None, max_length=200)
    message: str = Field(..., min_length=10)
