"""
TREE Uniformes - Auth Schemas
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional


def _min_length(value: Optional[str], length: int, message: str) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) < length:
        raise ValueError(message)
    return value


class LoginRequest(BaseModel):
    """Acceso con usuario o email"""
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def check_username(cls, v):
        return _min_length(v, 3, "El usuario debe tener al menos 3 caracteres")

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        if len(v) < 6:
            raise ValueError("La contraseña debe tener al menos 6 caracteres")
        return v


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: dict


class CustomerRegistration(BaseModel):
    """Registro de cliente desde la tienda"""
    first_name: str
    last_name: str
    email: EmailStr
    phone: str
    company: Optional[str] = None
    address: str
    city: str
    state: str
    zip_code: str
    username: Optional[str] = None
    password: Optional[str] = None

    @field_validator("first_name")
    @classmethod
    def check_first_name(cls, v):
        return _min_length(v, 2, "El nombre debe tener al menos 2 caracteres")

    @field_validator("last_name")
    @classmethod
    def check_last_name(cls, v):
        return _min_length(v, 2, "El apellido debe tener al menos 2 caracteres")

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return _min_length(v, 10, "El teléfono debe tener al menos 10 dígitos")

    @field_validator("address")
    @classmethod
    def check_address(cls, v):
        return _min_length(v, 10, "La dirección debe tener al menos 10 caracteres")

    @field_validator("city")
    @classmethod
    def check_city(cls, v):
        return _min_length(v, 2, "La ciudad debe tener al menos 2 caracteres")

    @field_validator("state")
    @classmethod
    def check_state(cls, v):
        return _min_length(v, 2, "El estado debe tener al menos 2 caracteres")

    @field_validator("zip_code")
    @classmethod
    def check_zip_code(cls, v):
        return _min_length(v, 5, "El código postal debe tener al menos 5 caracteres")

    @field_validator("username")
    @classmethod
    def check_username(cls, v):
        return _min_length(v, 3, "El usuario debe tener al menos 3 caracteres")

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        if v is not None and len(v) < 6:
            raise ValueError("La contraseña debe tener al menos 6 caracteres")
        return v


class ProfileUpdate(BaseModel):
    """Edicion del perfil propio"""
    first_name: Optional[str] = Field(None, min_length=2, max_length=100)
    last_name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    company: Optional[str] = Field(None, max_length=200)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=10)
    password: Optional[str] = Field(None, min_length=6)


class UserAdminUpdate(BaseModel):
    """Cambios que solo el admin puede hacer"""
    role: Optional[str] = Field(None, pattern=r'^(admin|customer)$')
    is_active: Optional[bool] = None
    company: Optional[str] = Field(None, max_length=200)
