"""Authentication schemas."""

from pydantic import BaseModel, Field


class UserSignup(BaseModel):
    """User signup request.

    ``username`` is optional at the schema level so the route can answer
    with its own "Username is mandatory." message.
    """

    username: str | None = Field(None, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    newsletter: bool = False


class UserLogin(BaseModel):
    """User login request."""

    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)


class AccountResponse(BaseModel):
    """Account summary returned on signup and login."""

    username: str


class AuthResponse(BaseModel):
    """Signup/login response with the session token."""

    id: int
    token: str
    account: AccountResponse
