"""Request bodies accepted by the API.

Each model plays the role of a JSON schema: unknown properties are rejected
and field constraints are enforced before a route handler runs. Field names
are the API (camelCase) names; services map them to columns.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class _Body(BaseModel):
    model_config = ConfigDict(extra="forbid")

    def changes(self) -> dict:
        """Only the fields the client actually sent, in the order sent."""
        return self.model_dump(exclude_unset=True)


# =============================================================================
# Companies
# =============================================================================


class CompanyNew(_Body):
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str = ""
    numEmployees: int | None = Field(default=None, ge=0)
    logoUrl: str | None = None


class CompanyUpdate(_Body):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    numEmployees: int | None = Field(default=None, ge=0)
    logoUrl: str | None = None


# =============================================================================
# Jobs
# =============================================================================


class JobNew(_Body):
    title: str = Field(..., min_length=1)
    salary: int | None = Field(default=None, ge=0)
    equity: Decimal | None = Field(default=None, ge=0, le=1)
    companyHandle: str = Field(..., min_length=1, max_length=25)


class JobUpdate(_Body):
    title: str | None = Field(default=None, min_length=1)
    salary: int | None = Field(default=None, ge=0)
    equity: Decimal | None = Field(default=None, ge=0, le=1)


# =============================================================================
# Users
# =============================================================================


class UserAuth(_Body):
    username: str = Field(..., min_length=1, max_length=30)
    password: str = Field(..., min_length=1)


class UserRegister(_Body):
    username: str = Field(..., min_length=1, max_length=30)
    password: str = Field(..., min_length=5, max_length=20)
    firstName: str = Field(..., min_length=1, max_length=30)
    lastName: str = Field(..., min_length=1, max_length=30)
    email: EmailStr


class UserNew(UserRegister):
    isAdmin: bool = False


class UserUpdate(_Body):
    password: str | None = Field(default=None, min_length=5, max_length=20)
    firstName: str | None = Field(default=None, min_length=1, max_length=30)
    lastName: str | None = Field(default=None, min_length=1, max_length=30)
    email: EmailStr | None = None
    isAdmin: bool | None = None
