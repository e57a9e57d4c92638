from fastapi import APIRouter, Request, Response
from pydantic import BaseModel, ConfigDict, Field

from skillhub.web.deps import AppDep, TokenDep
from skillhub.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


# Fields are optional at the schema level so missing values surface as 400
# validation errors from the flows rather than FastAPI's 422.
class SignupRequest(BaseModel):
    """Registration request."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str | None = Field(None, alias="firstName", description="First name")
    last_name: str | None = Field(None, alias="lastName", description="Last name")
    email: str | None = Field(None, description="Email address, used as the login name")
    password: str | None = Field(None, description="Password")


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str | None = Field(None, description="Email address")
    password: str | None = Field(None, description="Password")


class FederatedLoginRequest(BaseModel):
    """Google sign-in request."""

    token: str | None = Field(None, description="Google ID token obtained by the client")


class MessageResponse(BaseModel):
    message: str = Field(..., description="Human-readable outcome")


class LoginResponse(BaseModel):
    """Authentication response."""

    message: str = Field(..., description="Human-readable outcome")
    token: str = Field(..., description="Bearer token for subsequent requests, valid 24 hours")


@router.post(
    "/signup",
    summary="Register user",
    description="Create an account with name, email and password. Does not log in.",
    operation_id="signup",
    status_code=201,
    responses={
        201: {"description": "User created"},
        400: {"model": ErrorResponse, "description": "Missing fields or email already exists"},
        500: {"model": ErrorResponse, "description": "Database error"},
    },
)
async def signup(signup_data: SignupRequest, app: AppDep) -> MessageResponse:
    await app.signup(signup_data.first_name, signup_data.last_name, signup_data.email, signup_data.password)
    return MessageResponse(message="User created successfully")


@router.post(
    "/login",
    summary="Authenticate user",
    description="Authenticate with email and password to receive a bearer token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Missing fields"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        500: {"model": ErrorResponse, "description": "Database error"},
    },
)
async def login(login_data: LoginRequest, app: AppDep) -> LoginResponse:
    result = await app.login(login_data.email, login_data.password)
    return LoginResponse(message=result.message, token=result.token)


@router.post(
    "/federated-login",
    summary="Authenticate with Google",
    description="Exchange a Google ID token for a bearer token. Creates the user on first login.",
    operation_id="federatedLogin",
    responses={
        200: {"description": "Existing user logged in"},
        201: {"description": "User created and logged in"},
        400: {"model": ErrorResponse, "description": "Missing token or email not verified"},
        500: {"model": ErrorResponse, "description": "Token verification or database error"},
    },
)
async def federated_login(login_data: FederatedLoginRequest, app: AppDep, response: Response) -> LoginResponse:
    result = await app.federated_login(login_data.token)
    if result.created:
        response.status_code = 201
    return LoginResponse(message=result.message, token=result.token)


@router.post(
    "/logout",
    summary="End session",
    description="Remove the server-side session of the presented token, if any. Tokens stay valid until expiry.",
    operation_id="logout",
    responses={
        200: {"description": "Successfully logged out"},
        500: {"model": ErrorResponse, "description": "Session teardown failed"},
    },
)
async def logout(request: Request, app: AppDep, token: TokenDep) -> MessageResponse:
    await app.logout(token)
    request.session.clear()
    return MessageResponse(message="Logged out successfully")
