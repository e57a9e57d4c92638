from fastapi import APIRouter

from skillhub.core.modules.user.models import UserView
from skillhub.web.deps import AppDep, IdentityDep
from skillhub.web.openapi import ErrorResponse

router = APIRouter(tags=["profile"])


@router.get(
    "/me",
    summary="Get current user profile",
    description="Get the account of the user the bearer token was issued to.",
    operation_id="getCurrentUser",
    responses={
        200: {"description": "Current user profile"},
        401: {"model": ErrorResponse, "description": "No token"},
        403: {"model": ErrorResponse, "description": "Invalid or expired token"},
        404: {"model": ErrorResponse, "description": "User no longer exists"},
    },
)
async def get_me(app: AppDep, identity: IdentityDep) -> UserView:
    return await app.get_user(identity.id)
