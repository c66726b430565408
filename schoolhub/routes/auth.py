from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import get_caller_context
from schoolhub.core.logging import logger
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.auth import CallerContextResponse, ChangePasswordRequest, LoginRequest, TokenResponse
from schoolhub.schemas.common import MessageResponse
from schoolhub.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: Request,
    credentials: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Authenticate with an email, username or admission number.
    The access token is returned and also set as a cookie.
    """
    client_ip = request.client.host if request.client else "unknown"
    logger.info(
        "Login attempt initiated",
        extra={"request_id": getattr(request.state, "request_id", None), "ip": client_ip}
    )
    return await auth_service.login(credentials.username, credentials.password, response)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    AuthService.clear_auth_cookie(response)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=CallerContextResponse)
async def me(ctx: CallerContext = Depends(get_caller_context)):
    return AuthService.describe(ctx)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    data: ChangePasswordRequest,
    ctx: CallerContext = Depends(get_caller_context),
    auth_service: AuthService = Depends(get_auth_service)
):
    await auth_service.change_password(ctx, data.current_password, data.new_password)
    return MessageResponse(message="Password changed successfully")
