"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from farm_engine.config import Settings, get_settings
from farm_engine.permissions import Role, has_permission, parse_role


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency.

    The session factory is created by the application lifespan. Handlers
    commit explicitly; anything left uncommitted is rolled back on close.
    """
    factory = request.app.state.session_factory
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return getattr(request.app.state, "settings", None) or get_settings()


async def get_role(
    x_user_role: Annotated[str | None, Header()] = None,
) -> Role:
    """Extract the caller's role from header."""
    if not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Role header is required",
        )
    role = parse_role(x_user_role)
    if role is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Unknown role '{x_user_role}'",
        )
    return role


def require_permission(resource: str, action: str) -> Callable[..., Awaitable[Role]]:
    """Build a dependency that admits only roles allowed on resource/action."""

    async def checker(role: Annotated[Role, Depends(get_role)]) -> Role:
        if not has_permission(role, resource, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{role.value}' may not {action} {resource}",
            )
        return role

    return checker


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
