from fastapi import APIRouter, Depends, status

from services.schemas import User, UserCreate, UserUpdate
from utils.context import AppContext, get_context
from utils.errors import ValidationError

router = APIRouter(prefix="/api/user", tags=["User"])


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, ctx: AppContext = Depends(get_context)):
    if not body.email:
        raise ValidationError("Email is required")
    return await ctx.user_store.create(body.name, body.email, body.role)


@router.get("/{email}", response_model=User)
async def get_user(email: str, ctx: AppContext = Depends(get_context)):
    return await ctx.user_store.get_by_email(email)


# name and role only; the email is the key
@router.put("/{email}", response_model=User)
async def update_user(email: str, body: UserUpdate, ctx: AppContext = Depends(get_context)):
    return await ctx.user_store.update_by_email(email, name=body.name, role=body.role)
