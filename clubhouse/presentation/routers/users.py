from typing import Annotated

from fastapi import APIRouter, Depends, status

from clubhouse.application.profile import get_user, update_user, update_user_avatar
from clubhouse.domain.ports.unit_of_work import UnitOfWorkPort
from clubhouse.presentation.dependencies import get_presented_token, get_uow
from clubhouse.schemas.requests import AvatarUpdateIn, UserLookupIn, UserUpdateIn
from clubhouse.schemas.responses import UserOut

router = APIRouter(tags=["Users"])

Token = Annotated[str | None, Depends(get_presented_token)]
UoW = Annotated[UnitOfWorkPort, Depends(get_uow)]


@router.post("/getuser", response_model=UserOut)
async def post_get_user(body: UserLookupIn, uow: UoW, token: Token):
    return await get_user(uow, body.email, token)


@router.post("/updateuser", status_code=status.HTTP_204_NO_CONTENT)
async def post_update_user(body: UserUpdateIn, uow: UoW, token: Token) -> None:
    await update_user(uow, body.email, token, body.profile_fields())


@router.post("/updateuseravatar", status_code=status.HTTP_204_NO_CONTENT)
async def post_update_user_avatar(body: AvatarUpdateIn, uow: UoW, token: Token) -> None:
    await update_user_avatar(uow, body.email, token, body.avatar)
