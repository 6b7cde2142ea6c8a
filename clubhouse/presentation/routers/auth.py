from datetime import datetime
from typing import Annotated, Callable

from fastapi import APIRouter, Depends

from clubhouse.application.authenticate import authenticate
from clubhouse.application.issue_code import issue_code
from clubhouse.domain.ports.email_port import EmailPort
from clubhouse.domain.ports.unit_of_work import UnitOfWorkPort
from clubhouse.presentation.dependencies import (
    get_clock,
    get_code_ttl_seconds,
    get_email_port,
    get_uow,
    limit_auth_attempts,
)
from clubhouse.schemas.requests import LoginIn, RequestCodeIn
from clubhouse.schemas.responses import MessageOut, SessionOut

router = APIRouter(tags=["Auth"], dependencies=[Depends(limit_auth_attempts)])


@router.post("/requestcode", response_model=MessageOut)
async def post_request_code(
    body: RequestCodeIn,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    email_port: Annotated[EmailPort, Depends(get_email_port)],
    code_ttl_seconds: Annotated[int, Depends(get_code_ttl_seconds)],
    clock: Annotated[Callable[[], datetime], Depends(get_clock)],
):
    await issue_code(
        uow=uow,
        email_port=email_port,
        email=body.email,
        code_ttl_seconds=code_ttl_seconds,
        now=clock,
    )
    return MessageOut(message="Authorization code sent")


@router.post("/login", response_model=SessionOut)
async def post_login(
    body: LoginIn,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    code_ttl_seconds: Annotated[int, Depends(get_code_ttl_seconds)],
    clock: Annotated[Callable[[], datetime], Depends(get_clock)],
):
    token = await authenticate(
        uow=uow,
        email=body.email,
        code=body.code,
        ip_address=body.ip_address,
        code_ttl_seconds=code_ttl_seconds,
        now=clock,
    )
    return SessionOut(session_id=token)
