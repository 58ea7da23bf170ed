from __future__ import annotations

from fastapi import APIRouter, Response

from unity_hands.api.schemas import SuccessResponse, TokenRequest
from unity_hands.core.tokens import clear_token_cookie, issue_token, set_token_cookie

router = APIRouter(tags=["auth"])


@router.post("/jwt", response_model=SuccessResponse)
def create_token(payload: TokenRequest, response: Response) -> SuccessResponse:
    set_token_cookie(response, issue_token(payload.email))
    return SuccessResponse()


@router.post("/logout", response_model=SuccessResponse)
def logout(response: Response) -> SuccessResponse:
    clear_token_cookie(response)
    return SuccessResponse()
