# bearer_auth/web/endpoints.py
import json
import logging
from fastapi import APIRouter, Depends, Response
from typing import Annotated

from ..authenticators.models import BearerTokenAuthenticator, LoginInfo
from ..authenticators.service import BearerTokenAuthenticatorService
from ..http import Result
from .dependencies import get_authenticator_service, require_authenticator, verify_host_app_secret
from .models import AuthenticatorView, TokenIssueRequest, TokenResponse

logger = logging.getLogger(__name__)
auth_router = APIRouter()


def _json_result(status_code: int, payload: str) -> Result:
    return Result(status_code=status_code, body=payload.encode("utf-8"), media_type="application/json")


@auth_router.post(
    "/tokens",
    response_model=TokenResponse,
    status_code=201,
    summary="Issue a bearer token for an identity established by the host application",
    tags=["Bearer Authentication"]
)
async def issue_token(
    request_data: TokenIssueRequest,
    service: Annotated[BearerTokenAuthenticatorService, Depends(get_authenticator_service)],
    _: Annotated[str, Depends(verify_host_app_secret)]
) -> Response:
    """
    Creates and persists a new authenticator and hands its token to the client.

    The token is returned both in the response body and in the configured header.
    """
    login_info = LoginInfo(provider_id=request_data.provider_id, provider_key=request_data.provider_key)
    logger.info(f"Issuing bearer token for {login_info}.")

    authenticator = await service.create(login_info)
    token = await service.init(authenticator)

    body = TokenResponse(token=token, expires_at=authenticator.expiration_date)
    result = await service.embed(token, _json_result(201, body.model_dump_json()))
    return result.to_starlette()


@auth_router.get(
    "/me",
    response_model=AuthenticatorView,
    summary="Describe the authenticator of the current request",
    tags=["Bearer Authentication"]
)
async def current_authenticator(
    authenticator: Annotated[BearerTokenAuthenticator, Depends(require_authenticator)]
) -> AuthenticatorView:
    return AuthenticatorView.from_domain(authenticator)


@auth_router.post(
    "/tokens/renew",
    summary="Revoke the current token and issue a new one",
    tags=["Bearer Authentication"]
)
async def renew_token(
    authenticator: Annotated[BearerTokenAuthenticator, Depends(require_authenticator)],
    service: Annotated[BearerTokenAuthenticatorService, Depends(get_authenticator_service)]
) -> Response:
    """
    Renews the authenticator of the current request.

    The old token stops working immediately. The new token is sent in the
    configured header only.
    """
    payload = json.dumps({"message": "Token renewed successfully.", "header": service.settings.header_name})
    result = await service.renew_result(authenticator, _json_result(200, payload))
    return result.to_starlette()


@auth_router.delete(
    "/tokens",
    status_code=204,
    summary="Revoke the current token",
    tags=["Bearer Authentication"]
)
async def discard_token(
    authenticator: Annotated[BearerTokenAuthenticator, Depends(require_authenticator)],
    service: Annotated[BearerTokenAuthenticatorService, Depends(get_authenticator_service)]
) -> Response:
    result = await service.discard(authenticator, Result(status_code=204))
    return result.to_starlette()
