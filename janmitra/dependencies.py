from typing import Annotated, Optional, Literal, Iterator
from fastapi import Request, Depends, Path
from fastapi.security import OAuth2
from fastapi.openapi.models import OAuthFlows as OAuthFlowsModel
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session
from pydantic import BaseModel
from janmitra.config import Settings, MAX_DB_INT
from janmitra.exceptions import JanmitraError, MissingToken, InvalidToken, Forbidden
from janmitra.storage import PhotoStorage
from janmitra.domain.session.service import SessionLedger
from janmitra.domain.session.schemas import Identity
from janmitra.domain.user.models import STAFF_ROLES


class DefaultResponseModel(BaseModel):
    """Used for type hinting and creating examples"""
    message: str

class DefaultErrorModel(BaseModel):
    """Used for creating examples"""
    detail: str
    code: str

class Example(BaseModel):
    """
    Used for making example response in CreateExampleResponse function
    """
    name: str
    summary: str | None = None
    description: str | None = None
    value: dict | BaseModel

def CreateExampleResponse(
    *,
    code: int,
    description: str = '',
    content_type: Literal[
        'application/json',
        'text/plain',
        'multipart/form-data',
    ] = 'application/json',
    examples: list[Example] = [Example(name="Example", summary=None, description=None, value=DefaultResponseModel(message="example"))]
) -> dict[int, dict[str, any]]:
    """
    Allows for quick docs building

    Pydantic models can be used as value for example

    Raises `AttributeError` when amount of examples is `<0`
    """

    if len(examples) < 1:
        raise AttributeError(name="You need to provide atleast one example")

    return {
        code: {
            "description": description,
            "content": {
                content_type: {
                    "examples": {
                        example.name: {
                            "summary": example.summary,
                            "description": example.description,
                            "value": example.value
                        }
                        for example in examples
                    }
                }
            }
        }
    }

def ErrorExamples(*errors: JanmitraError) -> dict[int, dict[str, any]]:
    """
    Builds the example responses for the given engine errors,
    grouping them by HTTP status.
    """

    output = {}

    for error in errors:
        example = Example(
            name=type(error).__name__,
            summary=error.detail,
            value=DefaultErrorModel(detail=error.detail, code=error.code)
        )
        if error.status_code in output:
            output[error.status_code]["content"]["application/json"]["examples"][example.name] = {
                "summary": example.summary,
                "description": example.description,
                "value": example.value
            }
        else:
            output.update(CreateExampleResponse(code=error.status_code, description=error.detail, examples=[example]))

    return output


# ids outside the INTEGER range are rejected before they reach the store
RowId = Annotated[int, Path(ge=1, le=MAX_DB_INT)]


def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_db(request: Request) -> Iterator[Session]:
    """
    Function responsible for giving access to database
    """

    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()

def get_storage(request: Request) -> PhotoStorage:
    return request.app.state.storage

def get_ledger(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)]
) -> SessionLedger:
    return SessionLedger(db, settings)


class OAuth2BearerToken(OAuth2):
    """
    Reads the session token from `Authorization: Bearer <token>`.

    Never fails on its own, a missing token is returned as `None`
    and rejected later by `authenticate` with a proper error.
    """

    def __init__(
        self,
        tokenUrl: str,
        scheme_name: Optional[str] = None,
        scopes: Optional[dict[str, str]] = None,
    ):
        if not scopes:
            scopes = {}
        flows = OAuthFlowsModel(password={"tokenUrl": tokenUrl, "scopes": scopes})
        super().__init__(flows=flows, scheme_name=scheme_name, auto_error=False)

    async def __call__(self, request: Request) -> Optional[str]:
        authorization = request.headers.get("Authorization")
        if not authorization:
            return None

        scheme, token = get_authorization_scheme_param(authorization)
        if scheme.lower() != "bearer" or not token:
            raise InvalidToken()

        return token

oauth2_scheme = OAuth2BearerToken(tokenUrl="/api/auth/login")


def authenticate(token: Optional[str], ledger: SessionLedger) -> Identity:
    if not token:
        raise MissingToken()

    claims = ledger.decode(token)
    ledger.lookup(token)

    return Identity(user_id=claims["id"], username=claims["username"], role=claims["role"])

def authorize(identity: Identity, roles: tuple[str, ...]) -> None:
    if identity.role not in roles:
        raise Forbidden()


def get_token(token: Annotated[Optional[str], Depends(oauth2_scheme)]) -> Optional[str]:
    return token

def get_identity(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    ledger: Annotated[SessionLedger, Depends(get_ledger)]
) -> Identity:
    return authenticate(token, ledger)

def require_roles(*roles: str):
    def dependency(identity: Annotated[Identity, Depends(get_identity)]) -> Identity:
        authorize(identity, roles)
        return identity

    return dependency

require_staff = require_roles(*STAFF_ROLES)
