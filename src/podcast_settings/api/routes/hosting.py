from fastapi import APIRouter, Request

from ...consts import HOSTING_ACCOUNT_ID_FIELD
from ...hosting import CredentialCheck

router = APIRouter(prefix="/hosting", tags=["hosting"])


@router.get("/validate", response_model=CredentialCheck)
def validate_credentials(request: Request, api_token: str = "", email: str = ""):
    components = request.app.state.components
    check = components.hosting.validate_api_credentials(api_token, email)
    if check.valid and check.account_id:
        components.engine.submit(HOSTING_ACCOUNT_ID_FIELD, None, check.account_id)
    return check
