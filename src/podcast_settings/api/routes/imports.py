from fastapi import APIRouter, Request
from pydantic import BaseModel

from ...i18n import gettext as _
from ...notifier import ImportRequest

router = APIRouter(prefix="/import", tags=["import"])


class ImportResponse(BaseModel):
    success: bool = True
    message: str


@router.post("", response_model=ImportResponse)
def request_import(request: Request, body: ImportRequest):
    request.app.state.components.notifier.notify(body)
    return ImportResponse(
        message=_("Thanks, someone will be in touch to assist with importing your podcast.")
    )
