import logging
from typing import Any, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ...consts import DEFAULT_SCOPE, SCOPED_SECTIONS
from ...errors import SchemaError
from ...page import SectionView, Tab

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


class SectionsResponse(BaseModel):
    success: bool = True
    tabs: list[Tab]


class SectionSubmitRequest(BaseModel):
    values: dict[str, Any] = {}


class SectionSubmitResponse(BaseModel):
    success: bool
    saved: list[str]
    errors: dict[str, str]


class FieldValueResponse(BaseModel):
    id: str
    scope: Optional[str] = None
    value: Any = None
    stored: bool = False


class FieldSubmitRequest(BaseModel):
    value: Any = None


def _scope_id(
    request: Request, section_key: Optional[str], scope: Optional[str], write: bool = False
) -> Optional[str]:
    """Map a series slug to the id its values are stored under.

    Raises:
        SchemaError: If ``write`` is set and the slug names no configured series.
    """
    if not scope or scope == DEFAULT_SCOPE:
        return None
    if section_key is not None and section_key not in SCOPED_SECTIONS:
        return None
    found = request.app.state.components.page.find_scope(scope)
    if found is not None:
        return found.id
    if write:
        raise SchemaError(f"Unknown series: {scope}")
    logger.warning(f"Unknown series '{scope}', using the default feed")
    return None


@router.get("/sections", response_model=SectionsResponse)
def list_sections(request: Request, active: Optional[str] = None):
    page = request.app.state.components.page
    return SectionsResponse(tabs=page.tabs(active))


@router.get("/sections/{section_key}", response_model=SectionView)
def get_section(request: Request, section_key: str, scope: Optional[str] = None):
    return request.app.state.components.page.render_section(section_key, scope)


@router.post("/sections/{section_key}", response_model=SectionSubmitResponse)
def submit_section(
    request: Request,
    section_key: str,
    body: SectionSubmitRequest,
    scope: Optional[str] = None,
):
    engine = request.app.state.components.engine
    scope_id = _scope_id(request, section_key, scope, write=True)
    result = engine.submit_section(section_key, scope_id, body.values)
    return SectionSubmitResponse(success=result.ok, saved=result.saved, errors=result.errors)


@router.get("/fields/{field_id}", response_model=FieldValueResponse)
def get_field(request: Request, field_id: str, scope: Optional[str] = None):
    engine = request.app.state.components.engine
    field = engine.registry.field(field_id)
    scope_id = _scope_id(request, None, scope)

    value = engine.resolve_field(field, scope_id)
    stored = engine.stored(field_id, scope_id) is not None
    if field.is_secret:
        value = None
    return FieldValueResponse(id=field_id, scope=scope_id, value=value, stored=stored)


@router.put("/fields/{field_id}", response_model=FieldValueResponse)
def put_field(request: Request, field_id: str, body: FieldSubmitRequest, scope: Optional[str] = None):
    engine = request.app.state.components.engine
    scope_id = _scope_id(request, None, scope, write=True)

    value = engine.submit(field_id, scope_id, body.value)
    if engine.registry.field(field_id).is_secret:
        value = None
    return FieldValueResponse(id=field_id, scope=scope_id, value=value, stored=True)
