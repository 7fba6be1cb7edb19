from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.database import get_db
from app.schemas.prompt import PromptCreate, PromptOut, PromptUpdate
from app.services.prompt_service import PromptService
from app.utils.audit_logger import log_prompt_action

router = APIRouter()

PROMPT_NOT_FOUND = "Prompt not found"


def get_prompt_service(db: AsyncSession = Depends(get_db)) -> PromptService:
    return PromptService(db)


@router.post("/prompts", status_code=status.HTTP_201_CREATED, response_model=PromptOut)
async def create_prompt(
    request: Request,
    body: PromptCreate,
    service: PromptService = Depends(get_prompt_service),
) -> PromptOut:
    """Create a prompt; id and created_at are assigned on insert."""
    prompt = await service.create(body.title, body.content)
    log_prompt_action("prompt_created", request, {"prompt_id": str(prompt.id)})
    return PromptOut.model_validate(prompt)


@router.get("/prompts", response_model=list[PromptOut])
async def list_prompts(service: PromptService = Depends(get_prompt_service)) -> list[PromptOut]:
    """Get all prompts, in no particular order."""
    prompts = await service.list_all()
    return [PromptOut.model_validate(p) for p in prompts]


@router.get("/prompts/{prompt_id}", response_model=PromptOut)
async def get_prompt(
    prompt_id: uuid.UUID,
    service: PromptService = Depends(get_prompt_service),
) -> PromptOut:
    """Get a single prompt by id."""
    prompt = await service.get(prompt_id)
    if not prompt:
        raise HTTPException(status_code=404, detail=PROMPT_NOT_FOUND)
    return PromptOut.model_validate(prompt)


@router.put("/prompts/{prompt_id}", response_model=PromptOut)
async def update_prompt(
    request: Request,
    prompt_id: uuid.UUID,
    body: PromptUpdate,
    service: PromptService = Depends(get_prompt_service),
) -> PromptOut:
    """Replace the title and content of a prompt."""
    prompt = await service.update(prompt_id, body.title, body.content)
    if not prompt:
        raise HTTPException(status_code=404, detail=PROMPT_NOT_FOUND)
    log_prompt_action("prompt_updated", request, {"prompt_id": str(prompt_id)})
    return PromptOut.model_validate(prompt)


@router.delete("/prompts/{prompt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prompt(
    request: Request,
    prompt_id: uuid.UUID,
    service: PromptService = Depends(get_prompt_service),
) -> Response:
    """Delete a prompt permanently."""
    if not await service.delete(prompt_id):
        raise HTTPException(status_code=404, detail=PROMPT_NOT_FOUND)
    log_prompt_action("prompt_deleted", request, {"prompt_id": str(prompt_id)})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
