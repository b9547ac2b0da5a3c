"""Tree endpoints - read the duo's tree and reconcile its stage."""

from fastapi import APIRouter, Depends

from app.api.deps import get_tree_service, http_errors
from app.core.clock import utc_now
from app.schemas.tree import TreeState, TreeSyncResponse
from app.services.tree_service import TreeService

router = APIRouter()


@router.get("/{duo_id}", response_model=TreeState)
async def get_tree(duo_id: int, service: TreeService = Depends(get_tree_service)):
    with http_errors():
        return await service.get_tree(duo_id)


@router.post("/{duo_id}/sync", response_model=TreeSyncResponse)
async def sync_tree(duo_id: int, service: TreeService = Depends(get_tree_service)):
    """Evolve the tree if the duo's trust score has crossed a stage boundary."""
    with http_errors():
        result = await service.sync_tree_stage(duo_id, utc_now())
    return TreeSyncResponse.model_validate(result)
