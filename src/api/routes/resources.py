"""Resource (employee) endpoints."""

from fastapi import APIRouter, Depends, status

from api.dependencies import get_resource_store
from api.models.requests import ResourceCreate, ResourcePatch
from api.models.responses import ResourceListResponse, ResourceOut, ResourceResponse
from services.store import ResourceStore

router = APIRouter(prefix="/resources", tags=["resources"])


@router.get("", response_model=ResourceListResponse)
async def list_resources(store: ResourceStore = Depends(get_resource_store)):
    resources = await store.list_resources()
    return ResourceListResponse(resources=[ResourceOut.from_resource(r) for r in resources])


@router.post("", response_model=ResourceResponse, status_code=status.HTTP_201_CREATED)
async def create_resource(
    body: ResourceCreate, store: ResourceStore = Depends(get_resource_store)
):
    resource = await store.create_resource(body.name, body.role, body.color)
    return ResourceResponse(resource=ResourceOut.from_resource(resource))


@router.patch("/{resource_id}", response_model=ResourceResponse)
async def update_resource(
    resource_id: str, body: ResourcePatch, store: ResourceStore = Depends(get_resource_store)
):
    resource = await store.update_resource(resource_id, body.to_changes())
    return ResourceResponse(resource=ResourceOut.from_resource(resource))


@router.delete("/{resource_id}", response_model=ResourceResponse)
async def delete_resource(resource_id: str, store: ResourceStore = Depends(get_resource_store)):
    """Delete a resource together with all of its events."""
    resource = await store.delete_resource(resource_id)
    return ResourceResponse(resource=ResourceOut.from_resource(resource))
