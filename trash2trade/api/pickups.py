"""Pickup routes"""
from fastapi import APIRouter, Depends, Path

from trash2trade.api.deps import current_actor, pickup_service
from trash2trade.lifecycle import Actor
from trash2trade.models.schemas import MAX_ID, PickupCreate, PickupStatusUpdate
from trash2trade.services.pickups import PickupService

router = APIRouter(prefix="/pickups", tags=["pickups"])


@router.post("", status_code=201)
def create_pickup(
        payload: PickupCreate,
        actor: Actor = Depends(current_actor),
        pickups: PickupService = Depends(pickup_service)
):
    pickup = pickups.create(actor, payload)
    return {"message": "Pickup request created successfully", "pickup": pickup}


@router.get("/my")
def my_pickups(actor: Actor = Depends(current_actor), pickups: PickupService = Depends(pickup_service)):
    return {"pickups": pickups.list_for_requester(actor.id)}


@router.get("/collector")
def collector_pickups(actor: Actor = Depends(current_actor), pickups: PickupService = Depends(pickup_service)):
    return {"pickups": pickups.list_for_collector(actor.id)}


@router.get("/available")
def available_pickups(actor: Actor = Depends(current_actor), pickups: PickupService = Depends(pickup_service)):
    return {"pickups": pickups.list_available()}


# Registered before /{pickup_id} so "stats" is not parsed as an id
@router.get("/stats")
def pickup_stats(actor: Actor = Depends(current_actor), pickups: PickupService = Depends(pickup_service)):
    return {"stats": pickups.stats(actor.id)}


@router.get("/{pickup_id}")
def get_pickup(
        pickup_id: int = Path(..., gt=0, le=MAX_ID),
        actor: Actor = Depends(current_actor),
        pickups: PickupService = Depends(pickup_service)
):
    return {"pickup": pickups.get(actor, pickup_id)}


@router.put("/{pickup_id}/status")
def update_pickup_status(
        payload: PickupStatusUpdate,
        pickup_id: int = Path(..., gt=0, le=MAX_ID),
        actor: Actor = Depends(current_actor),
        pickups: PickupService = Depends(pickup_service)
):
    pickup = pickups.update_status(actor, pickup_id, payload.status, payload.collector_id)
    return {"message": "Pickup updated successfully", "pickup": pickup}


@router.delete("/{pickup_id}")
def delete_pickup(
        pickup_id: int = Path(..., gt=0, le=MAX_ID),
        actor: Actor = Depends(current_actor),
        pickups: PickupService = Depends(pickup_service)
):
    pickups.delete(actor, pickup_id)
    return {"message": "Pickup deleted successfully"}
