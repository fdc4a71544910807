import logging

from fastapi import APIRouter, Depends, HTTPException

from helpers.directory import read_tutors
from helpers.errors import BookingError
from helpers.schemas import TutorCreateRequest
from helpers.store import BookingStore, get_store

logger = logging.getLogger(__name__)

tutor_router = APIRouter()


@tutor_router.get("/tutors")
async def list_tutors(store: BookingStore = Depends(get_store)):
    try:
        return {"tutors": await read_tutors(store)}
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@tutor_router.post("/tutors", status_code=201)
async def create_tutor(req: TutorCreateRequest, store: BookingStore = Depends(get_store)):
    try:
        tutor = await store.retrying(lambda: store.create_tutor(
            name=req.name,
            email=req.email,
            subjects=req.subjects,
            availability=req.availability,
        ))
        logger.info(f"Tutor {tutor.id} created")
        return {"tutor": tutor.to_dict()}
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail="Failed to create tutor")
    except Exception as e:
        logger.exception(f"Error creating tutor: {e}")
        raise HTTPException(status_code=500, detail="Failed to create tutor")
