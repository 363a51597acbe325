from air.responses import JSONResponse
from fastapi import APIRouter

router = APIRouter(prefix="/items", tags=["items"])


@router.put("/{item_id}")
def update_item(item_id: int):
    return JSONResponse({"id": item_id, "updated": True})


@router.delete("/{item_id}")
def delete_item(item_id: int):
    return JSONResponse({"id": item_id, "deleted": True})
