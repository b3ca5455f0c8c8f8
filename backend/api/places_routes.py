from typing import Optional

from fastapi import APIRouter, Depends, Query

from places.client import GeocodingClient, PlaceResult, get_geocoding_client
from schemas.base import CamelModel

router = APIRouter()


class GeocodeResponse(CamelModel):
    result: Optional[PlaceResult] = None


@router.get("/geocode", response_model=GeocodeResponse)
async def geocode(
    address: Optional[str] = None,
    place_id: Optional[str] = Query(None, alias="placeId"),
    client: GeocodingClient = Depends(get_geocoding_client),
):
    """
    Resolve an address or place id to coordinates

    Returns {"result": null} when nothing matches.
    """
    return GeocodeResponse(result=await client.lookup(address=address, place_id=place_id))
