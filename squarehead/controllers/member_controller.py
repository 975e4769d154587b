# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Member directory endpoints.
Thin HTTP layer — delegates ALL logic to MemberService.
"""

from fastapi import APIRouter, Depends, HTTPException

from squarehead.core.dependencies import get_member_service
from squarehead.models.domain import Member
from squarehead.schemas.squarehead import (
    MemberCreateRequest,
    MemberResponse,
    MemberUpdateRequest,
)
from squarehead.services.member_service import MemberService

router = APIRouter(prefix="/api/v1", tags=["Members"])

# Columns that cannot be cleared with an explicit null.
_REQUIRED_FIELDS = ("first_name", "last_name", "email", "status")


def _to_response(member: Member) -> dict:
    return dict(member.model_dump(mode="json"), display_name=member.display_name)


@router.get("/members")
def list_members(
    service: MemberService = Depends(get_member_service),
):
    """List every member of the club."""
    members = [_to_response(m) for m in service.list_members()]
    return {"members": members, "count": len(members)}


@router.get("/members/assignable")
def list_assignable_members(
    service: MemberService = Depends(get_member_service),
):
    """Members eligible for squarehead duty."""
    members = [_to_response(m) for m in service.list_assignable()]
    return {"members": members, "count": len(members)}


@router.get("/members/{member_id}", response_model=MemberResponse)
def get_member(
    member_id: int,
    service: MemberService = Depends(get_member_service),
):
    try:
        return _to_response(service.get_member(member_id))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/members", status_code=201, response_model=MemberResponse)
def create_member(
    payload: MemberCreateRequest,
    service: MemberService = Depends(get_member_service),
):
    """Add a member. Setting ``partner_id`` pairs both members."""
    try:
        return _to_response(service.create_member(payload.model_dump()))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/members/{member_id}", response_model=MemberResponse)
def update_member(
    member_id: int,
    payload: MemberUpdateRequest,
    service: MemberService = Depends(get_member_service),
):
    """Partially update a member; an explicit null clears partner or friend."""
    data = payload.model_dump(exclude_unset=True)
    for field in _REQUIRED_FIELDS:
        if field in data and data[field] is None:
            raise HTTPException(status_code=400, detail=f"Field '{field}' cannot be null")
    try:
        return _to_response(service.update_member(member_id, data))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/members/{member_id}")
def delete_member(
    member_id: int,
    service: MemberService = Depends(get_member_service),
):
    """Remove a member and every reference to them."""
    try:
        return service.delete_member(member_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
