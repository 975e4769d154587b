# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Partner / friend lookups and pair-name formatting.
Pure functions over the member directory.
"""

from typing import Mapping, Optional

from squarehead.models.domain import Member


def partner_of(member: Member, directory: Mapping[int, Member]) -> Optional[int]:
    """
    Id of ``member``'s partner. Falls back to a member whose ``partner_id``
    points back at ``member`` when the forward link is missing.
    """
    if member.partner_id is not None and member.partner_id != member.id:
        return member.partner_id
    for other in directory.values():
        if other.partner_id == member.id and other.id != member.id:
            return other.id
    return None


def are_partners(
    first_id: Optional[int],
    second_id: Optional[int],
    directory: Mapping[int, Member],
) -> bool:
    if first_id is None or second_id is None:
        return False
    first = directory.get(first_id)
    second = directory.get(second_id)
    if first is None or second is None:
        return False
    return first.partner_id == second_id or second.partner_id == first_id


def last_name(name: str) -> str:
    parts = name.split()
    return parts[-1] if len(parts) > 1 else ""


def format_pair_names(name1: str, name2: str, partners: bool = False) -> str:
    """
    Roster rendering of the two squareheads on one night.

    Partners sharing a surname read ``"Ann & Bob Smith"``, other partners
    ``"Ann Smith & Bob Jones"``; non-partners are ordered by surname and
    comma separated.
    """
    if not name1 and not name2:
        return ""
    if not name1:
        return name2
    if not name2:
        return name1

    if partners:
        first1, _, surname1 = name1.partition(" ")
        first2, _, surname2 = name2.partition(" ")
        if surname1 and surname2 and surname1.lower() == surname2.lower():
            return f"{first1} & {first2} {surname1}"
        return f"{name1} & {name2}"

    if last_name(name1).lower() > last_name(name2).lower():
        name1, name2 = name2, name1
    return f"{name1}, {name2}"
