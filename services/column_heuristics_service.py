from typing import Dict, List, Optional, Sequence

# Role -> candidate header fragments, highest priority first.
COLUMN_ROLES: Dict[str, List[str]] = {
    "status": ["status", "approved", "approval"],
    "equipment": ["equipment", "panel", "model", "type"],
    "approver": ["approver", "approved by", "bernard", "iskandar"],
    "date": ["date", "time"],
    "price": ["Total Price Part 1", "total price", "price", "cost"],
    "area": ["Area Usage", "model", "equipment"],
    "minutes": ["Total Minutes", "minutes", "time", "duration"],
    "part": ["Preventive maintenance part", "maintenance part", "part", "component"],
    "activity": ["Type Activity", "activity type", "activity", "type"],
    "pm_start_time": ["start time", "starttime"],
    "parts_created": ["created"],
    "quick_status": ["status", "approval"],
    "quick_equipment": ["equipment", "asset"],
}


def find_column_index(headers: Sequence[str], fragments: Sequence[str]) -> int:
    """
    Index of the first header matching the highest-priority fragment, else -1.
    Fragments are tried in order; headers are scanned in order for each one.
    """
    lowered = [(h or "").lower() for h in headers]
    for fragment in fragments:
        needle = fragment.lower()
        for idx, header in enumerate(lowered):
            if needle in header:
                return idx
    return -1


def find_column(headers: Sequence[str], fragments: Sequence[str]) -> Optional[str]:
    idx = find_column_index(headers, fragments)
    return headers[idx] if idx != -1 else None


def find_role_column(headers: Sequence[str], role: str) -> Optional[str]:
    return find_column(headers, COLUMN_ROLES[role])


def first_matching_index(headers: Sequence[str], fragments: Sequence[str]) -> int:
    """Index of the first header, in header order, containing any fragment; else -1."""
    lowered = [f.lower() for f in fragments]
    for idx, header in enumerate(headers):
        if any(f in (header or "").lower() for f in lowered):
            return idx
    return -1


def matching_columns(headers: Sequence[str], fragments: Sequence[str]) -> List[str]:
    """Every header that contains any of the fragments, in header order."""
    lowered = [f.lower() for f in fragments]
    return [h for h in headers if any(f in (h or "").lower() for f in lowered)]


def detect_maintenance_columns(headers: Sequence[str]) -> Dict[str, List[str]]:
    return {
        "status": matching_columns(headers, COLUMN_ROLES["status"]),
        "equipment": matching_columns(headers, COLUMN_ROLES["equipment"]),
        "approver": matching_columns(headers, COLUMN_ROLES["approver"]),
    }
