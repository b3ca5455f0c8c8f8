"""
Field-name translation between the API (camelCase) and storage columns (snake_case).

The maps are explicit so every field the application uses has exactly one
storage column, and to_storage/from_storage are inverses of each other.
Storage-only columns (user_id) are dropped on the way out.
"""

from typing import Any, Mapping


JOB_FIELDS: dict[str, str] = {
    "id": "id",
    "company": "company",
    "position": "position",
    "jobUrl": "job_url",
    "applicationDate": "application_date",
    "status": "status",
    "location": "location",
    "notes": "notes",
    "latitude": "latitude",
    "longitude": "longitude",
    "formattedAddress": "formatted_address",
    "placeId": "place_id",
    "isFavorite": "is_favorite",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

JOB_EVENT_FIELDS: dict[str, str] = {
    "id": "id",
    "jobId": "job_id",
    "eventType": "event_type",
    "eventDate": "event_date",
    "title": "title",
    "description": "description",
    "interviewRound": "interview_round",
    "interviewType": "interview_type",
    "interviewLink": "interview_link",
    "interviewResult": "interview_result",
    "notes": "notes",
    "metadata": "metadata",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def to_storage(payload: Mapping[str, Any], fields: Mapping[str, str]) -> dict:
    """
    Translate an API payload into a storage row.

    Raises:
        KeyError: If the payload has a field with no storage column
    """
    return {fields[key]: value for key, value in payload.items()}


def from_storage(row: Mapping[str, Any], fields: Mapping[str, str]) -> dict:
    """Translate a storage row into an API payload, ignoring storage-only columns."""
    columns = {column: key for key, column in fields.items()}
    return {columns[column]: value for column, value in row.items() if column in columns}
