import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from jugsite.schemas.event import Event, EventCreate

logger = logging.getLogger(__name__)

TIMELINE_PK = "EVENT_TIMELINE"


def timeline_key(held_on: datetime) -> str:
    """Sort key for the events-by-date index; UTC so keys compare as strings"""
    return f"DATE#{held_on.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')}"


class EventService:
    def __init__(self, dynamodb_resource, table_name="CommunityApp"):
        self.dynamodb = dynamodb_resource
        self.table = dynamodb_resource.Table(table_name)

    def create_event(self, event_data: EventCreate) -> Event:
        """Store a new event under the next numeric id"""
        if event_data.heldOn.tzinfo is None:
            raise ValueError("heldOn must carry a timezone")

        event_id = self._next_event_id()
        created_at = datetime.now(timezone.utc)

        item = {
            "PK": f"EVENT#{event_id}",
            "SK": "DETAIL",
            "id": event_id,
            "title": event_data.title,
            "description": event_data.description,
            "heldOn": event_data.heldOn.isoformat(),
            "duration": event_data.duration,
            "needsRegistration": event_data.needsRegistration,
            "status": event_data.status.value,
            "registrationCount": 0,
            "createdAt": created_at.isoformat(),
        }

        # Optional fields
        if event_data.speaker:
            item["speaker"] = event_data.speaker
        if event_data.location:
            item["location"] = event_data.location
        if event_data.maxNumberOfRegistrations is not None:
            item["maxNumberOfRegistrations"] = event_data.maxNumberOfRegistrations

        item["GSI_EventsByDate_PK"] = TIMELINE_PK
        item["GSI_EventsByDate_SK"] = f"{timeline_key(event_data.heldOn)}#EVENT#{event_id:010d}"

        try:
            self.table.put_item(
                Item=item, ConditionExpression="attribute_not_exists(PK)"
            )
        except ClientError as e:
            raise Exception(f"Failed to create event: {e}")

        logger.info("Created event %s (%s)", event_id, event_data.title)
        return self._to_event(item)

    def get_event(self, event_id: int) -> Optional[Event]:
        """Look up an event by its numeric id"""
        try:
            response = self.table.get_item(
                Key={"PK": f"EVENT#{event_id}", "SK": "DETAIL"}
            )
        except ClientError as e:
            raise Exception(f"Failed to get event: {e}")

        item = response.get("Item")
        return self._to_event(item) if item else None

    def find_upcoming_events(self, now: Optional[datetime] = None) -> List[Event]:
        """Events that have not started yet, ordered by start ascending"""
        now = now or datetime.now(timezone.utc)
        key_condition = Key("GSI_EventsByDate_PK").eq(TIMELINE_PK) & Key(
            "GSI_EventsByDate_SK"
        ).gte(timeline_key(now))

        events = []
        last_evaluated_key = None
        while True:
            query_params = {
                "IndexName": "GSI_EventsByDate",
                "KeyConditionExpression": key_condition,
                "ScanIndexForward": True,
            }
            if last_evaluated_key:
                query_params["ExclusiveStartKey"] = last_evaluated_key

            response = self.table.query(**query_params)
            events.extend(self._to_event(item) for item in response.get("Items", []))

            last_evaluated_key = response.get("LastEvaluatedKey")
            if not last_evaluated_key:
                break

        return events

    def _next_event_id(self) -> int:
        try:
            response = self.table.update_item(
                Key={"PK": "COUNTER", "SK": "EVENT"},
                UpdateExpression="ADD #value :one",
                ExpressionAttributeNames={"#value": "value"},
                ExpressionAttributeValues={":one": 1},
                ReturnValues="UPDATED_NEW",
            )
        except ClientError as e:
            raise Exception(f"Failed to allocate event id: {e}")
        return int(response["Attributes"]["value"])

    @staticmethod
    def _to_event(item: Dict[str, Any]) -> Event:
        max_registrations = item.get("maxNumberOfRegistrations")
        return Event(
            id=int(item["id"]),
            title=item["title"],
            description=item["description"],
            heldOn=datetime.fromisoformat(item["heldOn"]),
            duration=int(item["duration"]),
            speaker=item.get("speaker"),
            location=item.get("location"),
            needsRegistration=item.get("needsRegistration", True),
            status=item.get("status", "open"),
            maxNumberOfRegistrations=(
                int(max_registrations) if max_registrations is not None else None
            ),
            createdAt=datetime.fromisoformat(item["createdAt"]),
        )
