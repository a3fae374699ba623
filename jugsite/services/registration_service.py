import logging
from datetime import datetime
from typing import Any, Dict, List

from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from jugsite.schemas.event import Event
from jugsite.schemas.registration import Registration
from jugsite.services.errors import (
    DuplicateRegistrationError,
    EventFullyBookedError,
    RegistrationStoreError,
)

logger = logging.getLogger(__name__)


def registration_key(event_id: int, email: str) -> Dict[str, str]:
    return {"PK": f"EVENT#{event_id}", "SK": f"REGISTRATION#{email.lower()}"}


class RegistrationService:
    """Stores registrations next to their event.

    One registration per (event, email) and the event's capacity are both
    enforced inside a single transaction, so concurrent attempts end up
    with the same error codes as the pre-checks.
    """

    def __init__(self, dynamodb_resource, table_name="CommunityApp"):
        self.dynamodb = dynamodb_resource
        self.table = dynamodb_resource.Table(table_name)

    def registration_exists(self, event_id: int, email: str) -> bool:
        try:
            response = self.table.get_item(
                Key=registration_key(event_id, email), ProjectionExpression="PK"
            )
        except ClientError as e:
            raise RegistrationStoreError(f"Failed to look up registration: {e}")
        return "Item" in response

    def count_registrations(self, event_id: int) -> int:
        try:
            response = self.table.get_item(
                Key={"PK": f"EVENT#{event_id}", "SK": "DETAIL"},
                ProjectionExpression="registrationCount",
            )
        except ClientError as e:
            raise RegistrationStoreError(f"Failed to count registrations: {e}")
        return int(response.get("Item", {}).get("registrationCount", 0))

    def create_registration(self, event: Event, registration: Registration) -> Registration:
        """Insert the registration and bump the event's registration count.

        Raises:
            DuplicateRegistrationError: The email is already registered.
            EventFullyBookedError: No seats left.
            RegistrationStoreError: Any other persistence failure.
        """
        item = {
            **registration_key(event.id, registration.email),
            "eventId": event.id,
            "email": registration.email,
            "lastName": registration.lastName,
            "firstName": registration.firstName,
            "confirmed": registration.confirmed,
            "createdAt": registration.createdAt.isoformat(),
        }

        # Condition on the event: it must exist and have a seat left
        event_update = {
            "TableName": self.table.table_name,
            "Key": {"PK": f"EVENT#{event.id}", "SK": "DETAIL"},
            "UpdateExpression": "ADD registrationCount :one",
            "ConditionExpression": "attribute_exists(PK)",
            "ExpressionAttributeValues": {":one": 1},
        }
        if event.maxNumberOfRegistrations is not None:
            event_update["ConditionExpression"] += (
                " AND (attribute_not_exists(registrationCount)"
                " OR registrationCount < :max)"
            )
            event_update["ExpressionAttributeValues"][":max"] = (
                event.maxNumberOfRegistrations
            )

        transact_items = [
            {
                "Put": {
                    "TableName": self.table.table_name,
                    "Item": item,
                    "ConditionExpression": "attribute_not_exists(PK)",
                }
            },
            {"Update": event_update},
        ]

        try:
            self.dynamodb.meta.client.transact_write_items(TransactItems=transact_items)
        except ClientError as e:
            if e.response["Error"]["Code"] != "TransactionCanceledException":
                raise RegistrationStoreError(f"Failed to create registration: {e}")
            raise self._cancellation_error(event, registration, e)

        logger.info("Stored registration for event %s", event.id)
        return registration

    def list_registrations(self, event_id: int) -> List[Registration]:
        """All registrations of one event"""
        registrations = []
        last_evaluated_key = None
        while True:
            query_params = {
                "KeyConditionExpression": Key("PK").eq(f"EVENT#{event_id}")
                & Key("SK").begins_with("REGISTRATION#"),
            }
            if last_evaluated_key:
                query_params["ExclusiveStartKey"] = last_evaluated_key

            try:
                response = self.table.query(**query_params)
            except ClientError as e:
                raise RegistrationStoreError(f"Failed to list registrations: {e}")

            registrations.extend(
                self._to_registration(item) for item in response.get("Items", [])
            )
            last_evaluated_key = response.get("LastEvaluatedKey")
            if not last_evaluated_key:
                break

        return registrations

    def _cancellation_error(
        self, event: Event, registration: Registration, error: ClientError
    ) -> Exception:
        """Map a cancelled transaction to the business rule it violated"""
        reasons = error.response.get("CancellationReasons", [])
        codes = [reason.get("Code") for reason in reasons]

        if len(codes) == 2:
            if codes[0] == "ConditionalCheckFailed":
                return DuplicateRegistrationError(event.id)
            if codes[1] == "ConditionalCheckFailed":
                return EventFullyBookedError(event.id)

        # No usable reasons, ask the table what happened
        if self.registration_exists(event.id, registration.email):
            return DuplicateRegistrationError(event.id)
        if event.maxNumberOfRegistrations is not None:
            if self.count_registrations(event.id) >= event.maxNumberOfRegistrations:
                return EventFullyBookedError(event.id)
        return RegistrationStoreError(f"Failed to create registration: {error}")

    @staticmethod
    def _to_registration(item: Dict[str, Any]) -> Registration:
        return Registration(
            eventId=int(item["eventId"]),
            email=item["email"],
            lastName=item["lastName"],
            firstName=item["firstName"],
            confirmed=item.get("confirmed", False),
            createdAt=datetime.fromisoformat(item["createdAt"]),
        )
