"""Registration intake.

A registration attempt runs through these steps in order, stopping at the
first one that fails:

1. the event must exist (otherwise ``NotFound``)
2. the human verification gate must pass
3. the form must be structurally valid
4. business rules: event open, not registered yet, seats left
5. exactly one registration is stored
6. exactly one confirmation is dispatched, errors are only logged

Steps 2 and 3 report the same alert code on purpose.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from jugsite.schemas.event import Event
from jugsite.schemas.registration import Registration, RegistrationForm, RegistrationInput
from jugsite.services.errors import AlertCode, DomainError, RegistrationErrorCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotFound:
    """The event does not exist; the caller goes back home without an alert"""


@dataclass(frozen=True)
class Rejected:
    """The form is shown again with an alert and the unsaved input"""

    alert: str
    event: Event
    registration: RegistrationInput


@dataclass(frozen=True)
class Registered:
    """Stored and notified; the caller redirects to the confirmation view"""

    registration: Registration
    event: Event
    alert: str = AlertCode.REGISTERED.value


WorkflowOutcome = Union[NotFound, Rejected, Registered]


class RegistrationWorkflow:
    def __init__(
        self,
        lookup_event: Callable[[int], Optional[Event]],
        verify_human: Callable[[Any], bool],
        registration_store,
        send_confirmation: Callable[[Registration, Event, str], None],
    ):
        self.lookup_event = lookup_event
        self.verify_human = verify_human
        self.registration_store = registration_store
        self.send_confirmation = send_confirmation

    def register(
        self,
        event_id: int,
        registration_input: RegistrationInput,
        request_context: Any = None,
        locale: str = "en",
    ) -> WorkflowOutcome:
        """Run one registration attempt.

        Only a ``RegistrationStoreError`` escapes; every other failure is
        returned as an outcome.
        """
        event = self.lookup_event(event_id)
        if event is None:
            logger.info("Registration for unknown event %s", event_id)
            return NotFound()

        if not self.verify_human(request_context):
            logger.info("Human verification failed for event %s", event_id)
            return self._reject(AlertCode.INVALID_REGISTRATION, event, registration_input)

        form = self._validate_form(registration_input)
        if form is None:
            return self._reject(AlertCode.INVALID_REGISTRATION, event, registration_input)

        violation = self.check_business_rules(event, form)
        if violation is not None:
            return self._reject(violation, event, registration_input)

        try:
            registration = self.registration_store.create_registration(
                event, Registration.from_form(event.id, form)
            )
        except DomainError as e:
            # Lost a race against a concurrent registration
            return self._reject(e.code, event, registration_input)

        self._notify(registration, event, locale)

        logger.info("Registered %s for event %s", registration.email, event.id)
        return Registered(registration=registration, event=event)

    def check_business_rules(
        self, event: Event, form: RegistrationForm
    ) -> Optional[RegistrationErrorCode]:
        if not event.openForRegistration:
            return RegistrationErrorCode.EVENT_CLOSED
        if self.registration_store.registration_exists(event.id, form.email):
            return RegistrationErrorCode.ALREADY_REGISTERED
        if event.maxNumberOfRegistrations is not None:
            taken = self.registration_store.count_registrations(event.id)
            if taken >= event.maxNumberOfRegistrations:
                return RegistrationErrorCode.EVENT_FULLY_BOOKED
        return None

    @staticmethod
    def _validate_form(registration_input: RegistrationInput) -> Optional[RegistrationForm]:
        try:
            return RegistrationForm.model_validate(registration_input.model_dump())
        except ValidationError as e:
            logger.info("Invalid registration form: %s", e.error_count())
            return None

    def _notify(self, registration: Registration, event: Event, locale: str) -> None:
        try:
            self.send_confirmation(registration, event, locale)
        except Exception:
            logger.exception(
                "Could not dispatch confirmation for event %s", registration.eventId
            )

    @staticmethod
    def _reject(
        code: Union[AlertCode, RegistrationErrorCode],
        event: Event,
        registration_input: RegistrationInput,
    ) -> Rejected:
        logger.info("Registration for event %s rejected: %s", event.id, code.value)
        return Rejected(alert=code.value, event=event, registration=registration_input)
