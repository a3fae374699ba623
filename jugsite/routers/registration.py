import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request

from jugsite.config import SiteSettings, get_settings
from jugsite.database.dynamodb import get_db_connection
from jugsite.routers.events import get_event_service
from jugsite.routers.web import parse_id, pop_flash, redirect, render_view, request_locale, set_flash
from jugsite.schemas.registration import RegistrationInput
from jugsite.services.email_service import EmailService
from jugsite.services.errors import RegistrationStoreError
from jugsite.services.event_service import EventService
from jugsite.services.registration_service import RegistrationService
from jugsite.services.registration_workflow import NotFound, Rejected, RegistrationWorkflow
from jugsite.services.verification import RecaptchaVerifier, VerificationContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/register", tags=["registration"])


def get_registration_service(settings: SiteSettings = Depends(get_settings)):
    """Dependency to get RegistrationService instance"""
    db = get_db_connection(settings)
    return RegistrationService(db, settings.table_name)


def get_human_verifier(settings: SiteSettings = Depends(get_settings)):
    return RecaptchaVerifier(settings)


def get_email_service(settings: SiteSettings = Depends(get_settings)):
    """Dependency to get EmailService instance"""
    return EmailService(settings)


def get_registration_workflow(
    background_tasks: BackgroundTasks,
    event_service: EventService = Depends(get_event_service),
    registration_service: RegistrationService = Depends(get_registration_service),
    human_verifier=Depends(get_human_verifier),
    email_service: EmailService = Depends(get_email_service),
):
    def send_confirmation(registration, event, locale):
        # Delivered after the response has been sent
        background_tasks.add_task(
            email_service.send_confirmation_mail, registration, event, locale
        )

    return RegistrationWorkflow(
        lookup_event=event_service.get_event,
        verify_human=human_verifier,
        registration_store=registration_service,
        send_confirmation=send_confirmation,
    )


@router.get("/{event_id}")
async def register_form(
    event_id: str,
    request: Request,
    event_service: EventService = Depends(get_event_service),
):
    """Registration form, or the confirmation right after registering"""
    event = None
    parsed_id = parse_id(event_id)
    if parsed_id is not None:
        event = event_service.get_event(parsed_id)
    if event is None:
        return redirect("/")

    model = {
        "registered": False,
        "event": event,
        "registration": RegistrationInput(),
        "alerts": [],
    }
    model.update(pop_flash(request))
    return render_view("register", model)


@router.post("/{event_id}")
async def register(
    event_id: str,
    request: Request,
    workflow: RegistrationWorkflow = Depends(get_registration_workflow),
    settings: SiteSettings = Depends(get_settings),
):
    """Register for an event"""
    parsed_id = parse_id(event_id)
    if parsed_id is None:
        return redirect("/")

    form = await request.form()
    registration_input = RegistrationInput(
        firstName=form.get("firstName"),
        lastName=form.get("name", form.get("lastName")),
        email=form.get("email"),
    )
    context = VerificationContext(
        response_token=form.get("g-recaptcha-response"),
        remote_ip=request.client.host if request.client else None,
    )
    locale = request_locale(request, settings.default_locale, settings.get_supported_locales_list())

    try:
        outcome = workflow.register(parsed_id, registration_input, context, locale)
    except RegistrationStoreError as e:
        logger.error("Registration for event %s failed: %s", parsed_id, e)
        raise HTTPException(status_code=500, detail="Registration could not be stored")

    if isinstance(outcome, NotFound):
        return redirect("/")

    if isinstance(outcome, Rejected):
        return render_view(
            "register",
            {
                "registered": False,
                "event": outcome.event,
                "registration": outcome.registration,
                "alerts": [outcome.alert],
            },
        )

    set_flash(
        request,
        {
            "registered": True,
            "event": outcome.event,
            "registration": outcome.registration,
            "alerts": [outcome.alert],
        },
    )
    return redirect(f"/register/{outcome.event.id}")
