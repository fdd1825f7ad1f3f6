import logging

from fastapi import APIRouter, Depends, HTTPException

from autoclinic.core.auth import AuthenticatedIdentity, get_current_identity
from autoclinic.core.config import settings
from autoclinic.schemas.support import SupportReport
from autoclinic.services.email import EmailDeliveryError, send_support_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/support", tags=["support"])

WHATS_NEW = [
    {
        "version": "1.2.0",
        "date": "2025-08-12",
        "changes": [
            {"type": "New", "text": "Support form added under Settings → Report an Issue."},
            {"type": "Improved", "text": "Check for Updates now shows clearer messages."},
            {"type": "Fixed", "text": "Minor layout polish in Settings and inputs."},
        ],
    },
    {
        "version": "1.1.0",
        "date": "2025-08-05",
        "changes": [
            {"type": "New", "text": "Employee and Shifts screens now refresh more reliably."},
        ],
    },
]


@router.post("/report")
def report_issue(
    payload: SupportReport,
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    if not payload.subject or not payload.message:
        raise HTTPException(status_code=400, detail="Subject and message are required.")

    inbox = payload.to or settings.SUPPORT_INBOX or settings.SMTP_USERNAME
    if not inbox:
        raise HTTPException(status_code=500, detail="Support inbox is not configured.")

    try:
        send_support_report(
            inbox,
            payload.subject,
            payload.message,
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
        )
    except EmailDeliveryError as e:
        raise HTTPException(status_code=500, detail=str(e))

    logger.info("Support report from %s %s sent to %s", identity.account_type, identity.id, inbox)
    return {"ok": True}


@router.get("/whatsnew")
def whats_new():
    return WHATS_NEW
