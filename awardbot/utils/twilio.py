from typing import Final

from twilio.rest import Client as TwilioClient

from awardbot.config import settings

XML_DECL: Final[str] = '<?xml version="1.0" encoding="UTF-8"?>'


def escape_for_xml(text: str) -> str:
    """
    Escape &, <, >, ", ' for safe XML content.
    """
    if text is None:
        return ""
    # Order matters: escape & first to avoid double-escaping newly inserted entities
    escaped = text.replace("&", "&amp;")
    escaped = escaped.replace("<", "&lt;")
    escaped = escaped.replace(">", "&gt;")
    escaped = escaped.replace('"', "&quot;")
    escaped = escaped.replace("'", "&apos;")
    return escaped


def to_twiml_message(body: str) -> str:
    """
    Wrap a reply in the minimal TwiML envelope Twilio expects from the webhook.
    """
    return f"{XML_DECL}<Response><Message>{escape_for_xml(body)}</Message></Response>"


def _whatsapp_address(number: str) -> str:
    return number if number.startswith("whatsapp:") else f"whatsapp:{number}"


def send_whatsapp_message(to: str, body: str) -> None:
    """
    Deliver a reply outside the webhook response (REPLY_MODE=async).
    """
    if not (settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN and settings.TWILIO_WHATSAPP_NUMBER):
        raise RuntimeError("Twilio credentials are not configured")
    client = TwilioClient(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
    client.messages.create(
        from_=_whatsapp_address(settings.TWILIO_WHATSAPP_NUMBER),
        to=_whatsapp_address(to),
        body=body,
    )
