from unittest.mock import patch

import pytest

from awardbot.utils.twilio import XML_DECL, escape_for_xml, send_whatsapp_message, to_twiml_message


def test_escape_for_xml():
    original = "<&>\"'"
    escaped = escape_for_xml(original)
    assert escaped == "&lt;&amp;&gt;&quot;&apos;"


def test_to_twiml_message_structure():
    xml = to_twiml_message("Hello & <world>")
    assert xml.startswith(XML_DECL)
    assert "<Response><Message>" in xml
    assert "Hello &amp; &lt;world&gt;" in xml
    assert xml.endswith("</Message></Response>")


def test_send_requires_credentials():
    with patch("awardbot.utils.twilio.settings.TWILIO_ACCOUNT_SID", None):
        with pytest.raises(RuntimeError):
            send_whatsapp_message("+111", "hi")


def test_send_prefixes_whatsapp_addresses():
    with (
        patch("awardbot.utils.twilio.settings.TWILIO_ACCOUNT_SID", "AC123"),
        patch("awardbot.utils.twilio.settings.TWILIO_AUTH_TOKEN", "tok"),
        patch("awardbot.utils.twilio.settings.TWILIO_WHATSAPP_NUMBER", "+14155238886"),
        patch("awardbot.utils.twilio.TwilioClient") as client_cls,
    ):
        send_whatsapp_message("+5511987654321", "=== Economy only ===")

    client_cls.assert_called_once_with("AC123", "tok")
    client_cls.return_value.messages.create.assert_called_once_with(
        from_="whatsapp:+14155238886",
        to="whatsapp:+5511987654321",
        body="=== Economy only ===",
    )
