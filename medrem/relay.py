"""
HTTP relay between the reminder app and Twilio's WhatsApp API.

    python -m medrem.relay

POST /send-whatsapp  {"to": "+1555...", "templateVariables": {"1": ..., "2": ...}}
"""

import json
import logging

from flask import Flask, jsonify, request
from twilio.rest import Client

from .config import TwilioConfig, load_config

logger = logging.getLogger(__name__)


def create_app(twilio_config: TwilioConfig, client=None) -> Flask:
    """
    Build the relay app.

    ``client`` defaults to a Twilio REST client built from the config; any
    object with ``messages.create`` works.
    """
    app = Flask(__name__)

    def twilio_client():
        if client is not None:
            return client
        return Client(twilio_config.account_sid, twilio_config.auth_token)

    @app.get("/")
    def index():
        return "Backend server is running!"

    @app.post("/send-whatsapp")
    def send_whatsapp():
        body = request.get_json(silent=True) or {}
        to = body.get("to")
        template_variables = body.get("templateVariables") or {}

        if not to:
            return jsonify(success=False, error="'to' is required"), 400

        try:
            message = twilio_client().messages.create(
                from_=twilio_config.whatsapp_from,
                to=f"whatsapp:{to}",
                content_sid=twilio_config.content_sid,
                content_variables=json.dumps(template_variables),
            )
        except Exception as e:
            logger.error(f"Twilio send to {to} failed: {e}")
            return jsonify(success=False, error=str(e)), 500

        logger.info(f"WhatsApp message {message.sid} queued for {to}")
        return jsonify(success=True, sid=message.sid), 200

    return app


def main():
    logging.basicConfig(level=logging.INFO)
    config = load_config()
    app = create_app(config.twilio)
    logger.info(f"Server running at http://localhost:{config.relay.port}")
    app.run(port=config.relay.port)


if __name__ == "__main__":
    main()
