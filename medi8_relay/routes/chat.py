"""Chat blueprint.

Routes:
    POST /chat → Validate a message list, relay it to the completion
                 provider and return the reply.
"""
from __future__ import annotations

import structlog
from flask import Blueprint, current_app, jsonify, request

from medi8_relay.models.requests import validate_chat_request

logger = structlog.get_logger(__name__)

chat_bp = Blueprint("chat", __name__)


@chat_bp.route("/chat", methods=["POST"])
async def chat():
    """Relay a conversation to the completion provider.

    Request JSON:
        {
            "messages": [
                {"role": "user", "content": "hello"}
            ]
        }

    Response JSON:
        200  { "aiReply": "Hi there!" }
        400  { "error": "\"messages\" must contain at least 1 item" }
        500  { "error": "Internal Server Error" }

    ValidationError and UpstreamError propagate to the global error
    handlers, which render the 400 and 500 bodies.
    """
    payload = request.get_json(force=True, silent=True)
    logger.info("chat_request_received", content_length=request.content_length)

    chat_request = validate_chat_request(payload)

    gateway = current_app.config["COMPLETION_GATEWAY"]
    logger.info(
        "chat_request_forwarding",
        messages_count=len(chat_request.messages),
        last_role=chat_request.messages[-1].role,
    )
    reply = await gateway.complete(chat_request)

    logger.info("chat_reply_sent", reply_length=len(reply.text))
    return jsonify(reply.to_payload())
