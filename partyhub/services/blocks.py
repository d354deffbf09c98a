"""Invitation block parsing and validation.

A party stores its blocks as a JSON array. Each block is an object:

    {"id": "...", "template": "<kind>", "content": "<text or JSON>", "public": bool}

Static templates (headings, paragraphs, code) carry plain text content.
Question templates carry a JSON object as content, e.g.
``{"label": "Bringing food?", "options": ["Yes", "No"], "public": true}``.
"""

import json
import logging
import uuid
from typing import Any, Optional

logger = logging.getLogger(__name__)

STATIC_TEMPLATES = {"h1", "h2", "h3", "p", "code"}
QUESTION_TEMPLATES = {
    "single_choice",
    "multiple_choice",
    "text_input",
    "text",
    "number_input",
    "attendance",
}
KNOWN_TEMPLATES = STATIC_TEMPLATES | QUESTION_TEMPLATES

ATTENDANCE = "attendance"

# Attendance answers
ATTENDING_YES = 0
ATTENDING_MAYBE = 1
ATTENDING_NO = 2


class BlockValidationError(ValueError):
    """Raised when a party's block list is rejected on update."""


def parse_json(raw: Any, default: Any) -> Any:
    """Decode stored JSON text, degrading to ``default`` on malformed input."""
    if raw is None or raw == "":
        return default
    if not isinstance(raw, str):
        return raw
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("Malformed JSON ignored: %.80s", raw)
        return default


def parse_blocks(raw: Any) -> list[dict]:
    """Decode a block array. Anything but a list of objects yields []."""
    blocks = parse_json(raw, [])
    if not isinstance(blocks, list):
        return []
    return [b for b in blocks if isinstance(b, dict)]


def parse_answers(raw: Any) -> dict:
    """Decode an answer map. Anything but an object yields {}."""
    answers = parse_json(raw, {})
    return answers if isinstance(answers, dict) else {}


def block_content(block: dict) -> dict:
    """Question content as a dict; plain text and malformed JSON give {}."""
    content = parse_json(block.get("content"), {})
    return content if isinstance(content, dict) else {}


def public_flag(block: dict) -> Optional[bool]:
    """The block's explicit visibility: True, False, or None if unmarked."""
    content = block_content(block)
    if isinstance(content.get("public"), bool):
        return content["public"]
    if isinstance(block.get("public"), bool):
        return block["public"]
    return None


def block_ids(blocks: list[dict]) -> set[str]:
    return {b["id"] for b in blocks if isinstance(b.get("id"), str)}


def public_block_ids(blocks: list[dict]) -> set[str]:
    return {
        b["id"]
        for b in blocks
        if isinstance(b.get("id"), str) and public_flag(b) is True
    }


def attendance_block(blocks: list[dict]) -> Optional[dict]:
    for b in blocks:
        if b.get("template") == ATTENDANCE and isinstance(b.get("id"), str):
            return b
    return None


def attendance_block_id(blocks: list[dict]) -> Optional[str]:
    block = attendance_block(blocks)
    return block["id"] if block else None


def is_attending(answers: dict, attendance_id: Optional[str]) -> bool:
    """True when the attendance answer is an affirmative RSVP."""
    if attendance_id is None:
        return False
    value = answers.get(attendance_id)
    return value == ATTENDING_YES and not isinstance(value, bool)


def validate_blocks(raw: str) -> list[dict]:
    """Validate a block array submitted on party update.

    Returns the decoded list, with generated ids for blocks that have none.
    """
    try:
        blocks = json.loads(raw)
    except (TypeError, ValueError):
        raise BlockValidationError("Invalid invitation_blocks JSON")

    if not isinstance(blocks, list):
        raise BlockValidationError("invitation_blocks must be a JSON array")

    attendance_count = 0
    seen_ids = set()
    for index, block in enumerate(blocks):
        if not isinstance(block, dict):
            raise BlockValidationError(f"Block {index} is not an object")

        template = block.get("template")
        if not isinstance(template, str) or not template:
            raise BlockValidationError(f"Block {index} has no template")
        if template not in KNOWN_TEMPLATES:
            raise BlockValidationError(f"Unknown block template '{template}'")
        if template == ATTENDANCE:
            attendance_count += 1

        block_id = block.get("id")
        if not isinstance(block_id, str) or not block_id:
            block_id = str(uuid.uuid4())
            block["id"] = block_id
        if block_id in seen_ids:
            raise BlockValidationError(f"Duplicate block id '{block_id}'")
        seen_ids.add(block_id)

    if attendance_count > 1:
        raise BlockValidationError("Only one attendance block is allowed per party")

    return blocks
