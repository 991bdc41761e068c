"""Generative assist — event copy, post-event reports and poster art.

Purely advisory: every function returns a fallback (text) or ``None``
(image) instead of raising, so no workflow ever blocks on the model.
"""
import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from clix.config import settings
from clix.models.event import Event

logger = logging.getLogger(__name__)

MISSING_KEY_TEXT = "AI generation unavailable (missing API key)."
ERROR_TEXT = "Error generating content. Please try again."
EMPTY_TEXT = "Could not generate content."

PROMPTS = {
    "description": (
        'Write a compelling, professional, yet exciting 2-sentence description for a '
        'college event about: "{topic}". Keep it under 50 words.'
    ),
    "tagline": 'Write a catchy, short tagline for a college event about: "{topic}". Max 10 words.',
    "poster_idea": (
        "Describe a minimalist, black and white abstract geometric poster design "
        'concept for an event about: "{topic}".'
    ),
}

REPORT_PROMPT = """Write a professional post-event report for the college event "{title}".

Statistics:
- Registrations: {registered} / {capacity}
- Revenue: {revenue}

Student Feedback:
{feedback}

Structure the report with the following sections (use Markdown):
1. Executive Summary
2. Participation & Engagement Analysis
3. Feedback Highlights
4. Recommendations for Future Events
"""


def _client() -> Optional[OpenAI]:
    if not settings.OPENAI_API_KEY:
        logger.warning("OpenAI API key not configured; generative assist disabled")
        return None
    return OpenAI(api_key=settings.OPENAI_API_KEY)


def build_prompt(topic: str, kind: str) -> str:
    """Expand a topic into the prompt for ``kind``; unknown kinds pass through."""
    template = PROMPTS.get(kind)
    return template.format(topic=topic) if template else topic


def generate_text(prompt: str, kind: str = "description") -> str:
    """Return generated text, or a fallback string on any failure."""
    client = _client()
    if client is None:
        return MISSING_KEY_TEXT

    try:
        response = client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[{"role": "user", "content": build_prompt(prompt, kind)}],
        )
    except OpenAIError as e:
        logger.error("LLM API error (%s): %s", kind, e)
        return ERROR_TEXT

    content = response.choices[0].message.content if response.choices else None
    return content.strip() if content else EMPTY_TEXT


def build_report_prompt(event: Event) -> str:
    comments = [f.get("comment", "") for f in (event.feedback or []) if f.get("comment")]
    return REPORT_PROMPT.format(
        title=event.title,
        registered=event.registered_count,
        capacity=event.capacity,
        revenue=event.registered_count * event.price,
        feedback="; ".join(comments) if comments else "No specific feedback provided.",
    )


def generate_event_report(event: Event) -> str:
    logger.info("Generating report for event %s", event.event_id)
    return generate_text(build_report_prompt(event), kind="report")


def generate_image(prompt: str) -> Optional[str]:
    """Return a ``data:`` URL (or hosted URL) for the image, ``None`` on failure."""
    client = _client()
    if client is None:
        return None

    try:
        response = client.images.generate(model=settings.OPENAI_IMAGE_MODEL, prompt=prompt, n=1)
    except OpenAIError as e:
        logger.error("Image generation error: %s", e)
        return None

    if not response.data:
        return None
    image = response.data[0]
    if image.b64_json:
        return f"data:image/png;base64,{image.b64_json}"
    return image.url
