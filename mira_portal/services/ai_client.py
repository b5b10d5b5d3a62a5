"""
MIRA Portal - AI Provider Client
"""

import logging

from flask import current_app
from openai import OpenAI, OpenAIError

from mira_portal.errors import UpstreamError

logger = logging.getLogger(__name__)


def get_client():
    """OpenAI client configured from the application settings."""
    api_key = current_app.config.get('OPENAI_API_KEY')
    if not api_key:
        raise UpstreamError('AI provider is not configured. Contact administrator.')
    return OpenAI(api_key=api_key, timeout=current_app.config.get('OPENAI_TIMEOUT', 60))


def chat_completion(messages, model=None, temperature=0.3, max_tokens=300):
    """
    Sends a chat completion request and returns the answer text.

    Raises:
        UpstreamError: provider not configured, failed, or returned no answer
    """
    client = get_client()
    model_to_use = model or current_app.config.get('OPENAI_MODEL', 'gpt-4o-mini')

    try:
        completion = client.chat.completions.create(
            model=model_to_use,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except OpenAIError as e:
        logger.error('AI provider error: %s', e)
        raise UpstreamError('Error processing your request. Please try again later.', details=str(e))

    if not completion.choices or not completion.choices[0].message.content:
        raise UpstreamError('AI provider returned an empty answer.')

    return completion.choices[0].message.content.strip()
