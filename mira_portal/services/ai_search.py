"""
MIRA Portal - AI Platform Search

Answers questions about the platform from the embedded documentation.
"""

import logging

from mira_portal.errors import ValidationError
from mira_portal.services.ai_client import chat_completion

logger = logging.getLogger(__name__)

PLATFORM_KNOWLEDGE = """
MIRA Platform Documentation:

# Navigation
- Dashboard: Central hub with project tiles, statistics, and quick navigation
- Projects: View, create and manage all your projects
- Appointments: Schedule and manage meetings and events
- Documents: Access project-related files and documentation
- MIRA AI: AI assistant for intelligent support
- KI-Personas: Create and manage AI assistants for different tasks
- Profile: Manage your personal settings and profile information

# Project Management
- Creating a Project: Click the "New Project" button on the Projects page
- Project Details: Click on any project to view details, files, feedback, and progress
- Project Status: Projects can be in planning, active, completed, or canceled states
- Adding Feedback: Use the feedback tab in project details to communicate with team

# Search Strings
- Generate Boolean search strings for recruiting or lead generation
- Sources: free text, a website URL or an uploaded PDF

# Google Jobs
- The Google Jobs dashboard is enabled per company by an administrator

# User Settings
- Profile: Update personal information, contact details, and profile picture
- Set notification preferences for project updates and messages

# Common Questions
Q: How do I create a new project?
A: Navigate to the Projects page and click on the "New Project" button in the top right corner.

Q: Where can I find my files?
A: Files are stored in the Documents section, accessible from the dashboard or via the specific project's details page.

Q: Why don't I see Google Jobs?
A: Google Jobs is a per-company feature. Ask your administrator to enable it.
"""

SYSTEM_PROMPT = (
    'You are a helpful assistant that answers questions about the MIRA platform. '
    'Only provide information based on the following platform documentation. '
    'Your answers should be concise, factual, and directly related to the platform. '
    "If you don't know the answer or if the information isn't in the documentation, "
    'politely say so and suggest contacting support.\n'
    'Here is the platform documentation:\n'
    f'{PLATFORM_KNOWLEDGE}'
)


def answer_platform_question(query):
    """Returns the assistant's answer to a platform question."""
    if not query or not str(query).strip():
        raise ValidationError('Please provide a valid search query.')

    query = str(query).strip()
    logger.info('AI search query received: %s', query[:100])

    answer = chat_completion(
        messages=[
            {'role': 'system', 'content': SYSTEM_PROMPT},
            {'role': 'user', 'content': query},
        ],
        temperature=0.3,
        max_tokens=300,
    )
    logger.info('AI search answered with %d characters', len(answer))
    return answer
