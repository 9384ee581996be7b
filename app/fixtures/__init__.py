"""Static content fixtures.

Contains:
- Versioned legal disclaimer text
- Email notification templates
"""

from app.fixtures.email_templates import EMAIL_TEMPLATES, get_email_template
from app.fixtures.legal_text import CURRENT_LEGAL_TEXT_VERSION, LEGAL_TEXT, get_legal_text

__all__ = [
    "CURRENT_LEGAL_TEXT_VERSION",
    "LEGAL_TEXT",
    "get_legal_text",
    "EMAIL_TEMPLATES",
    "get_email_template",
]
