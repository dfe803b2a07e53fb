"""Input validation and markup sanitizing helpers."""
import re

SCRIPT_BLOCK = re.compile(
    r'<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>',
    re.IGNORECASE,
)

# Unterminated <script ...> with no closing tag: drop it and everything after
DANGLING_SCRIPT = re.compile(r'<script\b.*\Z', re.IGNORECASE | re.DOTALL)

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def sanitize_text(text) -> str:
    """Strip embedded script blocks and surrounding whitespace."""
    if not isinstance(text, str):
        return ''
    cleaned = SCRIPT_BLOCK.sub('', text)
    cleaned = DANGLING_SCRIPT.sub('', cleaned)
    return cleaned.strip()


def is_valid_email(email) -> bool:
    if not isinstance(email, str):
        return False
    return bool(EMAIL_PATTERN.match(email))


def normalize_email(email: str) -> str:
    return email.strip().lower()
