from typing import Iterable

DEFAULT_SENSITIVE_PROMPT = """Scan this screenshot for PERSONAL/PRIVATE information that should be hidden before sharing publicly.

ONLY detect these specific items:
- Email addresses (actual emails like user@domain.com)
- Phone numbers (actual phone numbers)
- Social media usernames (@handles visible in chat/profile)
- Real people's names shown in chat messages, contacts, or profiles
- Home/work addresses
- Credit card or bank account numbers
- License plates
- Personal IDs, SSN, passport numbers
- URLs containing personal identifiers

DO NOT detect:
- Faces in movie/TV posters, advertisements, or thumbnails
- Celebrity names or public figures
- App icons or logos
- Generic UI elements
- Fictional character names

Return a JSON array where each detected item has:
- "type": category (email, phone, username, name, address, id, etc.)
- "box_2d": bounding box as [ymin, xmin, ymax, xmax] normalized to 0-1000
- "value": the actual text found

If nothing sensitive found, return []."""


def build_auto_blur_prompt(sensitive_types: Iterable[str]) -> str:
    """Prompt used by auto-blur, with the configured type hints folded in."""
    hints = ", ".join(t.strip() for t in sensitive_types if t and t.strip())
    return (
        f"Detect all sensitive or private information in this image. Look for: {hints}.\n"
        "\n"
        "Return a JSON array where each detected item has:\n"
        '- "type": the type of sensitive data\n'
        '- "box_2d": bounding box as [ymin, xmin, ymax, xmax] normalized to 0-1000\n'
        "\n"
        "Only return the JSON array."
    )
