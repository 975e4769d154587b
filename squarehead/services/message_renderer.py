# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Reminder message rendering.
Fills the club's subject/body templates and produces HTML and plain-text
bodies. Markdown-style links ``[text](url)`` are supported in the body.
"""

import html
import re
from typing import Mapping, Optional

from squarehead.models.domain import Dispatch, RenderedMessage
from squarehead.services.dates import format_dance_date

DEFAULT_SUBJECT = "Squarehead Reminder - {club_name} Dance on {dance_date}"
DEFAULT_BODY = (
    "Hello {member_name}, you are scheduled to be a squarehead for "
    "{club_name} on {dance_date}."
)
DEFAULT_CLUB_NAME = "Square Dance Club"
DEFAULT_CLUB_COLOR = "#EA3323"

_MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_SAFE_URL = re.compile(r"^(https?://|mailto:)", re.IGNORECASE)


def fill_placeholders(template: str, values: Mapping[str, str]) -> str:
    result = template
    for key, value in values.items():
        result = result.replace("{" + key + "}", value)
    return result


def _link_tag(match: "re.Match[str]", color: str) -> str:
    label, url = match.group(1), match.group(2).strip()
    if not _SAFE_URL.match(url):
        return match.group(0)
    href = html.escape(html.unescape(url), quote=True)
    return f'<a href="{href}" style="color: {color}; text-decoration: underline;">{label}</a>'


def markdown_links_to_html(text: str, color: str = DEFAULT_CLUB_COLOR) -> str:
    """Turn ``[text](url)`` into anchors; only http(s) and mailto targets are linked."""
    return _MARKDOWN_LINK.sub(lambda m: _link_tag(m, color), text)


def markdown_links_to_text(text: str) -> str:
    return _MARKDOWN_LINK.sub(r"\1: \2", text)


def placeholder_values(dispatch: Dispatch, club: Mapping[str, Optional[str]]) -> dict[str, str]:
    return {
        "club_name": club.get("club_name") or DEFAULT_CLUB_NAME,
        "club_address": club.get("club_address") or "",
        "member_name": dispatch.member_name,
        "dance_date": format_dance_date(dispatch.dance_date),
        "partner_name": dispatch.partner_name or "",
        "days_until": str(dispatch.days_until),
    }


def render_reminder(dispatch: Dispatch, club: Mapping[str, Optional[str]]) -> RenderedMessage:
    """Compose the reminder e-mail for one dispatch using club settings."""
    values = placeholder_values(dispatch, club)
    subject = fill_placeholders(club.get("email_template_subject") or DEFAULT_SUBJECT, values)
    body = fill_placeholders(club.get("email_template_body") or DEFAULT_BODY, values)

    color = club.get("club_color") or DEFAULT_CLUB_COLOR
    club_name = html.escape(values["club_name"])
    address = html.escape(values["club_address"])
    address_line = f"<br>{address}" if address else ""

    body_html = html.escape(body, quote=False).replace("\n", "<br>\n")
    body_html = markdown_links_to_html(body_html, color)

    html_body = f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Squarehead Reminder - {club_name}</title>
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; font-size: 16px;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2 style="color: {color}; font-size: 24px;">{club_name} Reminder</h2>
        <div style="font-size: 16px;">
            {body_html}
        </div>
        <hr style="margin: 30px 0; border: none; border-top: 1px solid #eee;">
        <p style="font-size: 14px; color: #666;">
            {club_name} Management System{address_line}<br>
            This is an automated reminder, please do not reply.
        </p>
    </div>
</body>
</html>
"""
    return RenderedMessage(
        subject=subject,
        html_body=html_body,
        text_body=markdown_links_to_text(body),
    )
