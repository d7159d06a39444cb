"""Classification prompt."""

from .categories import DEFAULT_CATEGORY, VALID_CATEGORIES

PROMPT_TEMPLATE = """Analyze this article about the business of sports and esports.

Return ONLY a JSON object, without markdown or explanation, matching this schema:
{{
  "category": "string",
  "relevance_score": number,
  "access_status": "free" | "paywall" | "registration" | "video" | "audio",
  "summary": "string"
}}

Instructions:
- "category" MUST be exactly ONE of: {categories}. Do not invent new categories. If several fit, choose the most specific one (for example "Milan Cortina 2026" rather than "Ski"). If unsure, use "{default_category}".
- "relevance_score" is an integer from 0 to 10: 10 = pure business/economy (sponsoring, media rights, finance, marketing), 0 = scores, results or match recaps.
- "access_status" describes how the content can be read: "free", "paywall", "registration", or "video"/"audio" for non-text content.
- "summary" is 1 to 3 sentences in French focused on the business or economic impact.

Article title:
{title}

Article URL:
{url}

Article content:
{content}"""


def build_prompt(title: str, url: str, content: str, max_content_chars: int = 12000) -> str:
    """Build the classification prompt, truncating long article text."""
    if len(content) > max_content_chars:
        content = content[:max_content_chars] + "..."

    return PROMPT_TEMPLATE.format(
        categories=", ".join(VALID_CATEGORIES),
        default_category=DEFAULT_CATEGORY,
        title=title,
        url=url,
        content=content or "(content unavailable)",
    )
