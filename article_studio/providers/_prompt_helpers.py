"""Shared prompt builders and response parsers for generation providers.

Used by both LiteLLMGenerationProvider and AnthropicGenerationProvider
to eliminate prompt construction duplication.
"""

from typing import Optional

from ..pipeline.models import (
    ArticleOutline,
    Audience,
    FAQItem,
    OutlineSection,
    SocialPost,
    SocialPostSet,
    SocialThread,
    Tone,
)
from ..prompts import render
from ._parsing import extract_json

SHORT_POST_COUNT = 5
LONG_POST_COUNT = 2


def _instructions_section(instructions: Optional[str]) -> str:
    if not instructions:
        return ""
    return f"\nSPECIAL INSTRUCTIONS (the outline must follow these):\n{instructions}\n"


def build_analysis_prompt(topic: str) -> str:
    return render("analysis", topic=topic)


def build_outline_prompt(
    analysis: str,
    audience: Audience,
    tone: Tone,
    topic: str,
    instructions: Optional[str] = None,
) -> str:
    return render(
        "outline",
        analysis=analysis,
        topic=topic,
        audience=audience.value,
        tone=tone.value,
        instructions_section=_instructions_section(instructions),
    )


def build_article_prompt(
    outline: ArticleOutline,
    target_length: int,
    tone: Tone,
    audience: Audience,
    instructions: Optional[str] = None,
) -> str:
    sections = "\n\n".join(f"## {s.heading}\n{s.content}" for s in outline.sections)
    faq = "\n".join(f"- Q: {f.question}\n- A: {f.answer}" for f in outline.faq)
    return render(
        "article",
        title=outline.title,
        introduction=outline.introduction,
        sections=sections,
        faq=faq,
        target_length=str(target_length),
        audience=audience.value,
        tone=tone.value,
        instructions_section=_instructions_section(instructions),
    )


def build_image_prompt_prompt(title: str, content: str, image_theme: str = "") -> str:
    if image_theme and image_theme.strip():
        theme_line = f'Image theme: "{image_theme.strip()}"'
    else:
        theme_line = f"Article content: {content[:200]}"
    return render("image_prompt", title=title, theme_line=theme_line)


def build_social_prompt(
    topic: str,
    title: str,
    summary: str,
    tone: Tone,
    target_audiences: list[str],
) -> str:
    return render(
        "social_posts",
        topic=topic,
        title=title,
        summary=summary,
        tone=tone.value,
        target_audiences=", ".join(target_audiences),
        short_count=str(SHORT_POST_COUNT),
        long_count=str(LONG_POST_COUNT),
    )


def parse_outline(text: str, topic: str) -> ArticleOutline:
    """Parse an outline response.

    Raises:
        ValueError: If the response holds no JSON object
    """
    data = extract_json(text)
    if not isinstance(data, dict):
        raise ValueError("Outline response is not a JSON object")

    return ArticleOutline(
        title=data.get("title") or topic,
        meta_description=data.get("meta_description") or data.get("metaDescription", ""),
        introduction=data.get("introduction", ""),
        sections=[
            OutlineSection(heading=s.get("heading", ""), content=s.get("content", ""))
            for s in data.get("sections", [])
            if isinstance(s, dict)
        ],
        faq=[
            FAQItem(question=f.get("question", ""), answer=f.get("answer", ""))
            for f in data.get("faq", [])
            if isinstance(f, dict)
        ],
    )


def _parse_posts(items: list, post_type: str) -> list[SocialPost]:
    posts = []
    for item in items:
        if isinstance(item, dict) and item.get("text"):
            text = item["text"]
            posts.append(
                SocialPost(
                    type=post_type,
                    target=item.get("target", ""),
                    text=text,
                    hashtags=item.get("hashtags") or [],
                    character_count=len(text),
                )
            )
    return posts


def parse_social_posts(text: str) -> SocialPostSet:
    """Parse a social post response.

    Raises:
        ValueError: If the response holds no JSON object
    """
    data = extract_json(text)
    if not isinstance(data, dict):
        raise ValueError("Social post response is not a JSON object")

    threads = [
        SocialThread(tweets=[str(t) for t in thread.get("tweets", [])])
        for thread in data.get("threads", [])
        if isinstance(thread, dict)
    ]
    return SocialPostSet(
        short_posts=_parse_posts(data.get("short_posts", []), "short"),
        long_posts=_parse_posts(data.get("long_posts", []), "long"),
        threads=threads,
        schedule_suggestion=data.get("schedule_suggestion"),
    )
