"""Markdown rendering of extracted content."""

from __future__ import annotations

import datetime as dt

from .models import Content


def _yaml_value(value: str) -> str:
    if any(ch in value for ch in ":#[]{}\"'\n") or value != value.strip():
        escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", " ")
        return f'"{escaped}"'
    return value


def compose_markdown(content: Content, source_url: str) -> str:
    """Generate Markdown with front matter followed by the description."""
    timestamp = (
        dt.datetime.now(dt.timezone.utc)
        .replace(microsecond=0)
        .isoformat()
        .replace("+00:00", "Z")
    )
    front_matter_lines = ["---"]
    if content.title:
        front_matter_lines.append(f"title: {_yaml_value(content.title)}")
    front_matter_lines.append(f"source_url: {source_url}")
    front_matter_lines.append(f"retrieved_at: {timestamp}")
    if content.author:
        front_matter_lines.append(f"author: {_yaml_value(content.author)}")
    if content.images:
        image_urls = [image.url for image in content.images]
        front_matter_lines.append("images: [" + ", ".join(image_urls) + "]")
    front_matter_lines.append("---\n")

    body = []
    if content.title:
        body.append(f"# {content.title}\n")
    if content.description:
        body.append(content.description.strip() + "\n")
    for image in content.images:
        body.append(f"![]({image.url})\n")
    return "\n".join(front_matter_lines) + "\n".join(body)
