"""Serialization of CMS structured text into HTML and plain text."""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from .models import RichTextBlock, Span

LIST_TAGS = {"list-item": "ul", "o-list-item": "ol"}
BLOCK_TAGS = {
    "paragraph": "p",
    "preformatted": "pre",
    **{f"heading{level}": f"h{level}" for level in range(1, 7)},
}


@dataclass
class HtmlNode:
    tag: str
    attrs: Dict[str, str] = field(default_factory=dict)
    children: List["HtmlContent"] = field(default_factory=list)
    raw_html: str | None = None
    void: bool = False

    def render(self) -> str:
        attrs = "".join(
            f' {name}="{html.escape(value, quote=True)}"' for name, value in self.attrs.items()
        )
        if self.void:
            return f"<{self.tag}{attrs} />"
        if self.raw_html is not None:
            # Embeds come from the CMS oEmbed payload and are trusted.
            inner = self.raw_html
        else:
            inner = render_nodes(self.children)
        return f"<{self.tag}{attrs}>{inner}</{self.tag}>"


HtmlContent = HtmlNode | str


def render_nodes(nodes: Sequence[HtmlContent]) -> str:
    return "".join(
        node.render() if isinstance(node, HtmlNode) else html.escape(node, quote=False)
        for node in nodes
    )


def _text_with_breaks(text: str) -> List[HtmlContent]:
    parts: List[HtmlContent] = []
    for index, line in enumerate(text.split("\n")):
        if index:
            parts.append(HtmlNode("br", void=True))
        if line:
            parts.append(line)
    return parts


def _span_node(span: Span, children: List[HtmlContent]) -> HtmlNode:
    data = span.data or {}
    if span.type == "strong":
        return HtmlNode("strong", children=children)
    if span.type == "em":
        return HtmlNode("em", children=children)
    if span.type == "hyperlink":
        attrs = {"href": str(data.get("url", ""))}
        if data.get("target"):
            attrs["target"] = str(data["target"])
            attrs["rel"] = "noopener noreferrer"
        return HtmlNode("a", attrs=attrs, children=children)
    if span.type == "label":
        return HtmlNode("span", attrs={"class": str(data.get("label", ""))}, children=children)
    return HtmlNode("span", children=children)


def _inline(text: str, spans: Iterable[Span]) -> List[HtmlContent]:
    """Apply spans to ``text``; overlapping spans are split at each boundary."""

    spans = sorted(
        (span for span in spans if 0 <= span.start < span.end <= len(text)),
        key=lambda span: (span.start, -span.end),
    )
    if not spans:
        return _text_with_breaks(text)

    bounds = sorted({0, len(text), *(s.start for s in spans), *(s.end for s in spans)})
    nodes: List[HtmlContent] = []
    for start, end in zip(bounds, bounds[1:]):
        content = _text_with_breaks(text[start:end])
        for span in reversed([s for s in spans if s.start <= start and s.end >= end]):
            content = [_span_node(span, content)]
        nodes.extend(content)
    return nodes


def _block_node(block: RichTextBlock) -> HtmlNode:
    extra = block.model_extra or {}
    if block.type == "image":
        img_attrs = {"src": str(extra.get("url", "")), "alt": str(extra.get("alt") or "")}
        return HtmlNode("p", attrs={"class": "block-img"}, children=[HtmlNode("img", img_attrs, void=True)])
    if block.type == "embed":
        oembed = extra.get("oembed") or {}
        return HtmlNode(
            "div",
            attrs={"data-oembed": str(oembed.get("embed_url", "")), "data-oembed-type": str(oembed.get("type", ""))},
            raw_html=str(oembed.get("html", "")),
        )
    tag = BLOCK_TAGS.get(block.type, "li" if block.type in LIST_TAGS else "p")
    return HtmlNode(tag, children=_inline(block.text, block.spans))


def to_nodes(blocks: Sequence[RichTextBlock]) -> List[HtmlNode]:
    """Convert blocks to nodes, grouping consecutive list items into lists."""

    nodes: List[HtmlNode] = []
    current_list: HtmlNode | None = None
    for block in blocks:
        node = _block_node(block)
        list_tag = LIST_TAGS.get(block.type)
        if list_tag is None:
            current_list = None
            nodes.append(node)
            continue
        if current_list is None or current_list.tag != list_tag:
            current_list = HtmlNode(list_tag)
            nodes.append(current_list)
        current_list.children.append(node)
    return nodes


def as_html(blocks: Sequence[RichTextBlock]) -> str:
    return render_nodes(to_nodes(blocks))


def as_text(blocks: Sequence[RichTextBlock], separator: str = "\n") -> str:
    return separator.join(block.text for block in blocks if block.text)


__all__ = ["HtmlNode", "as_html", "as_text", "render_nodes", "to_nodes"]
