"""Typed representation of Notion pages, blocks and rich-text runs."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Union

LIST_ITEM_TYPES = ("bulleted_list_item", "numbered_list_item")

# 본문 렌더러가 알고 있는 블록 타입. 나머지는 모두 대체 문구로 렌더링된다.
KNOWN_BLOCK_TYPES = frozenset(
    {
        "paragraph",
        "heading_1",
        "heading_2",
        "heading_3",
        "bulleted_list_item",
        "numbered_list_item",
        "to_do",
        "toggle",
        "child_page",
        "image",
        "divider",
        "quote",
        "code",
        "file",
        "bookmark",
    }
)


@dataclass(frozen=True, slots=True)
class Annotations:
    """Inline styling flags attached to a rich-text run."""

    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"


@dataclass(frozen=True, slots=True)
class TextRun:
    """A span of text sharing one set of annotations."""

    content: str
    link: Optional[str] = None
    annotations: Annotations = field(default_factory=Annotations)


@dataclass(frozen=True, slots=True)
class FileSource:
    """Resolved location of a hosted (`file`) or `external` asset."""

    kind: str
    url: str


@dataclass(frozen=True, slots=True)
class RichTextContent:
    rich_text: Tuple[TextRun, ...] = ()


@dataclass(frozen=True, slots=True)
class ToDoContent:
    rich_text: Tuple[TextRun, ...] = ()
    checked: bool = False


@dataclass(frozen=True, slots=True)
class CodeContent:
    rich_text: Tuple[TextRun, ...] = ()
    language: str = ""


@dataclass(frozen=True, slots=True)
class ChildPageContent:
    title: str = ""


@dataclass(frozen=True, slots=True)
class MediaContent:
    """Payload shared by image and file blocks."""

    source: Optional[FileSource] = None
    caption: Tuple[TextRun, ...] = ()


@dataclass(frozen=True, slots=True)
class BookmarkContent:
    url: str = ""
    caption: Tuple[TextRun, ...] = ()


@dataclass(frozen=True, slots=True)
class DividerContent:
    pass


BlockContent = Union[
    RichTextContent,
    ToDoContent,
    CodeContent,
    ChildPageContent,
    MediaContent,
    BookmarkContent,
    DividerContent,
]


@dataclass(frozen=True, slots=True)
class Block:
    """One node of a page's content tree.

    ``children`` is ``None`` until the tree assembler resolves it; an empty
    tuple means the block was resolved and has no offspring. ``content`` is
    ``None`` when the payload was missing or the type is not a known one.
    """

    id: str
    type: str
    has_children: bool = False
    content: Optional[BlockContent] = None
    children: Optional[Tuple["Block", ...]] = None

    @property
    def needs_children(self) -> bool:
        return self.has_children and self.children is None

    def with_children(self, children: Iterable["Block"]) -> "Block":
        return replace(self, children=tuple(children))


@dataclass(frozen=True, slots=True)
class PageSummary:
    """Entry of the page listing used to build the index."""

    id: str
    last_edited_time: Optional[str]
    title: Tuple[TextRun, ...] = ()
    url: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PageMeta:
    id: str
    title: Tuple[TextRun, ...] = ()
    cover: Optional[FileSource] = None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def parse_text_run(item: Dict[str, Any]) -> TextRun:
    """Convert one Notion rich-text item into a `TextRun`."""

    text = _as_dict(item.get("text"))
    content = text.get("content")
    if not isinstance(content, str):
        content = item.get("plain_text") or ""

    link = _as_dict(text.get("link")).get("url") or item.get("href")

    raw = _as_dict(item.get("annotations"))
    annotations = Annotations(
        bold=bool(raw.get("bold")),
        italic=bool(raw.get("italic")),
        strikethrough=bool(raw.get("strikethrough")),
        underline=bool(raw.get("underline")),
        code=bool(raw.get("code")),
        color=str(raw.get("color") or "default"),
    )
    return TextRun(content=content, link=link or None, annotations=annotations)


def parse_text_runs(items: Optional[Sequence[Any]]) -> Tuple[TextRun, ...]:
    if not isinstance(items, (list, tuple)):
        return ()
    return tuple(parse_text_run(item) for item in items if isinstance(item, dict))


def resolve_file_source(descriptor: Any) -> Optional[FileSource]:
    """Pick the URL of a file descriptor.

    The declared ``type`` wins; otherwise whichever of ``external``/``file``
    carries a URL is used.
    """

    data = _as_dict(descriptor)
    declared = data.get("type")
    candidates = [declared] if declared in ("external", "file") else []
    candidates += [kind for kind in ("external", "file") if kind not in candidates]

    for kind in candidates:
        url = _as_dict(data.get(kind)).get("url")
        if isinstance(url, str) and url:
            return FileSource(kind=kind, url=url)
    return None


def _rich_text_of(data: Dict[str, Any]) -> Tuple[TextRun, ...]:
    # 2022-06-28 이후 API는 rich_text, 이전 버전은 text 키를 사용한다.
    items = data.get("rich_text")
    if items is None:
        items = data.get("text")
    return parse_text_runs(items)


def _parse_rich_text(data: Dict[str, Any]) -> BlockContent:
    return RichTextContent(rich_text=_rich_text_of(data))


def _parse_to_do(data: Dict[str, Any]) -> BlockContent:
    return ToDoContent(rich_text=_rich_text_of(data), checked=bool(data.get("checked")))


def _parse_code(data: Dict[str, Any]) -> BlockContent:
    return CodeContent(rich_text=_rich_text_of(data), language=str(data.get("language") or ""))


def _parse_child_page(data: Dict[str, Any]) -> BlockContent:
    title = data.get("title")
    return ChildPageContent(title=title if isinstance(title, str) else "")


def _parse_media(data: Dict[str, Any]) -> BlockContent:
    return MediaContent(source=resolve_file_source(data), caption=parse_text_runs(data.get("caption")))


def _parse_bookmark(data: Dict[str, Any]) -> BlockContent:
    url = data.get("url")
    return BookmarkContent(url=url if isinstance(url, str) else "", caption=parse_text_runs(data.get("caption")))


def _parse_divider(data: Dict[str, Any]) -> BlockContent:
    return DividerContent()


_CONTENT_PARSERS = {
    "paragraph": _parse_rich_text,
    "heading_1": _parse_rich_text,
    "heading_2": _parse_rich_text,
    "heading_3": _parse_rich_text,
    "bulleted_list_item": _parse_rich_text,
    "numbered_list_item": _parse_rich_text,
    "toggle": _parse_rich_text,
    "quote": _parse_rich_text,
    "to_do": _parse_to_do,
    "code": _parse_code,
    "child_page": _parse_child_page,
    "image": _parse_media,
    "file": _parse_media,
    "bookmark": _parse_bookmark,
    "divider": _parse_divider,
}


def parse_block(raw: Dict[str, Any]) -> Block:
    """Build a `Block` from a raw Notion block object.

    Children already merged into the payload (``payload["children"]``) are
    parsed as well, so such a block counts as resolved.
    """

    block_type = str(raw.get("type") or "")
    payload = raw.get(block_type)
    parser = _CONTENT_PARSERS.get(block_type)

    content: Optional[BlockContent] = None
    children: Optional[Tuple[Block, ...]] = None
    if isinstance(payload, dict):
        if parser is not None:
            content = parser(payload)
        merged = payload.get("children")
        if isinstance(merged, list):
            children = tuple(parse_block(child) for child in merged if isinstance(child, dict))

    return Block(
        id=str(raw.get("id") or ""),
        type=block_type,
        has_children=bool(raw.get("has_children")),
        content=content,
        children=children,
    )


def _title_property(properties: Dict[str, Any]) -> Sequence[Any]:
    """Return the raw title items of a page's properties."""

    named = _as_dict(properties.get("Name"))
    if named.get("type") == "title" or isinstance(named.get("title"), list):
        return named.get("title") or []

    for prop in properties.values():
        prop = _as_dict(prop)
        if prop.get("type") == "title":
            return prop.get("title") or []
    return []


def parse_page_title(page: Dict[str, Any]) -> Tuple[TextRun, ...]:
    properties = _as_dict(page.get("properties"))
    items = _title_property(properties)
    if not items and isinstance(page.get("title"), list):
        # 데이터베이스 객체는 최상위 title 키를 사용한다.
        items = page["title"]
    return parse_text_runs(items)


def parse_page_meta(page: Dict[str, Any]) -> PageMeta:
    return PageMeta(
        id=str(page.get("id") or ""),
        title=parse_page_title(page),
        cover=resolve_file_source(page.get("cover")),
    )


def parse_page_summary(page: Dict[str, Any]) -> PageSummary:
    last_edited = page.get("last_edited_time")
    return PageSummary(
        id=str(page.get("id") or ""),
        last_edited_time=last_edited if isinstance(last_edited, str) else None,
        title=parse_page_title(page),
        url=page.get("url"),
    )
