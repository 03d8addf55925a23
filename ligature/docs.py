"""Documentation attached to exported entities.

Docs carry the author's prose plus links to the Rust items they mirror.
Backends render them with to_markdown() before converting to their own
comment syntax.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DOCS_RS_BASE = "https://docs.rs/"


class DocType(Enum):
    """Kind of Rust item a link points at. Decides the docs.rs page layout."""

    MOD = "mod"
    STRUCT = "struct"
    STRUCT_FIELD = "struct_field"
    STRUCT_METHOD = "struct_method"
    ENUM = "enum"
    ENUM_VARIANT = "enum_variant"
    ENUM_METHOD = "enum_method"
    TRAIT = "trait"
    TRAIT_METHOD = "trait_method"
    FN = "fn"
    MACRO = "macro"
    TYPEDEF = "typedef"
    CONSTANT = "constant"


class LinkDisplay(Enum):
    """How a link shows up in rendered docs."""

    NORMAL = "normal"  # its own "See the Rust documentation" paragraph
    COMPACT = "compact"  # numbered entry in one trailing paragraph
    HIDDEN = "hidden"  # not rendered


class MarkdownStyle(Enum):
    NORMAL = "normal"
    RST_COMPAT = "rst_compat"


@dataclass(frozen=True)
class RustLink:
    """Link to a Rust item, e.g. path ("icu", "locid", "Locale")."""

    path: tuple[str, ...]
    typ: DocType
    display: LinkDisplay = LinkDisplay.NORMAL


# Number of trailing path elements that name an item rather than a module.
_ITEM_DEPTH: dict[DocType, int] = {
    DocType.MOD: 0,
    DocType.STRUCT: 1,
    DocType.ENUM: 1,
    DocType.TRAIT: 1,
    DocType.FN: 1,
    DocType.MACRO: 1,
    DocType.TYPEDEF: 1,
    DocType.CONSTANT: 1,
    DocType.STRUCT_FIELD: 2,
    DocType.STRUCT_METHOD: 2,
    DocType.ENUM_VARIANT: 2,
    DocType.ENUM_METHOD: 2,
    DocType.TRAIT_METHOD: 2,
}

_PAGE_PREFIX: dict[DocType, str] = {
    DocType.STRUCT: "struct.",
    DocType.STRUCT_FIELD: "struct.",
    DocType.STRUCT_METHOD: "struct.",
    DocType.ENUM: "enum.",
    DocType.ENUM_VARIANT: "enum.",
    DocType.ENUM_METHOD: "enum.",
    DocType.TRAIT: "trait.",
    DocType.TRAIT_METHOD: "trait.",
    DocType.FN: "fn.",
    DocType.MACRO: "macro.",
    DocType.TYPEDEF: "type.",
    DocType.CONSTANT: "constant.",
}

_ANCHOR_PREFIX: dict[DocType, str] = {
    DocType.STRUCT_FIELD: "#structfield.",
    DocType.ENUM_VARIANT: "#variant.",
    DocType.STRUCT_METHOD: "#method.",
    DocType.ENUM_METHOD: "#method.",
    DocType.TRAIT_METHOD: "#method.",
}


@dataclass(frozen=True)
class DocsUrlGenerator:
    """Builds docs URLs for Rust links.

    base_urls maps a crate name to the root of its hosted docs; crates not
    listed use default_url, falling back to docs.rs.
    """

    default_url: str | None = None
    base_urls: dict[str, str] = field(default_factory=dict, hash=False)

    def gen_for_rust_link(self, link: RustLink) -> str:
        crate = link.path[0]
        base = self.base_urls.get(crate) or self.default_url or DOCS_RS_BASE
        url = base if base.endswith("/") else base + "/"
        if url == DOCS_RS_BASE:
            url += f"{crate}/latest/"

        module_depth = len(link.path) - _ITEM_DEPTH[link.typ]
        for element in link.path[:module_depth]:
            url += element + "/"
        rest = link.path[module_depth:]
        if not rest:
            return url + "index.html"

        url += _PAGE_PREFIX[link.typ] + rest[0] + ".html"
        if len(rest) > 1:
            url += _ANCHOR_PREFIX[link.typ] + rest[1]
        return url


@dataclass
class Docs:
    """Prose plus Rust links for one entity."""

    text: str = ""
    links: list[RustLink] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.text and not self.links

    def to_markdown(
        self, url_gen: DocsUrlGenerator, style: MarkdownStyle = MarkdownStyle.NORMAL
    ) -> str:
        out = self.text
        if style == MarkdownStyle.RST_COMPAT:
            out = out.replace("``", "`").replace("`", "``")

        compact: list[RustLink] = []
        for link in self.links:
            match link.display:
                case LinkDisplay.NORMAL:
                    if out:
                        out += "\n\n"
                    out += (
                        f"See the [Rust documentation for `{link.path[-1]}`]"
                        f"({url_gen.gen_for_rust_link(link)}) for more information."
                    )
                case LinkDisplay.COMPACT:
                    compact.append(link)
                case LinkDisplay.HIDDEN:
                    pass

        if compact:
            if out:
                out += "\n\n"
            refs = ", ".join(
                f"[{i}]({url_gen.gen_for_rust_link(link)})"
                for i, link in enumerate(compact, start=1)
            )
            out += "Additional information: " + refs
        return out
