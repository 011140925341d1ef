"""Documentation extraction: scanning, locating, trimming, tag dispatch, organizing."""

from whatsupdoc.extraction.curly import parse_curly
from whatsupdoc.extraction.dispatcher import parse_document, parse_documents
from whatsupdoc.extraction.document import Author, Document, Param, Returns, Throws
from whatsupdoc.extraction.locator import LocatedComment, is_doc_comment, locate_comments
from whatsupdoc.extraction.organizer import organize
from whatsupdoc.extraction.scanner import DeclarationEvent, DeclarationScanner
from whatsupdoc.extraction.scope import ScopeNode, ScopeTree
from whatsupdoc.extraction.tags import DEFAULT_TAG_HANDLERS, TagContext, TagHandler
from whatsupdoc.extraction.trimmer import expand_tabs, trim_comment, trim_margin

__all__ = [
    # Scope tree
    "ScopeNode",
    "ScopeTree",
    # Scanning
    "DeclarationEvent",
    "DeclarationScanner",
    # Locating and trimming
    "LocatedComment",
    "is_doc_comment",
    "locate_comments",
    "expand_tabs",
    "trim_comment",
    "trim_margin",
    # Documents and tags
    "Author",
    "Document",
    "Param",
    "Returns",
    "Throws",
    "DEFAULT_TAG_HANDLERS",
    "TagContext",
    "TagHandler",
    "parse_curly",
    "parse_document",
    "parse_documents",
    "organize",
]
