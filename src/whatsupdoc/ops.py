"""Documentation extraction operations.

Pipeline for one source text::

    parse (tree-sitter) -> scan declarations -> locate doc comments
        -> trim -> dispatch tags -> organize

``parse_module`` runs it on a string, ``parse_file`` on a path and
``parse_files`` on many paths, each file with its own parser, scope tree
and document tree.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from whatsupdoc.config.constants import DOC_OPT_IN_PATTERN
from whatsupdoc.config.models import ParserConfig, WhatsupdocConfig
from whatsupdoc.core.errors import InternalError, SourceParseError, WhatsupdocError
from whatsupdoc.core.logging import get_current_source, get_logger, set_current_source
from whatsupdoc.extraction.dispatcher import parse_documents
from whatsupdoc.extraction.document import Document
from whatsupdoc.extraction.locator import locate_comments
from whatsupdoc.extraction.organizer import organize
from whatsupdoc.extraction.scanner import DeclarationScanner
from whatsupdoc.extraction.scope import ScopeTree
from whatsupdoc.extraction.tags import TagHandler
from whatsupdoc.parsing.treesitter import JavaScriptParser, RawComment

log = get_logger(__name__)

_OPT_IN = re.compile(DOC_OPT_IN_PATTERN)


def _parser_config(config: WhatsupdocConfig | ParserConfig | None) -> ParserConfig:
    if config is None:
        return ParserConfig()
    if isinstance(config, WhatsupdocConfig):
        return config.parser
    return config


def has_opt_in(comments: Sequence[RawComment]) -> bool:
    """Whether a ``/*whatsupdoc*/`` comment opts the file in."""
    return any(c.kind == "block" and _OPT_IN.match(c.text.strip()) for c in comments)


def module_id_for(path: Path, extensions: Sequence[str] = (".js",)) -> str:
    """Module id for a path: its POSIX form with a JavaScript extension stripped."""
    text = path.as_posix()
    for ext in extensions:
        if text.endswith(ext):
            return text[: -len(ext)]
    return text


def _run(
    text: str,
    module_id: str | None,
    config: ParserConfig,
    tag_handlers: Mapping[str, TagHandler] | None,
    *,
    require_annotation: bool = False,
) -> Document | None:
    previous = get_current_source()
    set_current_source(module_id)
    try:
        result = JavaScriptParser().parse(text)
        if require_annotation and not has_opt_in(result.comments):
            log.info("module_skipped", reason="no /*whatsupdoc*/ annotation")
            return None

        diagnostics: list[str] = []
        if result.has_errors:
            if not config.allow_syntax_errors:
                raise SourceParseError.syntax_error(
                    module_id, result.error_count, result.first_error_line
                )
            diagnostics.append(
                f"Source has {result.error_count} syntax errors; documentation may be incomplete"
            )

        tree = ScopeTree(module_id)
        scanner = DeclarationScanner(tree)
        events = scanner.scan(result.root_node)
        located = locate_comments(
            result.comments,
            events,
            tab_width=config.tab_width,
            doc_marker=config.doc_marker,
        )
        diagnostics.extend(scanner.diagnostics)
        diagnostics.extend(parse_documents(located, tree, tree.root, module_id, tag_handlers))
        root = organize(tree, module_id, diagnostics)
        log.debug(
            "module_parsed",
            declarations=len(events),
            documents=len(located),
            children=len(root.children),
        )
        return root
    finally:
        set_current_source(previous)


def parse_module(
    text: str,
    module_id: str | None = None,
    *,
    config: WhatsupdocConfig | ParserConfig | None = None,
    tag_handlers: Mapping[str, TagHandler] | None = None,
) -> Document:
    """Build the document tree for the JavaScript program in ``text``.

    Args:
        text: Program source.
        module_id: Identifier used as the root's ``name`` and ``id``.
        config: Parser settings (defaults if omitted).
        tag_handlers: Replacement tag handler mapping.

    Returns:
        Root ``Document`` of type ``"module"``.

    Raises:
        SourceParseError: If the source has syntax errors and
            ``allow_syntax_errors`` is off.
    """
    root = _run(text, module_id, _parser_config(config), tag_handlers)
    if root is None:
        raise InternalError.unexpected("module skipped without an annotation requirement")
    return root


def parse_file(
    path: Path,
    *,
    module_id: str | None = None,
    config: WhatsupdocConfig | ParserConfig | None = None,
    tag_handlers: Mapping[str, TagHandler] | None = None,
) -> Document:
    """Build the document tree for a JavaScript file (read as UTF-8)."""
    parser_config = _parser_config(config)
    _check_extension(path, parser_config)
    text = path.read_text(encoding="utf-8")
    return parse_module(
        text,
        module_id or module_id_for(path, parser_config.extensions),
        config=parser_config,
        tag_handlers=tag_handlers,
    )


def _check_extension(path: Path, config: ParserConfig) -> None:
    if not any(path.name.endswith(ext) for ext in config.extensions):
        raise SourceParseError.unsupported(str(path))


def parse_files(
    paths: Sequence[Path],
    *,
    config: WhatsupdocConfig | ParserConfig | None = None,
    tag_handlers: Mapping[str, TagHandler] | None = None,
) -> Document:
    """Build one document tree per file under a common root.

    Files are independent: a file that cannot be read or parsed is
    reported in the root's ``errors`` and the others are unaffected. With
    ``require_annotation`` set, files without ``/*whatsupdoc*/`` are
    skipped silently.

    Returns:
        Root ``Document`` of type ``"modules"`` whose children are keyed by
        module id, in input order.
    """
    parser_config = _parser_config(config)

    def work(path: Path) -> Document | None:
        _check_extension(path, parser_config)
        text = path.read_text(encoding="utf-8")
        return _run(
            text,
            module_id_for(path, parser_config.extensions),
            parser_config,
            tag_handlers,
            require_annotation=parser_config.require_annotation,
        )

    root = Document(type="modules")
    if parser_config.max_workers == 1 or len(paths) <= 1:
        outcomes = [_capture(work, path) for path in paths]
    else:
        with ThreadPoolExecutor(max_workers=parser_config.max_workers) as pool:
            outcomes = list(pool.map(lambda p: _capture(work, p), paths))

    for path, (document, error) in zip(paths, outcomes):
        if error is not None:
            root.errors.append(f"{path}: {error}")
            log.error("module_failed", path=str(path), error=str(error))
            continue
        if document is None:
            continue
        key = document.id or str(path)
        if key in root.children:
            root.errors.append(f"Duplicate module id {key!r}; keeping the first")
            continue
        root.children[key] = document
    return root


def _capture(
    work: Callable[[Path], Document | None], path: Path
) -> tuple[Document | None, Exception | None]:
    try:
        return work(path), None
    except (WhatsupdocError, OSError, UnicodeDecodeError) as e:
        return None, e
    except Exception as e:
        log.exception("module_crashed", path=str(path))
        return None, InternalError.unexpected(f"{type(e).__name__}: {e}", path=str(path))
