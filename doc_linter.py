#!/usr/bin/env python3
"""
Lints a Markdown tutorial for the properties a code-heavy guide must keep:

- every fenced code block parses as valid syntax for its declared language
  (python and json are checked, other languages are skipped);
- every external link resolves (opt-in, since it needs the network);
- every image or HTML file written by a save call in the examples has a
  name that is unique within the document.
"""
import argparse
import ast
import json
import logging
import os
import re
import sys
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = float(os.environ.get('BARCHART_LINK_TIMEOUT', '5'))

PYTHON_LANGUAGES = {'python', 'py', 'python3'}
JSON_LANGUAGES = {'json'}
SAVE_CALLS = {'savefig', 'save_figure', 'write_image', 'write_html', 'save_interactive'}
SAVE_PATH_KEYWORDS = {'fname', 'file', 'path'}

_FENCE_OPEN = re.compile(r'^( {0,3})(`{3,}|~{3,})\s*([^\s`]*)')
_INLINE_LINK = re.compile(r'\[[^\]]*\]\((https?://[^\s)]+)(?:\s+"[^"]*")?\)')
_AUTOLINK = re.compile(r'<(https?://[^>\s]+)>')
_REFERENCE_DEF = re.compile(r'^\s{0,3}\[[^\]]+\]:\s*<?(https?://[^\s>]+)>?')
_BARE_URL = re.compile(r'(?<![\w/])(https?://[^\s<>()\[\]]+)')
_INLINE_CODE = re.compile(r'`[^`]*`')


@dataclass
class CodeBlock:
    language: str
    code: str
    line: int
    closed: bool = True
    end_line: int = 0


@dataclass
class LintIssue:
    rule: str
    line: int
    message: str
    severity: str = "error"


@dataclass
class LintReport:
    issues: List[LintIssue] = field(default_factory=list)
    blocks_checked: int = 0
    links_checked: int = 0

    @property
    def errors(self) -> List[LintIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict:
        return {
            "ok": self.ok,
            "blocks_checked": self.blocks_checked,
            "links_checked": self.links_checked,
            "issues": [asdict(i) for i in self.issues],
        }


def extract_code_blocks(text: str) -> List[CodeBlock]:
    """Finds fenced code blocks; `line` is the 1-based line of the opening fence."""
    blocks = []
    lines = text.splitlines()
    i = 0
    while i < len(lines):
        match = _FENCE_OPEN.match(lines[i])
        if not match:
            i += 1
            continue
        indent, fence, language = len(match.group(1)), match.group(2), match.group(3).lower()
        closing = re.compile(r'^ {0,3}' + re.escape(fence[0]) + '{' + str(len(fence)) + r',}\s*$')
        start = i
        body = []
        i += 1
        closed = False
        while i < len(lines):
            if closing.match(lines[i]):
                closed = True
                break
            line = lines[i]
            if indent:
                line = line[indent:] if line[:indent].isspace() else line.lstrip(' ')
            body.append(line)
            i += 1
        blocks.append(CodeBlock(language=language, code="\n".join(body), line=start + 1,
                                closed=closed, end_line=min(i + 1, len(lines))))
        i += 1
    return blocks


def check_code_block_syntax(block: CodeBlock) -> Optional[LintIssue]:
    if block.language in PYTHON_LANGUAGES:
        try:
            ast.parse(block.code)
        except SyntaxError as e:
            offset = e.lineno or 0
            return LintIssue("syntax_error", block.line + offset,
                             f"Python block does not parse: {e.msg} (line {offset} of the block).")
    elif block.language in JSON_LANGUAGES:
        try:
            json.loads(block.code)
        except json.JSONDecodeError as e:
            return LintIssue("syntax_error", block.line + e.lineno,
                             f"JSON block does not parse: {e.msg} (line {e.lineno} of the block).")
    return None


def _prose_lines(text: str) -> List[Tuple[int, str]]:
    """Yields (line number, line) pairs outside fenced code blocks, inline code removed."""
    fenced = set()
    lines = text.splitlines()
    for block in extract_code_blocks(text):
        fenced.update(range(block.line, block.end_line + 1))
    return [(n, _INLINE_CODE.sub('', line)) for n, line in enumerate(lines, start=1) if n not in fenced]


def extract_links(text: str) -> List[Tuple[str, int]]:
    """
    Finds external links outside code: inline ``[t](url)`` links, ``<url>``
    autolinks, reference definitions ``[name]: url`` and bare URLs.
    Returns (url, line) pairs in reading order.
    """
    links = []
    for line_no, line in _prose_lines(text):
        found = []
        for pattern in (_REFERENCE_DEF, _INLINE_LINK, _AUTOLINK):
            for match in pattern.finditer(line):
                found.append((match.start(), match.group(1)))
            # Blank out what matched so the bare-URL pass doesn't see it again.
            line = pattern.sub(lambda m: ' ' * len(m.group(0)), line)
        for match in _BARE_URL.finditer(line):
            url = match.group(1).rstrip('.,;:!?\'"')
            if url:
                found.append((match.start(), url))
        links.extend((url, line_no) for _, url in sorted(found))
    return links


def check_link(url: str, timeout: float = DEFAULT_TIMEOUT) -> Optional[str]:
    """Returns why the link is broken, or None when it resolves."""
    try:
        response = requests.head(url, allow_redirects=True, timeout=timeout)
        if response.status_code in (403, 405):
            # Some documentation hosts refuse HEAD.
            response = requests.get(url, allow_redirects=True, timeout=timeout, stream=True)
            response.close()
        if response.status_code >= 400:
            return f"HTTP {response.status_code}"
    except requests.RequestException as e:
        return f"{type(e).__name__}: {e}"
    return None


def _call_name(func: ast.expr) -> Optional[str]:
    if isinstance(func, ast.Attribute):
        return func.attr
    if isinstance(func, ast.Name):
        return func.id
    return None


def find_saved_image_names(code: str) -> List[Tuple[str, int]]:
    """Returns (file name, line within the block) for string literals passed to save calls."""
    try:
        tree = ast.parse(code)
    except SyntaxError:
        return []
    names = []
    for node in ast.walk(tree):
        if not isinstance(node, ast.Call) or _call_name(node.func) not in SAVE_CALLS:
            continue
        candidates = list(node.args[:1]) + [k.value for k in node.keywords if k.arg in SAVE_PATH_KEYWORDS]
        for arg in candidates:
            if isinstance(arg, ast.Constant) and isinstance(arg.value, str):
                names.append((arg.value, node.lineno))
    return sorted(names, key=lambda item: item[1])


def lint_markdown(text: str, check_links: bool = False, timeout: float = DEFAULT_TIMEOUT) -> LintReport:
    report = LintReport()
    blocks = extract_code_blocks(text)
    seen_images: Dict[str, int] = {}

    for block in blocks:
        if not block.closed:
            report.issues.append(LintIssue("unclosed_fence", block.line,
                                           "Code block is never closed; the rest of the document renders as code."))
        if block.language in PYTHON_LANGUAGES | JSON_LANGUAGES:
            report.blocks_checked += 1
        issue = check_code_block_syntax(block)
        if issue:
            report.issues.append(issue)
        if block.language in PYTHON_LANGUAGES:
            for name, offset in find_saved_image_names(block.code):
                line = block.line + offset
                if name in seen_images:
                    report.issues.append(LintIssue(
                        "duplicate_image_name", line,
                        f"'{name}' is already saved by the example on line {seen_images[name]}; "
                        f"the later example overwrites it."))
                else:
                    seen_images[name] = line

    if check_links:
        checked: Dict[str, Optional[str]] = {}
        for url, line in extract_links(text):
            if url not in checked:
                checked[url] = check_link(url, timeout=timeout)
                if checked[url]:
                    report.issues.append(LintIssue("broken_link", line, f"{url} does not resolve ({checked[url]})."))
        report.links_checked = len(checked)

    report.issues.sort(key=lambda i: i.line)
    logger.info("Linted %d code blocks and %d links: %d issue(s)",
                report.blocks_checked, report.links_checked, len(report.issues))
    return report


def lint_file(path: str, check_links: bool = False, timeout: float = DEFAULT_TIMEOUT) -> LintReport:
    with open(path, 'r', encoding='utf-8') as f:
        return lint_markdown(f.read(), check_links=check_links, timeout=timeout)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Lint a Markdown tutorial's code blocks, links and saved file names.")
    parser.add_argument('path', help='Markdown file to lint.')
    parser.add_argument('--check-links', action='store_true', help='Also request every external link.')
    parser.add_argument('--timeout', type=float, default=DEFAULT_TIMEOUT, help='Seconds to wait per link.')
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        report = lint_file(args.path, check_links=args.check_links, timeout=args.timeout)
    except FileNotFoundError:
        logger.error("File not found: %s", args.path)
        return 2

    for issue in report.issues:
        print(f"{args.path}:{issue.line}: [{issue.rule}] {issue.message}")
    print(f"{len(report.errors)} error(s) in {report.blocks_checked} code block(s) and {report.links_checked} link(s).")
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
