"""
Markdown subset -> safe HTML

Supported: fenced code blocks, **bold**, *italic*, "- " lists, paragraphs and
line breaks. Everything else is escaped and shown as text. The result is a
markupsafe.Markup so templates and JSON serializers can tell it apart from raw
author input.
"""
import re

from markupsafe import Markup

CODE_BLOCK_HTML = '<pre class="code-block"><code>{code}</code></pre>'

_FENCE = re.compile(r'```([\s\S]*?)```')
# Emphasis never spans a code placeholder, so no inline tag is split by a code block
_BOLD = re.compile(r'\*\*((?:(?!%%CODE_BLOCK_\d+%%).)+?)\*\*')
_ITALIC = re.compile(r'\*((?:(?!%%CODE_BLOCK_\d+%%).)+?)\*')
_BLOCK_SEPARATOR = re.compile(r'\n{2,}')
_PLACEHOLDER = re.compile(r'%%CODE_BLOCK_(\d+)%%')
_PARAGRAPH = re.compile(r'<p>(.*?)</p>', re.S)
_WRAPPED_LIST = re.compile(r'<p>\s*(<ul>.*?</ul>)\s*</p>', re.S)
_EDGE_BREAKS = re.compile(r'^(?:\s*<br />)+|(?:<br />\s*)+$')

# Ampersand goes first so the other entities are not escaped twice
_ESCAPES = (
    ('&', '&amp;'),
    ('<', '&lt;'),
    ('>', '&gt;'),
    ('"', '&quot;'),
    ("'", '&#039;'),
)


def escape_html(text):
    for char, entity in _ESCAPES:
        text = text.replace(char, entity)
    return text


def _render_block(block):
    block = block.strip('\n')
    if not block.strip():
        return ''
    lines = block.split('\n')
    if all(line.startswith('- ') for line in lines):
        items = ''.join(f'<li>{line[2:]}</li>' for line in lines)
        return f'<ul>{items}</ul>'
    return '<p>' + block.replace('\n', '<br />') + '</p>'


def _restore_code_blocks(html, code_blocks):
    def code_for(index):
        index = int(index)
        return code_blocks[index] if index < len(code_blocks) else None

    def unwrap(match):
        body = match.group(1)
        if not _PLACEHOLDER.search(body):
            return match.group(0)
        parts = _PLACEHOLDER.split(body)
        out = []
        for position, part in enumerate(parts):
            if position % 2:
                code = code_for(part)
                out.append(code if code is not None else f'<p>%%CODE_BLOCK_{part}%%</p>')
                continue
            text = _EDGE_BREAKS.sub('', part)
            if text.strip():
                out.append(f'<p>{text}</p>')
        return ''.join(out)

    html = _PARAGRAPH.sub(unwrap, html)

    def replace(match):
        code = code_for(match.group(1))
        return code if code is not None else match.group(0)

    return _PLACEHOLDER.sub(replace, html)


def render_markdown(text):
    """Render author text to HTML that is safe to embed without escaping."""
    if not text:
        return Markup('')

    text = str(text).replace('\r\n', '\n')
    code_blocks = []

    def extract(match):
        code_blocks.append(CODE_BLOCK_HTML.format(code=escape_html(match.group(1).strip())))
        return f'%%CODE_BLOCK_{len(code_blocks) - 1}%%'

    processed = _FENCE.sub(extract, text)
    processed = escape_html(processed)
    processed = _BOLD.sub(r'<strong>\1</strong>', processed)
    processed = _ITALIC.sub(r'<em>\1</em>', processed)

    html = ''.join(_render_block(block) for block in _BLOCK_SEPARATOR.split(processed))
    html = _restore_code_blocks(html, code_blocks)
    html = _WRAPPED_LIST.sub(r'\1', html)
    return Markup(html)


def trusted_html(html):
    """Mark admin-authored HTML (rich-text editor output) as safe to embed."""
    return Markup(html or '')
