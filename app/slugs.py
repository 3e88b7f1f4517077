"""
URL slugs for catalog records
"""
import re
import unicodedata

_COMBINING_MARKS = re.compile(r'[\u0300-\u036f]')
_WHITESPACE = re.compile(r'\s+')
_NON_WORD = re.compile(r'[^\w-]+', re.ASCII)
_REPEATED_HYPHENS = re.compile(r'--+')


def slugify(text):
    """
    Turn a human title into a lowercase, URL-safe identifier.

    "Café Münchën!" -> "cafe-munchen". Leading or trailing hyphens produced by
    punctuation-only edges are kept as they are.
    """
    if not text:
        return ''
    value = unicodedata.normalize('NFD', str(text))
    value = _COMBINING_MARKS.sub('', value)
    value = value.lower().strip()
    value = _WHITESPACE.sub('-', value)
    value = _NON_WORD.sub('', value)
    return _REPEATED_HYPHENS.sub('-', value)


def slug_exists(session, model, slug, exclude_id=None):
    query = session.query(model.id).filter(model.slug == slug)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    return session.query(query.exists()).scalar()


def unique_slug(session, model, text, exclude_id=None):
    """
    Slug for `text` that no other row of `model` uses.

    Collisions get a numeric suffix starting at 2 ("foo", "foo-2", "foo-3", ...),
    each candidate checked against the table. `exclude_id` lets a record keep
    its own slug when it is updated in place.
    """
    base_slug = slugify(text)
    slug = base_slug
    counter = 2
    while slug_exists(session, model, slug, exclude_id):
        slug = f'{base_slug}-{counter}'
        counter += 1
    return slug
