"""
Catalog content types

Each content type has its own payload dataclass. Admin form bodies and CSV
rows are converted into one of these before anything touches the database,
so every field of every type is handled explicitly at that boundary.
"""
from dataclasses import dataclass, field, asdict
from datetime import date

from exceptions import NotFoundException, ValidationException
from models import BlogPost, Game, Product
from utils import now_utc, parse_bool, parse_float, parse_int, parse_price, split_multi_value


def _text(data, key, default=''):
    value = data.get(key)
    if value is None:
        return default
    value = str(value).strip()
    return value if value else default


def _optional_text(data, key):
    return _text(data, key, None)


def _required(data, key, label):
    value = _text(data, key)
    if not value:
        raise ValidationException(f'{label} is required')
    return value


def _publish_date(value):
    if not value:
        return now_utc().date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise ValidationException(f'Invalid publish date: {value}')


@dataclass(frozen=True)
class GamePayload:
    title: str
    image_url: str = ''
    category: str = ''
    tags: list = field(default_factory=list)
    theme: str = 'dark'
    accent_color: str = None
    description: str = ''
    video_url: str = None
    download_url: str = '#'
    download_url_ios: str = None
    gallery: list = field(default_factory=list)
    platform: str = 'pc'
    requirements: dict = None
    icon_url: str = None
    background_url: str = None
    rating: float = 95
    downloads_count: int = 1000
    is_pinned: bool = False

    @classmethod
    def from_form(cls, data):
        requirements = data.get('requirements')
        return cls(
            title=_required(data, 'title', 'Title'),
            image_url=_text(data, 'imageUrl'),
            category=_text(data, 'category'),
            tags=split_multi_value(data.get('tags')),
            theme=_text(data, 'theme', 'dark'),
            accent_color=_optional_text(data, 'accentColor'),
            description=_text(data, 'description'),
            video_url=_optional_text(data, 'videoUrl'),
            download_url=_text(data, 'downloadUrl', '#'),
            download_url_ios=_optional_text(data, 'downloadUrlIos'),
            gallery=split_multi_value(data.get('gallery')),
            platform=_text(data, 'platform', 'pc'),
            requirements=requirements if isinstance(requirements, dict) else None,
            icon_url=_optional_text(data, 'iconUrl'),
            background_url=_optional_text(data, 'backgroundUrl'),
            rating=parse_float(data.get('rating'), 95),
            downloads_count=parse_int(data.get('downloadsCount'), 1000, minimum=0),
            is_pinned=parse_bool(data.get('isPinned')),
        )

    @classmethod
    def from_csv(cls, row):
        return cls(
            title=_required(row, 'title', 'Title'),
            image_url=_text(row, 'imageUrl'),
            category=_text(row, 'category', 'Action'),
            tags=split_multi_value(row.get('tags')),
            theme=_text(row, 'theme', 'dark'),
            description=_text(row, 'description'),
            video_url=_optional_text(row, 'videoUrl'),
            download_url=_text(row, 'downloadUrl', '#'),
            gallery=split_multi_value(row.get('gallery')),
            platform=_text(row, 'platform', 'pc'),
            rating=parse_float(row.get('rating'), 95),
            downloads_count=parse_int(row.get('downloadsCount'), 1000, minimum=0),
        )

    def columns(self):
        return asdict(self)


@dataclass(frozen=True)
class BlogPayload:
    title: str
    summary: str = ''
    image_url: str = ''
    video_url: str = None
    author: str = 'Admin'
    publish_date: date = None
    rating: float = 0
    affiliate_url: str = None
    content: str = ''
    category: str = ''
    is_pinned: bool = False

    @classmethod
    def from_form(cls, data):
        return cls(
            title=_required(data, 'title', 'Title'),
            summary=_text(data, 'summary'),
            image_url=_text(data, 'imageUrl'),
            video_url=_optional_text(data, 'videoUrl'),
            author=_text(data, 'author', 'Admin'),
            publish_date=_publish_date(data.get('publishDate')),
            rating=parse_float(data.get('rating'), 0),
            affiliate_url=_optional_text(data, 'affiliateUrl'),
            content=data.get('content') or '',
            category=_text(data, 'category'),
            is_pinned=parse_bool(data.get('isPinned')),
        )

    @classmethod
    def from_csv(cls, row):
        return cls(
            title=_required(row, 'title', 'Title'),
            summary=_text(row, 'summary'),
            image_url=_text(row, 'imageUrl'),
            video_url=_optional_text(row, 'videoUrl'),
            affiliate_url=_optional_text(row, 'affiliateUrl'),
            author=_text(row, 'author', 'Admin'),
            publish_date=_publish_date(row.get('publishDate')),
            rating=parse_float(row.get('rating'), 5),
            content=row.get('content') or '',
            category=_text(row, 'category', 'General'),
        )

    def columns(self):
        return asdict(self)


@dataclass(frozen=True)
class ProductPayload:
    name: str
    image_url: str = ''
    price: float = 0
    url: str = '#'
    description: str = ''
    gallery: list = field(default_factory=list)
    category: str = ''
    is_pinned: bool = False

    @classmethod
    def from_form(cls, data):
        return cls(
            name=_required(data, 'name', 'Name'),
            image_url=_text(data, 'imageUrl'),
            price=parse_price(data.get('price')),
            url=_text(data, 'url', '#'),
            description=_text(data, 'description'),
            gallery=split_multi_value(data.get('gallery')),
            category=_text(data, 'category'),
            is_pinned=parse_bool(data.get('isPinned')),
        )

    @classmethod
    def from_csv(cls, row):
        return cls(
            name=_required(row, 'name', 'Name'),
            image_url=_text(row, 'imageUrl'),
            price=parse_price(row.get('price')),
            url=_text(row, 'url', '#'),
            description=_text(row, 'description'),
            gallery=split_multi_value(row.get('gallery')),
            category=_text(row, 'category', 'Gear'),
        )

    def columns(self):
        return asdict(self)


@dataclass(frozen=True)
class ContentType:
    key: str
    model: type
    payload: type
    title_field: str
    search_fields: tuple

    @property
    def sort_fields(self):
        return ('id', self.title_field, 'category', 'view_count', 'created_at')

    def title_of(self, payload):
        return getattr(payload, self.title_field)


CONTENT_TYPES = {
    'games': ContentType('games', Game, GamePayload, 'title', ('title',)),
    'blogs': ContentType('blogs', BlogPost, BlogPayload, 'title', ('title', 'author')),
    'products': ContentType('products', Product, ProductPayload, 'name', ('name',)),
}


def get_content_type(key):
    content_type = CONTENT_TYPES.get(key)
    if content_type is None:
        raise NotFoundException('Content type', key)
    return content_type
