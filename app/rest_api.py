from flask_restx import Api, Resource, fields
from flask import request
import logging

from api_responses import pagination_meta
from constants import (
    COMMENT_AUTHOR_LENGTH,
    COMMENT_TEXT_LENGTH,
    DEAL_SORT_OPTIONS,
    SIDEBAR_SECTIONS,
    VIEW_TRACKING_TYPES,
)
from content_types import get_content_type
from db import db
from exceptions import NotFoundException, ValidationException, register_api_error_handlers
from markdown_renderer import render_markdown, trusted_html
from models import BlogPost
from repositories.ad_repository import AdRepository
from repositories.category_repository import CategoryRepository
from repositories.comment_repository import CommentRepository
from repositories.content_repository import ContentRepository
from repositories.deal_repository import DealRepository
from repositories.site_settings_repository import SiteSettingsRepository
from repositories.social_link_repository import SocialLinkRepository
from services.recaptcha import verify_recaptcha
from settings import load_settings
from slugs import slugify
from utils import now_utc, parse_int

logger = logging.getLogger('main')


def _page_args(default_limit):
    max_limit = load_settings()['pagination']['max_page_size']
    page = parse_int(request.args.get('page'), 1, minimum=1)
    limit = parse_int(request.args.get('limit'), default_limit, minimum=1, maximum=max_limit)
    return page, limit


def _render_detail(key, repository, record):
    data = record.to_dict()
    if key == 'blogs':
        # Rich-text editor output written by the admin
        data['contentHtml'] = str(trusted_html(record.content))
        data['commentCount'] = record.comments.filter_by(status='approved').count()
    else:
        data['descriptionHtml'] = str(render_markdown(record.description))
    data['related'] = [item.to_dict() for item in repository.related(record)]
    data['trending'] = [item.to_dict() for item in repository.trending()]
    return data


def init_rest_api(app):
    api = Api(app, version='1.0', title='Game Portal API',
        description='Public catalog, deals and comments API',
        doc='/api/docs'
    )
    register_api_error_handlers(api)

    # Namespaces
    ns_deals = api.namespace('free-games', path='/api/free-games', description='Free game deals')
    ns_comments = api.namespace('comments', path='/api/comments', description='Blog comments')
    ns_views = api.namespace('views', path='/api/views', description='View tracking')
    ns_content = api.namespace('content', path='/api/content', description='Catalog reads')
    ns_public = api.namespace('public', path='/api/public', description='Storefront navigation')
    ns_site = api.namespace('site', path='/api', description='Site configuration')

    # Models
    comment_input = api.model('CommentInput', {
        'postId': fields.Integer(required=True, description='Blog post id'),
        'author': fields.String(required=True, description='Display name, 2-50 characters'),
        'text': fields.String(required=True, description='Comment body (Markdown), 10-1000 characters'),
        'recaptchaToken': fields.String(required=True, description='reCAPTCHA response token'),
    })

    view_input = api.model('ViewInput', {
        'type': fields.String(required=True, enum=list(VIEW_TRACKING_TYPES), description='Content type'),
        'slug': fields.String(required=True, description='Record slug'),
    })

    # Namespace Deals
    @ns_deals.route('')
    class FreeGameList(Resource):
        @ns_deals.doc('list_free_games', params={
            'store': 'Store name contains', 'platform': 'Platform contains', 'tag': 'Exact tag',
            'sortBy': 'newest | ending_soon | value', 'page': 'Page number', 'limit': 'Page size',
        })
        def get(self):
            """Active free deals, filtered and paginated"""
            page, limit = _page_args(load_settings()['pagination']['deals_page_size'])
            sort_by = request.args.get('sortBy', 'newest')
            if sort_by not in DEAL_SORT_OPTIONS:
                sort_by = 'newest'

            deals, total = DealRepository.get_active_page(
                page=page,
                limit=limit,
                store=(request.args.get('store') or '').strip() or None,
                platform=(request.args.get('platform') or '').strip() or None,
                tag=(request.args.get('tag') or '').strip() or None,
                sort_by=sort_by,
            )
            meta = pagination_meta(total, page, limit)
            body = {
                'deals': [deal.to_dict() for deal in deals],
                'pagination': {
                    'total': total,
                    'page': page,
                    'limit': limit,
                    'totalPages': meta['totalPages'],
                },
            }
            return body, 200, {'Cache-Control': 'public, s-maxage=60, stale-while-revalidate=300'}

    # Namespace Comments
    @ns_comments.route('')
    class CommentList(Resource):
        @ns_comments.doc('list_comments', params={'postId': 'Blog post id'})
        def get(self):
            """Approved comments of a post, with rendered Markdown"""
            post_id = parse_int(request.args.get('postId'), None)
            if post_id is None:
                raise ValidationException('postId is required')
            comments = []
            for comment in CommentRepository.get_approved_for_post(post_id):
                data = comment.to_dict()
                data['textHtml'] = str(render_markdown(comment.text))
                comments.append(data)
            return comments

        @ns_comments.doc('create_comment')
        @ns_comments.expect(comment_input, validate=False)
        def post(self):
            """Submit a comment; it waits for moderation"""
            # Import here to avoid circular dependency
            from app import limiter

            @limiter.limit('5 per minute')
            def _rate_limited_comment():
                data = request.get_json(silent=True) or {}
                token = data.get('recaptchaToken')
                if not token:
                    raise ValidationException('reCAPTCHA token is required')

                post_id = parse_int(data.get('postId'), None)
                author = str(data.get('author') or '').strip()
                text = str(data.get('text') or '').strip()
                if post_id is None or not author or not text:
                    raise ValidationException('postId, author and text are required')

                min_author, max_author = COMMENT_AUTHOR_LENGTH
                if not min_author <= len(author) <= max_author:
                    raise ValidationException(f'Author must be {min_author}-{max_author} characters')
                min_text, max_text = COMMENT_TEXT_LENGTH
                if not min_text <= len(text) <= max_text:
                    raise ValidationException(f'Comment must be {min_text}-{max_text} characters')

                if not verify_recaptcha(token, load_settings()['recaptcha'], request.remote_addr):
                    raise ValidationException('reCAPTCHA verification failed')

                if db.session.get(BlogPost, post_id) is None:
                    raise NotFoundException('Post', post_id)

                now = now_utc()
                comment = CommentRepository.create(
                    post_id=post_id,
                    author=author,
                    avatar_url=f'https://i.pravatar.cc/40?u={int(now.timestamp() * 1000)}',
                    date=f'{now:%B} {now.day}, {now.year}',
                    text=text,
                    status='pending',
                )
                logger.info(f'New comment {comment.id} on post {post_id} awaiting moderation')
                return comment.to_dict(), 201

            return _rate_limited_comment()

    # Namespace Views
    @ns_views.route('/track')
    class ViewTracker(Resource):
        @ns_views.doc('track_view')
        @ns_views.expect(view_input, validate=False)
        def post(self):
            """Count one view of a record"""
            data = request.get_json(silent=True) or {}
            type_key = VIEW_TRACKING_TYPES.get(data.get('type'))
            slug = str(data.get('slug') or '').strip()
            if type_key is None:
                raise ValidationException('Invalid content type')
            if not slug:
                raise ValidationException('slug is required')

            ContentRepository(get_content_type(type_key)).increment_views(slug)
            return {'success': True}, 202

    # Namespace Content
    @ns_content.route('/<any(games, blogs, products):type_key>')
    @ns_content.param('type_key', 'games, blogs or products')
    class ContentList(Resource):
        @ns_content.doc('list_content', params={'category': 'Category name', 'page': 'Page', 'limit': 'Page size'})
        def get(self, type_key):
            """Published records, pinned first"""
            repository = ContentRepository(get_content_type(type_key))
            page, limit = _page_args(load_settings()['pagination']['admin_page_size'])
            items, total = repository.get_page(
                page=page,
                limit=limit,
                category=(request.args.get('category') or '').strip() or None,
            )
            return {'items': [item.to_dict() for item in items], 'pagination': pagination_meta(total, page, limit)}

    @ns_content.route('/<any(games, blogs, products):type_key>/<string:slug>')
    @ns_content.response(404, 'Record not found')
    class ContentDetail(Resource):
        @ns_content.doc('get_content')
        def get(self, type_key, slug):
            """One record with rendered HTML, related and trending records"""
            repository = ContentRepository(get_content_type(type_key))
            record = repository.get_by_slug(slug)
            if record is None:
                raise NotFoundException(type_key, slug)
            return _render_detail(type_key, repository, record)

    # Namespace Public
    @ns_public.route('/sidebar-categories')
    class SidebarCategories(Resource):
        @ns_public.doc('sidebar_categories', params={'section': 'games | blog | shop'})
        def get(self):
            """Categories shown in a storefront sidebar"""
            section = SIDEBAR_SECTIONS.get(request.args.get('section'))
            if section is None:
                raise ValidationException('Invalid section')
            return [
                {'id': index, 'name': row.name, 'slug': slugify(row.name), 'iconName': row.icon_name}
                for index, row in enumerate(CategoryRepository.get_sidebar(section), start=1)
            ]

    # Namespace Site
    @ns_site.route('/social-links')
    class SocialLinks(Resource):
        def get(self):
            """Footer social links"""
            return [link.to_dict() for link in SocialLinkRepository.get_all()]

    @ns_site.route('/ads')
    class Ads(Resource):
        def get(self):
            """Ad code for every placement"""
            return [ad.to_dict() for ad in AdRepository.get_all()]

    @ns_site.route('/site-settings')
    class SiteSettings(Resource):
        def get(self):
            """Storefront settings merged over defaults"""
            return SiteSettingsRepository.get_all()

    @ns_site.route('/settings/ogads-script')
    class OgadsScript(Resource):
        def get(self):
            """Source URL of the offer-wall script"""
            return {'script': SiteSettingsRepository.get('ogads_script_src') or ''}

    return api
