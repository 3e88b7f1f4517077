"""
Admin Routes - catalog CRUD, CSV import and site configuration

Every endpoint requires the admin cookie; mutating ones also require the
CSRF header (see middleware.auth).
"""

from flask import Blueprint, jsonify, request
import logging

from api_responses import success_response, paginated_response, handle_api_errors
from constants import COMMENT_STATUSES, BOOLEAN_SITE_SETTINGS, SITE_SETTING_DEFAULTS
from content_types import CONTENT_TYPES, get_content_type
from db import db
from exceptions import ValidationException
from importer import import_csv
from markdown_renderer import render_markdown
from middleware.auth import admin_required
from repositories.ad_repository import AdRepository
from repositories.category_repository import CategoryRepository
from repositories.comment_repository import CommentRepository
from repositories.content_repository import ContentRepository
from repositories.site_settings_repository import SiteSettingsRepository
from repositories.social_link_repository import SocialLinkRepository
from settings import load_settings
from utils import parse_bool, parse_int

logger = logging.getLogger("main")

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")

CONTENT_TYPE_RULE = "/<any(games, blogs, products):type_key>"


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationException("Request body must be a JSON object")
    return data


def _page_args(default_limit):
    max_limit = load_settings()["pagination"]["max_page_size"]
    page = parse_int(request.args.get("page"), 1, minimum=1)
    limit = parse_int(request.args.get("limit"), default_limit, minimum=1, maximum=max_limit)
    return page, limit


def _required_id(value):
    record_id = parse_int(value, None)
    if record_id is None:
        raise ValidationException("A numeric id is required")
    return record_id


# ===== Catalog =====


@admin_bp.route(CONTENT_TYPE_RULE, methods=["GET"])
@admin_required
@handle_api_errors
def list_content(type_key):
    """Paginated listing with search and sort"""
    repository = ContentRepository(get_content_type(type_key))
    page, limit = _page_args(load_settings()["pagination"]["admin_page_size"])
    items, total = repository.get_page(
        page=page,
        limit=limit,
        search=(request.args.get("search") or "").strip() or None,
        sort_by=request.args.get("sortBy"),
        sort_order=request.args.get("sortOrder", "desc"),
    )
    return paginated_response([item.to_dict() for item in items], total, page, limit)


@admin_bp.route(CONTENT_TYPE_RULE, methods=["POST"])
@admin_required
@handle_api_errors
def create_content(type_key):
    content_type = get_content_type(type_key)
    payload = content_type.payload.from_form(_json_body())
    record = ContentRepository(content_type).create(payload)
    logger.info(f"Created {type_key} record {record.id} ({record.slug})")
    return success_response(record.to_dict(), status_code=201)


@admin_bp.route(CONTENT_TYPE_RULE, methods=["PUT"])
@admin_required
@handle_api_errors
def update_content(type_key):
    content_type = get_content_type(type_key)
    data = _json_body()
    record_id = _required_id(data.get("id"))
    payload = content_type.payload.from_form(data)
    record = ContentRepository(content_type).update(record_id, payload)
    logger.info(f"Updated {type_key} record {record.id} ({record.slug})")
    return success_response(record.to_dict())


@admin_bp.route(CONTENT_TYPE_RULE, methods=["DELETE"])
@admin_required
@handle_api_errors
def delete_content(type_key):
    record_id = _required_id(request.args.get("id"))
    ContentRepository(get_content_type(type_key)).delete(record_id)
    logger.info(f"Deleted {type_key} record {record_id}")
    return success_response()


@admin_bp.route("/import", methods=["POST"])
@admin_required
@handle_api_errors
def import_content():
    """Bulk insert from CSV text: {"type": "games", "csvData": "..."}"""
    data = _json_body()
    report = import_csv(db.session, data.get("type"), data.get("csvData"))
    return success_response(report.to_dict())


@admin_bp.route("/preview/markdown", methods=["POST"])
@admin_required
@handle_api_errors
def preview_markdown():
    data = _json_body()
    return success_response({"html": str(render_markdown(data.get("text") or ""))})


# ===== Categories =====


@admin_bp.route("/categories", methods=["GET"])
@admin_required
@handle_api_errors
def get_categories():
    CategoryRepository.sync_from_content()
    return jsonify(CategoryRepository.get_all_with_counts())


@admin_bp.route("/categories", methods=["PUT"])
@admin_required
@handle_api_errors
def save_category():
    data = _json_body()
    section = data.get("section")
    name = (data.get("name") or "").strip()
    if section not in CONTENT_TYPES:
        raise ValidationException(f"Invalid section: {section}")
    if not name:
        raise ValidationException("Name is required")

    category = CategoryRepository.save(
        section,
        name,
        icon_name=(data.get("iconName") or "").strip() or None,
        show_in_sidebar=parse_bool(data.get("showInSidebar", True)),
        sort_order=parse_int(data.get("sortOrder"), 0),
    )
    return success_response(category.to_dict())


# ===== Ads =====


@admin_bp.route("/ads", methods=["GET"])
@admin_required
@handle_api_errors
def get_ads():
    return jsonify([ad.to_dict() for ad in AdRepository.get_all()])


@admin_bp.route("/ads", methods=["POST"])
@admin_required
@handle_api_errors
def save_ads():
    """{"placement": {"code": "...", "fallback_code": "..."}, ...} in one transaction"""
    data = _json_body()
    if not data:
        raise ValidationException("No ad placements supplied")
    for placement, values in data.items():
        if not placement or len(placement) > 100:
            raise ValidationException(f"Invalid placement: {placement!r}")
        if not isinstance(values, dict):
            raise ValidationException(f"Placement {placement} must be an object with code and fallback_code")

    updated = AdRepository.upsert_many(data)
    logger.info(f"Saved {updated} ad placements")
    return success_response({"success": True, "updated": updated})


# ===== Site settings =====


@admin_bp.route("/settings", methods=["GET"])
@admin_required
@handle_api_errors
def get_site_settings():
    return jsonify(SiteSettingsRepository.get_all())


@admin_bp.route("/settings", methods=["POST"])
@admin_required
@handle_api_errors
def save_site_settings():
    data = _json_body()
    values = {}
    for key, value in data.items():
        if key not in SITE_SETTING_DEFAULTS:
            raise ValidationException(f"Unknown setting: {key}")
        if key in BOOLEAN_SITE_SETTINGS:
            values[key] = "true" if parse_bool(value) else "false"
        elif isinstance(value, str):
            values[key] = value.strip()
        else:
            raise ValidationException(f"{key} must be a string")
    if not values:
        raise ValidationException("No settings supplied")
    return success_response(SiteSettingsRepository.set_many(values))


# ===== Social links =====


def _social_link_fields(data):
    name = (data.get("name") or "").strip()
    url = (data.get("url") or "").strip()
    if not name or not url:
        raise ValidationException("Name and URL are required")
    return {"name": name, "url": url, "icon_svg": data.get("icon_svg") or data.get("iconSvg")}


@admin_bp.route("/social-links", methods=["GET"])
@admin_required
@handle_api_errors
def get_social_links():
    return jsonify([link.to_dict() for link in SocialLinkRepository.get_all()])


@admin_bp.route("/social-links", methods=["POST"])
@admin_required
@handle_api_errors
def create_social_link():
    link = SocialLinkRepository.create(**_social_link_fields(_json_body()))
    return success_response(link.to_dict(), status_code=201)


@admin_bp.route("/social-links", methods=["PUT"])
@admin_required
@handle_api_errors
def update_social_link():
    data = _json_body()
    link = SocialLinkRepository.update(_required_id(data.get("id")), **_social_link_fields(data))
    return success_response(link.to_dict())


@admin_bp.route("/social-links", methods=["DELETE"])
@admin_required
@handle_api_errors
def delete_social_link():
    SocialLinkRepository.delete(_required_id(request.args.get("id")))
    return success_response()


# ===== Comment moderation =====


@admin_bp.route("/comments", methods=["GET"])
@admin_required
@handle_api_errors
def list_comments():
    status = request.args.get("status")
    if status and status not in COMMENT_STATUSES:
        raise ValidationException(f"Invalid status: {status}")
    page, limit = _page_args(load_settings()["pagination"]["admin_page_size"])
    comments, total = CommentRepository.get_page(page=page, limit=limit, status=status)
    return paginated_response([comment.to_dict() for comment in comments], total, page, limit)


@admin_bp.route("/comments", methods=["PUT"])
@admin_required
@handle_api_errors
def moderate_comment():
    data = _json_body()
    status = data.get("status")
    if status not in COMMENT_STATUSES:
        raise ValidationException(f"Invalid status: {status}")
    comment = CommentRepository.set_status(_required_id(data.get("id")), status)
    return success_response(comment.to_dict())


@admin_bp.route("/comments", methods=["DELETE"])
@admin_required
@handle_api_errors
def delete_comment():
    CommentRepository.delete(_required_id(request.args.get("id")))
    return success_response()


# ===== Dashboard =====


@admin_bp.route("/stats", methods=["GET"])
@admin_required
@handle_api_errors
def get_stats():
    repositories = {key: ContentRepository(content_type) for key, content_type in CONTENT_TYPES.items()}
    return jsonify({
        "totalGames": repositories["games"].count(),
        "totalBlogs": repositories["blogs"].count(),
        "totalProducts": repositories["products"].count(),
        "gameCategories": len(repositories["games"].category_counts()),
        "blogCategories": len(repositories["blogs"].category_counts()),
        "productCategories": len(repositories["products"].category_counts()),
        "totalSocialLinks": SocialLinkRepository.count(),
        "totalComments": CommentRepository.count(),
        "pendingComments": CommentRepository.count(status="pending"),
        "totalAds": AdRepository.count(),
    })


@admin_bp.route("/analytics", methods=["GET"])
@admin_required
@handle_api_errors
def get_analytics():
    """Most viewed records per content type"""
    result = {}
    for key, content_type in CONTENT_TYPES.items():
        result[key] = [
            {
                "id": record.id,
                "name": getattr(record, content_type.title_field),
                "slug": record.slug,
                "viewCount": record.view_count or 0,
            }
            for record in ContentRepository(content_type).trending(limit=5)
        ]
    return jsonify(result)


@admin_bp.route("/free-games/sync", methods=["POST"])
@admin_required
@handle_api_errors
def sync_free_games():
    from services.deal_sync import run_deal_sync

    synced = run_deal_sync(db.session, load_settings()["deals"])
    return success_response({"success": True, "source": "cheapshark", "synced": synced})
