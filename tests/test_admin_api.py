"""
Tests for the admin endpoints
"""
from conftest import CSRF_HEADERS


class TestContentCrud:
    """Create, update, list and delete catalog records"""

    def test_create_game_applies_form_defaults(self, admin_client):
        response = admin_client.post('/api/admin/games', json={
            'title': 'Hollow Knight',
            'tags': 'metroidvania|indie',
        }, headers=CSRF_HEADERS)

        assert response.status_code == 201
        game = response.get_json()
        assert game['slug'] == 'hollow-knight'
        assert game['tags'] == ['metroidvania', 'indie']
        assert game['rating'] == 95
        assert game['downloadsCount'] == 1000
        assert game['platform'] == 'pc'
        assert game['downloadUrl'] == '#'

    def test_non_finite_rating_gets_default(self, admin_client):
        response = admin_client.post('/api/admin/games', json={'title': 'Odd', 'rating': 'nan'},
                                     headers=CSRF_HEADERS)

        assert response.status_code == 201
        assert response.get_json()['rating'] == 95

    def test_create_requires_title(self, admin_client):
        response = admin_client.post('/api/admin/games', json={'title': '  '}, headers=CSRF_HEADERS)

        assert response.status_code == 400
        assert response.get_json() == {'error': 'Title is required', 'code': 'VALIDATION_ERROR'}

    def test_second_record_with_same_title_gets_suffix(self, admin_client, make_game):
        make_game('Foo')

        response = admin_client.post('/api/admin/games', json={'title': 'Foo'}, headers=CSRF_HEADERS)

        assert response.get_json()['slug'] == 'foo-2'

    def test_update_keeps_slug_when_title_unchanged(self, admin_client, make_game):
        game = make_game('Foo', category='RPG')

        response = admin_client.put('/api/admin/games', json={
            'id': game.id, 'title': 'Foo', 'category': 'Action',
        }, headers=CSRF_HEADERS)

        assert response.status_code == 200
        assert response.get_json()['slug'] == 'foo'
        assert response.get_json()['category'] == 'Action'

    def test_update_reslugs_on_title_change(self, admin_client, make_game):
        make_game('Bar Baz')
        game = make_game('Foo')

        response = admin_client.put('/api/admin/games', json={'id': game.id, 'title': 'Bar Baz'},
                                    headers=CSRF_HEADERS)

        assert response.get_json()['slug'] == 'bar-baz-2'

    def test_update_missing_record(self, admin_client):
        response = admin_client.put('/api/admin/games', json={'id': 999, 'title': 'X'}, headers=CSRF_HEADERS)

        assert response.status_code == 404

    def test_update_requires_id(self, admin_client):
        response = admin_client.put('/api/admin/products', json={'name': 'X'}, headers=CSRF_HEADERS)

        assert response.status_code == 400

    def test_delete(self, admin_client, make_game, session):
        from models import Game
        game = make_game('Gone')

        response = admin_client.delete(f'/api/admin/games?id={game.id}', headers=CSRF_HEADERS)

        assert response.status_code == 200
        assert response.get_json() == {'success': True}
        assert session.query(Game).count() == 0

    def test_list_search_sort_and_pinned_first(self, admin_client, make_game):
        make_game('Alpha Quest')
        make_game('Beta Quest', is_pinned=True)
        make_game('Gamma Run')

        response = admin_client.get('/api/admin/games?search=quest&sortBy=title&sortOrder=asc')
        body = response.get_json()

        assert [item['title'] for item in body['items']] == ['Beta Quest', 'Alpha Quest']
        assert body['pagination'] == {'totalItems': 2, 'totalPages': 1, 'currentPage': 1, 'itemsPerPage': 20}

    def test_unknown_sort_column_falls_back(self, admin_client, make_game):
        make_game('One')
        make_game('Two')

        response = admin_client.get('/api/admin/games?sortBy=password;drop')

        assert response.status_code == 200
        assert [item['title'] for item in response.get_json()['items']] == ['Two', 'One']

    def test_create_product_parses_price(self, admin_client):
        response = admin_client.post('/api/admin/products', json={'name': 'Pad', 'price': '$49.50'},
                                     headers=CSRF_HEADERS)

        assert response.get_json()['price'] == 49.5

    def test_unknown_content_type_is_404(self, admin_client):
        assert admin_client.get('/api/admin/users').status_code == 404


class TestImportEndpoint:

    def test_import_reports_per_row(self, admin_client):
        response = admin_client.post('/api/admin/import', json={
            'type': 'games',
            'csvData': 'title\nOne\n\nTwo\n,',
        }, headers=CSRF_HEADERS)

        assert response.status_code == 200
        assert response.get_json() == {
            'successCount': 2,
            'failCount': 1,
            'errors': ['Row 4: Title is required'],
        }

    def test_import_rejects_unknown_type(self, admin_client):
        response = admin_client.post('/api/admin/import', json={'type': 'users', 'csvData': 'a\nb'},
                                     headers=CSRF_HEADERS)

        assert response.status_code == 400

    def test_import_rejects_non_text_csv(self, admin_client):
        response = admin_client.post('/api/admin/import', json={'type': 'games', 'csvData': 123},
                                     headers=CSRF_HEADERS)

        assert response.status_code == 400
        assert response.get_json() == {'error': 'csvData is required', 'code': 'VALIDATION_ERROR'}

    def test_import_rejects_list_type(self, admin_client, session):
        from models import Game

        response = admin_client.post('/api/admin/import', json={'type': ['games'], 'csvData': 'title\nx'},
                                     headers=CSRF_HEADERS)

        assert response.status_code == 400
        assert response.get_json()['code'] == 'VALIDATION_ERROR'
        assert session.query(Game).count() == 0


class TestCategories:

    def test_categories_are_registered_from_content(self, admin_client, make_game):
        make_game('A', category='RPG')
        make_game('B', category='RPG')

        categories = admin_client.get('/api/admin/categories').get_json()

        assert categories == [{
            'section': 'games', 'name': 'RPG', 'iconName': 'Gamepad2',
            'showInSidebar': True, 'sortOrder': 0, 'count': 2,
        }]

    def test_save_category_upserts(self, admin_client):
        body = {'section': 'games', 'name': 'Puzzle', 'iconName': 'Puzzle', 'showInSidebar': False}
        admin_client.put('/api/admin/categories', json=body, headers=CSRF_HEADERS)
        response = admin_client.put('/api/admin/categories', json=dict(body, sortOrder=3), headers=CSRF_HEADERS)

        assert response.status_code == 200
        assert response.get_json()['sortOrder'] == 3
        assert response.get_json()['showInSidebar'] is False

    def test_save_category_invalid_section(self, admin_client):
        response = admin_client.put('/api/admin/categories', json={'section': 'x', 'name': 'Y'},
                                    headers=CSRF_HEADERS)

        assert response.status_code == 400


class TestAdsAndSettings:

    def test_ads_are_saved_together(self, admin_client):
        response = admin_client.post('/api/admin/ads', json={
            'header': {'code': '<script>a</script>', 'fallback_code': ''},
            'sidebar': {'code': 'b'},
        }, headers=CSRF_HEADERS)

        assert response.get_json() == {'success': True, 'updated': 2}
        ads = admin_client.get('/api/admin/ads').get_json()
        assert [ad['placement'] for ad in ads] == ['header', 'sidebar']

    def test_invalid_placement_writes_nothing(self, admin_client, session):
        from models import Ad

        response = admin_client.post('/api/admin/ads', json={
            'header': {'code': 'a'},
            'footer': 'not an object',
        }, headers=CSRF_HEADERS)

        assert response.status_code == 400
        assert session.query(Ad).count() == 0

    def test_failed_placement_rolls_back_earlier_ones(self, admin_client, session, monkeypatch):
        from sqlalchemy.exc import OperationalError
        from models import Ad
        import repositories.ad_repository as ad_repository

        real_upsert = ad_repository.upsert
        calls = []

        def failing_upsert(db_session, model, values, **kwargs):
            calls.append(values['placement'])
            if len(calls) == 2:
                raise OperationalError('INSERT', {}, Exception('database is locked'))
            return real_upsert(db_session, model, values, **kwargs)

        monkeypatch.setattr(ad_repository, 'upsert', failing_upsert)

        response = admin_client.post('/api/admin/ads', json={
            'header': {'code': 'a'},
            'sidebar': {'code': 'b'},
        }, headers=CSRF_HEADERS)

        assert response.status_code == 500
        assert calls == ['header', 'sidebar']
        assert session.query(Ad).count() == 0

    def test_site_settings_merge_over_defaults(self, admin_client):
        response = admin_client.post('/api/admin/settings', json={
            'site_name': '  Portal  ', 'promo_enabled': True,
        }, headers=CSRF_HEADERS)

        settings = response.get_json()
        assert settings['site_name'] == 'Portal'
        assert settings['promo_enabled'] == 'true'
        assert settings['hero_button_url'] == '/games'

    def test_unknown_setting_is_rejected(self, admin_client):
        response = admin_client.post('/api/admin/settings', json={'debug': '1'}, headers=CSRF_HEADERS)

        assert response.status_code == 400


class TestSocialLinksAndComments:

    def test_social_link_lifecycle(self, admin_client):
        created = admin_client.post('/api/admin/social-links', json={
            'name': 'Discord', 'url': 'https://discord.gg/x',
        }, headers=CSRF_HEADERS).get_json()

        updated = admin_client.put('/api/admin/social-links', json={
            'id': created['id'], 'name': 'Discord', 'url': 'https://discord.gg/y',
        }, headers=CSRF_HEADERS).get_json()
        assert updated['url'] == 'https://discord.gg/y'

        admin_client.delete(f"/api/admin/social-links?id={created['id']}", headers=CSRF_HEADERS)
        assert admin_client.get('/api/admin/social-links').get_json() == []

    def test_moderate_comment(self, admin_client, make_post, session):
        from models import Comment

        post = make_post('News')
        comment = Comment(post_id=post.id, author='Sam', text='Nice article!', status='pending')
        session.add(comment)
        session.commit()

        pending = admin_client.get('/api/admin/comments?status=pending').get_json()
        assert [c['id'] for c in pending['items']] == [comment.id]

        response = admin_client.put('/api/admin/comments', json={'id': comment.id, 'status': 'approved'},
                                    headers=CSRF_HEADERS)
        assert response.get_json()['status'] == 'approved'

        response = admin_client.put('/api/admin/comments', json={'id': comment.id, 'status': 'spam'},
                                    headers=CSRF_HEADERS)
        assert response.status_code == 400


class TestDashboard:

    def test_stats(self, admin_client, make_game, make_post):
        make_game('A', category='RPG')
        make_game('B', category='Action')
        make_post('P', category='News')

        stats = admin_client.get('/api/admin/stats').get_json()

        assert stats['totalGames'] == 2
        assert stats['gameCategories'] == 2
        assert stats['totalBlogs'] == 1
        assert stats['totalProducts'] == 0
        assert stats['pendingComments'] == 0

    def test_analytics_most_viewed(self, admin_client, make_game):
        make_game('Quiet', view_count=1)
        make_game('Popular', view_count=50)

        analytics = admin_client.get('/api/admin/analytics').get_json()

        assert [row['name'] for row in analytics['games']] == ['Popular', 'Quiet']
        assert analytics['products'] == []

    def test_markdown_preview(self, admin_client):
        response = admin_client.post('/api/admin/preview/markdown', json={'text': '**hi**'},
                                     headers=CSRF_HEADERS)

        assert response.get_json() == {'html': '<p><strong>hi</strong></p>'}
