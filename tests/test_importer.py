"""
Tests for CSV parsing and the bulk import pipeline
"""
import pytest
from datetime import date
from sqlalchemy.exc import OperationalError

import importer
from exceptions import ValidationException
from importer import import_csv, parse_csv, parse_csv_line


class TestParseCsvLine:
    """Tests for the quoted-field line parser"""

    def test_quoted_commas_and_escaped_quotes(self):
        fields = parse_csv_line('Title,"Contains, a comma","Quote ""inside"" text"')

        assert fields == ['Title', 'Contains, a comma', 'Quote "inside" text']

    def test_empty_fields(self):
        assert parse_csv_line('a,,b') == ['a', '', 'b']
        assert parse_csv_line('a,') == ['a', '']

    def test_fields_are_trimmed(self):
        assert parse_csv_line(' a , b ') == ['a', 'b']
        assert parse_csv_line('  "x"  ,y') == ['x', 'y']

    def test_single_field(self):
        assert parse_csv_line('only') == ['only']


class TestParseCsv:

    def test_rows_are_mapped_to_headers(self):
        headers, rows = parse_csv('title,category\r\nDoom,Shooter\n\n  \nQuake\n')

        assert headers == ['title', 'category']
        assert rows == [
            (2, {'title': 'Doom', 'category': 'Shooter'}),
            (3, {'title': 'Quake', 'category': None}),
        ]

    def test_empty_document(self):
        assert parse_csv('') == ([], [])


class TestImportCsv:
    """Tests for import_csv against the database"""

    def test_bad_row_does_not_abort_batch(self, session):
        from models import Game

        csv_text = "\n".join([
            "title,category",
            "Game One,RPG",
            "Game Two,RPG",
            ",RPG",
            "Game Four,Action",
            "Game Five,Puzzle",
        ])

        report = import_csv(session, 'games', csv_text)

        assert report.success_count == 4
        assert report.fail_count == 1
        assert report.errors == ['Row 4: Title is required']
        assert session.query(Game).count() == 4

    def test_game_defaults_and_multi_values(self, session):
        from models import Game

        csv_text = 'title,tags,gallery\nStardew Valley," farming | cozy ",a.png|b.png'

        import_csv(session, 'games', csv_text)
        game = session.query(Game).one()

        assert game.slug == 'stardew-valley'
        assert game.category == 'Action'
        assert game.theme == 'dark'
        assert game.download_url == '#'
        assert game.description == ''
        assert game.tags == ['farming', 'cozy']
        assert game.gallery == ['a.png', 'b.png']

    def test_duplicate_titles_get_distinct_slugs(self, session):
        from models import Game

        import_csv(session, 'games', 'title\nFoo\nFoo\nFoo')

        slugs = sorted(game.slug for game in session.query(Game).all())
        assert slugs == ['foo', 'foo-2', 'foo-3']

    def test_blog_defaults(self, session):
        from models import BlogPost

        import_csv(session, 'blogs', 'title,content\nPatch notes,"<p>Hi, all</p>"')
        post = session.query(BlogPost).one()

        assert post.author == 'Admin'
        assert post.rating == 5
        assert post.category == 'General'
        assert post.content == '<p>Hi, all</p>'
        assert isinstance(post.publish_date, date)

    def test_blog_video_and_affiliate_columns(self, session):
        from models import BlogPost

        import_csv(session, 'blogs',
                   'title,videoUrl,affiliateUrl\nPost,https://v.example/x,https://buy.example/y')
        post = session.query(BlogPost).one()

        assert post.video_url == 'https://v.example/x'
        assert post.affiliate_url == 'https://buy.example/y'

    def test_blog_invalid_date_is_a_row_error(self, session):
        report = import_csv(session, 'blogs', 'title,publishDate\nGood,2026-01-05\nBad,someday')

        assert report.success_count == 1
        assert report.errors == ['Row 3: Invalid publish date: someday']

    def test_products_require_name(self, session):
        from models import Product

        report = import_csv(session, 'products', 'name,price\n,10\nHeadset,$19.99')
        product = session.query(Product).one()

        assert report.errors == ['Row 2: Name is required']
        assert product.price == 19.99
        assert product.category == 'Gear'
        assert product.url == '#'

    def test_database_error_is_isolated_to_its_row(self, session, monkeypatch):
        from models import Game

        real_unique_slug = importer.unique_slug

        def flaky_unique_slug(db_session, model, text, exclude_id=None):
            if text == 'Broken':
                raise OperationalError('SELECT', {}, Exception('disk I/O error'))
            return real_unique_slug(db_session, model, text, exclude_id)

        monkeypatch.setattr(importer, 'unique_slug', flaky_unique_slug)

        report = import_csv(session, 'games', 'title\nFine\nBroken\nAlso Fine')

        assert report.success_count == 2
        assert report.errors == ['Row 3: disk I/O error']
        assert sorted(g.title for g in session.query(Game).all()) == ['Also Fine', 'Fine']

    def test_report_dict_shape(self, session):
        report = import_csv(session, 'games', 'title\nOne')

        assert report.to_dict() == {'successCount': 1, 'failCount': 0, 'errors': []}

    def test_unknown_type_is_rejected(self, session):
        with pytest.raises(ValidationException):
            import_csv(session, 'users', 'title\nx')

    def test_empty_csv_is_rejected(self, session):
        with pytest.raises(ValidationException):
            import_csv(session, 'games', '   ')

    def test_non_text_arguments_are_rejected(self, session):
        with pytest.raises(ValidationException):
            import_csv(session, ['games'], 'title\nx')
        with pytest.raises(ValidationException):
            import_csv(session, 'games', 123)
