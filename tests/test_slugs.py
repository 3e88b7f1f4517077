"""
Tests for slug generation and collision handling
"""
import pytest

from slugs import slugify, unique_slug


class TestSlugify:
    """Tests for slugify"""

    def test_strips_accents_and_punctuation(self):
        assert slugify("Café Münchën!") == "cafe-munchen"

    def test_collapses_whitespace(self):
        assert slugify("  multiple   spaces  ") == "multiple-spaces"

    def test_empty_input(self):
        assert slugify("") == ""
        assert slugify(None) == ""

    def test_keeps_digits_and_underscores(self):
        assert slugify("Half_Life 2: Episode One") == "half_life-2-episode-one"

    def test_collapses_repeated_hyphens(self):
        assert slugify("Rock -- Roll") == "rock-roll"

    def test_edge_hyphens_are_kept(self):
        assert slugify("- Hello -") == "-hello-"

    def test_drops_non_ascii_letters(self):
        assert slugify("東京 Drift") == "-drift"

    @pytest.mark.parametrize("text", [
        "Café Münchën!",
        "The Witcher 3: Wild Hunt",
        "  multiple   spaces  ",
        "already-a-slug",
        "¿Qué pasa?",
    ])
    def test_idempotent(self, text):
        once = slugify(text)
        assert slugify(once) == once


class TestUniqueSlug:
    """Tests for unique_slug against the database"""

    def test_free_slug_is_returned_as_is(self, session):
        from models import Game

        assert unique_slug(session, Game, "Hollow Knight") == "hollow-knight"

    def test_suffix_counts_past_existing_collisions(self, session, make_game):
        from models import Game

        make_game("Foo", slug="foo")
        make_game("Foo", slug="foo-2")

        assert unique_slug(session, Game, "Foo") == "foo-3"

    def test_first_collision_gets_suffix_two(self, session, make_game):
        from models import Game

        make_game("Foo", slug="foo")

        assert unique_slug(session, Game, "Foo") == "foo-2"

    def test_excluded_row_keeps_its_slug(self, session, make_game):
        from models import Game

        owner = make_game("Foo", slug="foo")
        make_game("Foo", slug="foo-2")

        assert unique_slug(session, Game, "Foo", exclude_id=owner.id) == "foo"

    def test_tables_are_independent(self, session, make_game):
        from models import Product

        make_game("Foo", slug="foo")

        assert unique_slug(session, Product, "Foo") == "foo"
