"""
Tests that canonical rendering of parsed documents parses back to the same tree.
"""

import pytest

SOURCES = [
    "a:x() && b:y() || c:z()",
    "g1,g2; b; m, k = v : f ( x , y = z , ) && { a b } || k=v",
    '"quoted \\" value"="x" ',
    'x;a:(b:foo() && c:bar())',
    "((a() || b()) && (c() || {d}))",
    'deploy "to prod"("eu west", dry=yes)',
]


class TestCanonicalForm:
    """Rendering and re-parsing is stable."""

    @pytest.mark.parametrize("source", SOURCES)
    def test_reparse_yields_same_tree(self, parser, source):
        document = parser.parse(source)
        assert parser.parse(str(document)) == document

    @pytest.mark.parametrize("source", SOURCES)
    def test_canonical_form_is_a_fixed_point(self, parser, source):
        canonical = str(parser.parse(source))
        assert str(parser.parse(canonical)) == canonical

    def test_canonical_spacing(self, parser):
        document = parser.parse("g;m,k=v:f(x,y)&&{a  b}||(c())")
        assert str(document) == "g; m, k=v: f(x, y) && {a b} || (c())"

    def test_guarded_group_is_not_taken_by_document(self, parser):
        document = parser.parse("a;(b() || c())")
        # The document prefix takes "a;" here, so the group itself is unguarded.
        assert document.leading_modifiers != ()
        assert str(document) == "a; (b() || c())"

    def test_guarded_group_renders_with_colon(self, parser):
        document = parser.parse("x; a;(b() || c())")
        assert str(document) == "x; a: (b() || c())"
        assert parser.parse(str(document)) == document
