"""
Property-Based Tests for heading anchors and compiled output.

For any sequence of headings, anchor ids are unique within a document and
compiling the same text twice gives identical output.
"""

from hypothesis import given, settings, strategies as st

from contentbuild.mdx.anchors import AnchorSlugger
from contentbuild.mdx.compiler import compile_document


heading_text = st.text(
    alphabet=st.sampled_from(list("abcXYZ019 -_.,!?'") + list("абвЖЗ")),
    min_size=0,
    max_size=20,
)


class TestAnchorProperties:

    @given(texts=st.lists(heading_text, max_size=25))
    @settings(max_examples=50)
    def test_slugs_unique_and_non_empty(self, texts):
        slugger = AnchorSlugger()
        slugs = [slugger.slug(text) for text in texts]
        assert len(set(slugs)) == len(slugs)
        assert all(slugs)

    @given(text=heading_text, repeats=st.integers(min_value=1, max_value=6))
    @settings(max_examples=30)
    def test_repeats_are_numbered(self, text, repeats):
        slugger = AnchorSlugger()
        slugs = [slugger.slug(text) for _ in range(repeats)]
        assert slugs[1:] == [f"{slugs[0]}-{n}" for n in range(1, repeats)]


class TestCompileProperties:

    @given(
        headings=st.lists(
            st.tuples(st.integers(min_value=1, max_value=6), heading_text.filter(lambda t: t.strip())),
            max_size=10,
        )
    )
    @settings(max_examples=30, deadline=None)
    def test_compile_deterministic_and_toc_matches(self, headings):
        source = "\n\n".join(f"{'#' * depth} {text.strip()}" for depth, text in headings) + "\n"
        first = compile_document(source)
        second = compile_document(source)

        assert first.compiled == second.compiled
        assert first.toc_dicts() == second.toc_dicts()
        ids = [entry.id for entry in first.toc]
        assert len(set(ids)) == len(ids)
        assert [entry.depth for entry in first.toc] == [depth for depth, _ in headings]
