from __future__ import annotations

from pathlib import Path

from helpers import doc_from_text, make_config
from postlint.checks.collection import check_duplicate_slugs, check_duplicate_titles, page_slug


def test_duplicate_titles_are_reported_on_every_member(tmp_path: Path) -> None:
    docs = [
        doc_from_text("---\ntitle: Hello  World\n---\n", "posts/a.md"),
        doc_from_text("---\ntitle: hello world\n---\n", "posts/b.md"),
        doc_from_text("---\ntitle: Something else\n---\n", "posts/c.md"),
    ]
    findings = check_duplicate_titles(docs, make_config(tmp_path))
    assert findings == [
        ("posts/a.md", 2, "title `Hello World` also used by posts/b.md"),
        ("posts/b.md", 2, "title `Hello World` also used by posts/a.md"),
    ]


def test_duplicate_titles_ignore_unparsed_and_missing_titles(tmp_path: Path) -> None:
    docs = [
        doc_from_text("---\ntitle: Same\n", "a.md"),
        doc_from_text("---\ntitle: Same\n---\n", "b.md"),
        doc_from_text("---\ndate: 2019-01-01\n---\n", "c.md"),
        doc_from_text("---\ndate: 2019-01-01\n---\n", "d.md"),
    ]
    assert check_duplicate_titles(docs, make_config(tmp_path)) == []


def test_page_slug_rules() -> None:
    assert page_slug(doc_from_text("---\nslug: Custom\n---\n", "posts/x.md")) == ("posts", "custom")
    assert page_slug(doc_from_text("---\ntitle: x\n---\n", "posts/bundle/index.md")) == ("posts", "bundle")
    assert page_slug(doc_from_text("---\ntitle: x\n---\n", "posts/_index.md")) == ("", "posts")
    assert page_slug(doc_from_text("---\ntitle: x\n---\n", "About.md")) == ("", "about")


def test_duplicate_slugs_between_file_and_bundle(tmp_path: Path) -> None:
    docs = [
        doc_from_text("---\ntitle: a\n---\n", "posts/hello.md"),
        doc_from_text("---\ntitle: b\n---\n", "posts/hello/index.md"),
        doc_from_text("---\ntitle: c\n---\n", "notes/hello.md"),
    ]
    findings = check_duplicate_slugs(docs, make_config(tmp_path))
    assert findings == [
        ("posts/hello.md", 1, "slug `posts/hello` also used by posts/hello/index.md"),
        ("posts/hello/index.md", 1, "slug `posts/hello` also used by posts/hello.md"),
    ]


def test_explicit_slug_collision_points_at_slug_line(tmp_path: Path) -> None:
    docs = [
        doc_from_text("---\ntitle: a\nslug: numpy\n---\n", "posts/one.md"),
        doc_from_text("---\ntitle: b\nslug: NumPy\n---\n", "posts/two.md"),
    ]
    findings = check_duplicate_slugs(docs, make_config(tmp_path))
    assert [(path, line) for path, line, _ in findings] == [("posts/one.md", 3), ("posts/two.md", 3)]


def test_bundle_slug_override_is_keyed_under_the_bundle_parent(tmp_path: Path) -> None:
    bundle = doc_from_text("---\ntitle: a\nslug: foo\n---\n", "posts/a/index.md")
    assert page_slug(bundle) == ("posts", "foo")
    docs = [bundle, doc_from_text("---\ntitle: b\n---\n", "posts/foo.md")]
    findings = check_duplicate_slugs(docs, make_config(tmp_path))
    assert findings == [
        ("posts/a/index.md", 3, "slug `posts/foo` also used by posts/foo.md"),
        ("posts/foo.md", 1, "slug `posts/foo` also used by posts/a/index.md"),
    ]
