import importlib.util
import json
from pathlib import Path

BUILD_STATIC = Path(__file__).resolve().parent.parent / "scripts" / "build_static.py"


def load_build_static():
    spec = importlib.util.spec_from_file_location("build_static", BUILD_STATIC)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def write_manifest(path, count):
    posts = [
        {
            "slug": f"post-{index}",
            "title": f"Post {index}",
            "category": "Chapter Analysis" if index < 2 else "Arcs",
            "date": f"2024-02-{20 - index:02d}",
        }
        for index in range(count)
    ]
    path.write_text(json.dumps({"posts": posts}), encoding="utf-8")


def test_url_factory():
    build_static = load_build_static()
    builder = build_static.build_url_factory("jjk-blog")
    assert builder("all", 1) == "/jjk-blog/"
    assert builder("all", 2) == "/jjk-blog/page/2/"
    assert builder("Chapter Analysis", 1) == "/jjk-blog/category/chapter-analysis/"
    assert builder("Arcs", 3) == "/jjk-blog/category/arcs/page/3/"
    assert build_static.build_url_factory("")("all", 1) == "/"


def test_build_site_writes_every_page(tmp_path, monkeypatch):
    monkeypatch.delenv("BLOG_PAGE_SIZE", raising=False)
    build_static = load_build_static()
    manifest = tmp_path / "posts.json"
    write_manifest(manifest, 8)
    output = tmp_path / "site"

    written = build_static.build_site(output, "", manifest)

    # all: 2 pages, Chapter Analysis: 1 page, Arcs: 1 page
    assert written == 4
    index_html = (output / "index.html").read_text(encoding="utf-8")
    assert index_html.count('<article class="blog-card') == 6
    assert 'href="/page/2/"' in index_html
    assert 'href="/blog/post-0"' in index_html
    assert (output / "page" / "2" / "index.html").exists()
    assert (output / "category" / "chapter-analysis" / "index.html").exists()
    assert (output / "category" / "arcs" / "index.html").exists()
    assert (output / ".nojekyll").exists()
    assert (output / "blog" / "posts.json").exists()


def test_colliding_category_slugs_get_distinct_folders(tmp_path, monkeypatch):
    monkeypatch.delenv("BLOG_PAGE_SIZE", raising=False)
    build_static = load_build_static()
    assert build_static.category_dirs(["all", "呪術", "漫画", "Arcs"]) == {"呪術": "post", "漫画": "post-2", "Arcs": "arcs"}

    manifest = tmp_path / "posts.json"
    posts = [
        {"slug": "sorcery", "title": "Sorcery Notes", "category": "呪術", "date": "2024-02-02"},
        {"slug": "manga", "title": "Panel Review", "category": "漫画", "date": "2024-02-01"},
    ]
    manifest.write_text(json.dumps({"posts": posts}), encoding="utf-8")
    output = tmp_path / "site"

    assert build_static.build_site(output, "", manifest) == 3
    first = (output / "category" / "post" / "index.html").read_text(encoding="utf-8")
    second = (output / "category" / "post-2" / "index.html").read_text(encoding="utf-8")
    assert "Sorcery Notes" in first and "Panel Review" not in first
    assert "Panel Review" in second and "Sorcery Notes" not in second
