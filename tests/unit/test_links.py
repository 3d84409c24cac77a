from tests.helpers.sentinel_imports import LinkExtractor

PAGE = """
<html>
  <head>
    <base href="/root/">
    <link rel="stylesheet" href="/static/site.css">
    <script src="/static/app.js"></script>
  </head>
  <body>
    <a href="/one">One</a>
    <a href="/one">One again</a>
    <a href="two#frag">Two</a>
    <a href="https://www.a.test/three">Three</a>
    <a href="https://evil.test/x">External</a>
    <a href="mailto:team@a.test">Mail</a>
    <a href="javascript:void(0)">JS</a>
    <a href="http://[::1">Broken</a>
    <a>No href</a>
    <map><area href="/area-target"></map>
  </body>
</html>
"""


def test_extract_collects_supported_tags_in_first_seen_order():
    extractor = LinkExtractor(origin="https://a.test/")

    links = extractor.extract(PAGE, "https://a.test/")

    assert links == [
        "https://a.test/root/",
        "https://a.test/static/site.css",
        "https://a.test/one",
        "https://a.test/two",
        "https://www.a.test/three",
        "https://a.test/area-target",
    ]


def test_extract_ignores_script_sources():
    extractor = LinkExtractor(origin="https://a.test/")

    links = extractor.extract(PAGE, "https://a.test/")

    assert "https://a.test/static/app.js" not in links


def test_extract_keeps_external_links_when_not_ignored():
    extractor = LinkExtractor(origin="https://a.test/", ignore_external_links=False)

    links = extractor.extract(PAGE, "https://a.test/")

    assert "https://evil.test/x" in links
    assert all(link.startswith(("http://", "https://")) for link in links)


def test_extract_handles_empty_documents():
    extractor = LinkExtractor(origin="https://a.test/")

    assert extractor.extract("", "https://a.test/") == []
