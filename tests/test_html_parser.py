from linkcheck.parsers import PageExtractor, PageExtractorConfig


PAGE = b"""<!doctype html>
<html>
  <head><title>Guide</title></head>
  <body id="body">
    <h1 id="intro">Intro</h1>
    <a href="/b">B</a>
    <a href="/a">A</a>
    <a href="/b">B again</a>
    <a href="  /c#part  ">C</a>
    <a href="">empty</a>
    <a name="legacy">no href</a>
    <section id="usage"><p id="intro">dup id</p></section>
    <area href="/map-target">
  </body>
</html>
"""


def test_links_are_distinct_in_first_occurrence_order():
    result = PageExtractor().parse(PAGE)

    assert result.links == ["/b", "/a", "/c#part"]


def test_ids_are_collected_in_document_order():
    result = PageExtractor().parse(PAGE)

    assert result.ids == ["body", "intro", "usage", "intro"]


def test_accepts_text_input():
    result = PageExtractor().parse('<p id="x"><a href="mailto:a@b.test">m</a></p>')

    assert result.links == ["mailto:a@b.test"]
    assert result.ids == ["x"]


def test_link_tags_are_configurable():
    extractor = PageExtractor(PageExtractorConfig(link_tags=("a", "area")))

    assert "/map-target" in extractor.parse(PAGE).links


def test_plain_text_yields_nothing():
    result = PageExtractor().parse(b"just some text, no markup at all")

    assert result.links == []
    assert result.ids == []
