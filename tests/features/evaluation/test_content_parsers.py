from app.features.evaluation.services.extraction.parsers import (
    HtmlContentParser,
    MarkdownContentParser,
)
from app.features.evaluation.services.extraction.signals import (
    detect_flags,
    detect_technologies,
    extract_ctas,
)

LANDING_PAGE = """
<html>
<head>
  <title>Acme &amp; Co - Invoicing</title>
  <meta name="description" content="Send invoices in &quot;seconds&quot;.">
  <script src="/_next/static/chunks/main.js"></script>
  <script>window.__NEXT_DATA__ = {}</script>
  <style>body { color: red; }</style>
</head>
<body>
  <header><nav>Home Pricing Sign in</nav></header>
  <!-- hidden comment text -->
  <main>
    <h1>Invoicing <em>made</em> simple</h1>
    <p>Trusted by 5,000+ freelancers.</p>
    <h2>Plans from $9 monthly</h2>
    <h4>Not collected</h4>
    <button class="primary">Start free trial</button>
    <a class="btn btn-large" href="/demo">Book a demo</a>
    <a href="/about">About us</a>
  </main>
  <footer>Footer links</footer>
</body>
</html>
"""


class TestHtmlContentParser:
    def test_title_and_description_are_decoded(self):
        content = HtmlContentParser().extract(LANDING_PAGE)

        assert content.title == "Acme & Co - Invoicing"
        assert content.meta_description == 'Send invoices in "seconds".'
        assert content.error is None

    def test_headings_levels_one_to_three_in_order(self):
        content = HtmlContentParser().extract(LANDING_PAGE)
        assert content.headings == ["Invoicing made simple", "Plans from $9 monthly"]

    def test_main_content_prefers_main_and_strips_chrome(self):
        content = HtmlContentParser().extract(LANDING_PAGE)

        assert "Trusted by 5,000+ freelancers." in content.main_content
        assert "Footer links" not in content.main_content
        assert "hidden comment" not in content.main_content
        assert "color: red" not in content.main_content
        assert "  " not in content.main_content

    def test_falls_back_to_content_div_then_document(self):
        html = '<div class="page-content"><p>Inside</p></div><p>Outside</p>'
        assert HtmlContentParser().extract(html).main_content == "Inside"

        html = "<body><p>Just text</p></body>"
        assert HtmlContentParser().extract(html).main_content == "Just text"

    def test_first_content_div_in_document_order_wins(self):
        html = (
            '<div class="page-content">Real product copy</div>'
            '<div id="app-modal">Cookie banner</div>'
        )
        assert HtmlContentParser().extract(html).main_content == "Real product copy"

        html = '<div id="main-area">By id</div><div class="content">By class</div>'
        assert HtmlContentParser().extract(html).main_content == "By id"

    def test_signals(self):
        content = HtmlContentParser().extract(LANDING_PAGE)

        assert content.has_pricing
        assert content.has_login
        assert content.has_social_proof
        assert not content.has_video
        assert content.ctas == ["Start free trial", "Book a demo"]
        assert content.technologies == ["Next.js"]

    def test_long_content_is_truncated(self):
        html = "<main>" + ("word " * 3000) + "</main>"
        content = HtmlContentParser().extract(html)

        assert len(content.main_content) == 6003
        assert content.main_content.endswith("...")

    def test_headings_are_capped_and_filtered(self):
        long_heading = "x" * 200
        html = f"<h1>{long_heading}</h1><h2></h2>" + "".join(f"<h3>Heading {i}</h3>" for i in range(30))
        headings = HtmlContentParser().extract(html).headings

        assert len(headings) == 20
        assert headings[0] == "Heading 0"

    def test_empty_document_has_no_signals(self):
        content = HtmlContentParser().extract("")

        assert content.title is None
        assert content.main_content == ""
        assert not any([
            content.has_pricing, content.has_login, content.has_social_proof,
            content.has_security_badges, content.has_video, content.has_faq,
        ])
        assert content.ctas == []
        assert content.technologies == []


class TestMarkdownContentParser:
    MARKDOWN = (
        "# Ship faster\n\n"
        "Read the [docs](https://example.com/docs) and **start** today.\n\n\n\n"
        "## Frequently asked questions\n"
        "#### Too deep\n"
        "```\ncode block\n```\n"
        "Use `inline` snippets.\n"
    )

    def test_headings_from_markdown(self):
        content = MarkdownContentParser().extract(self.MARKDOWN)
        assert content.headings == ["Ship faster", "Frequently asked questions"]

    def test_markdown_is_stripped(self):
        text = MarkdownContentParser().extract(self.MARKDOWN).main_content

        assert "Read the docs and start today." in text
        assert "#" not in text
        assert "code block" not in text
        assert "inline" not in text
        assert "\n\n\n" not in text

    def test_metadata_and_html_signals(self):
        parser = MarkdownContentParser(
            html='<div data-v-123><button>Get started</button></div>',
            title=" Ship ",
            description="Fast deploys",
        )
        content = parser.extract(self.MARKDOWN)

        assert content.title == "Ship"
        assert content.meta_description == "Fast deploys"
        assert content.has_faq
        assert content.ctas == ["Get started"]
        assert content.technologies == ["Vue"]


class TestSignals:
    def test_flags_on_empty_content_are_false(self):
        assert not any(detect_flags("").values())

    def test_video_and_security(self):
        flags = detect_flags('<iframe src="https://www.youtube.com/embed/x"></iframe> GDPR ready')
        assert flags["has_video"]
        assert flags["has_security_badges"]

    def test_technologies_in_fixed_order(self):
        html = 'gtag("js") <div ng-app></div> /wp-content/ stripe'
        assert detect_technologies(html) == ["Angular", "WordPress", "Stripe", "Google Analytics"]

    def test_ctas_are_bounded(self):
        html = "".join(f"<button>Action {i}</button>" for i in range(15))
        html += "<button>x</button><button>" + "y" * 60 + "</button>"
        ctas = extract_ctas(html)

        assert len(ctas) == 10
        assert ctas[0] == "Action 0"
