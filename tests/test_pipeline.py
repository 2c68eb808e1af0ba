from __future__ import annotations

from datetime import date
import tempfile
from pathlib import Path
import unittest

from katika import config
from katika.models import Artist, Portfolio, reset_engine
from katika.pipeline.content import ContentRecord, build_content_record, content_from_mapping, split_skills
from katika.pipeline.render_html import compose_html
from katika.pipeline.templates import select_template, render_classic, render_modern
from katika.pipeline.theme import FALLBACK_RGB, ColorTheme, hex_to_rgb, resolve_theme


AMA = ContentRecord(
    name="Ama K.",
    email="ama@x.com",
    about_me="",
    skills=("vocals", "guitar"),
    social_links={"instagram": "https://instagram.com/ama"},
)


class ThemeTests(unittest.TestCase):
    def test_hex_round_trip(self) -> None:
        self.assertEqual(hex_to_rgb("#B026FF"), (176, 38, 255))
        self.assertEqual(hex_to_rgb("ffd23f"), (255, 210, 63))
        self.assertEqual(hex_to_rgb("#000000"), (0, 0, 0))

    def test_malformed_hex_uses_fallback(self) -> None:
        for value in ("", "#FFF", "#GG0000", "#12345", "#1234567", "purple", None, 42):
            self.assertEqual(hex_to_rgb(value), FALLBACK_RGB)

    def test_resolve_theme_nested_and_flat(self) -> None:
        nested = resolve_theme({"colors": {"primary": "#112233", "accent": "#445566"}, "layout": "grid"})
        self.assertEqual(nested.primary, "#112233")
        self.assertEqual(nested.accent, "#445566")
        self.assertEqual(nested.background, config.DEFAULT_BACKGROUND)

        flat = resolve_theme({"primary": "#abcdef"})
        self.assertEqual(flat.primary_rgb, (171, 205, 239))

    def test_resolve_theme_defaults(self) -> None:
        self.assertEqual(resolve_theme(None), ColorTheme())
        self.assertEqual(resolve_theme({"colors": {"primary": ""}}).primary, config.DEFAULT_PRIMARY)

    def test_malformed_colours_fall_back_to_defaults(self) -> None:
        theme = resolve_theme({"colors": {"primary": "red;} body{display:none} .x{", "accent": "#GG0000", "background": 7}})
        self.assertEqual(theme, ColorTheme())
        self.assertEqual(resolve_theme({"primary": " abcdef "}).primary, "#abcdef")

        html = compose_html(AMA, "modern", theme)
        self.assertNotIn("display:none", html)
        self.assertIn(f"--primary: {config.DEFAULT_PRIMARY};", html)


class ContentTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        config.set_out_dir(Path(self.temp_dir.name))
        reset_engine()
        self.artist = Artist(
            id=1,
            name="Kofi Mensah",
            email="kofi@example.com",
            bio="Painter working in oils.",
            category="visual_artist",
            experience="professional",
            genres=["portraits", "murals"],
            city="Kumasi",
            country="Ghana",
            social_links={"Website": "https://kofi.art", "instagram": "", "twitter": "https://x.com/kofi"},
        )

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_split_skills(self) -> None:
        self.assertEqual(split_skills("vocals, guitar ,, drums"), ("vocals", "guitar", "drums"))
        self.assertEqual(split_skills(["a", " b ", ""]), ("a", "b"))
        self.assertEqual(split_skills(None), ())

    def test_artist_fields_fill_the_record(self) -> None:
        record = build_content_record(self.artist)
        self.assertEqual(record.title, "Visual Artist")
        self.assertEqual(record.about_me, "Painter working in oils.")
        self.assertEqual(record.skills, ("portraits", "murals"))
        self.assertEqual(record.location, "Kumasi, Ghana")
        self.assertEqual(list(record.social_links), ["instagram", "twitter", "website"])
        self.assertEqual(
            record.populated_links(),
            [("twitter", "https://x.com/kofi"), ("website", "https://kofi.art")],
        )

    def test_portfolio_content_overrides(self) -> None:
        portfolio = Portfolio(
            id=3,
            artist_id=1,
            title="Studio Year",
            sections=[{"type": "gallery", "content": "Twelve canvases."}, {"type": "press", "title": "In the news"}],
            content={"aboutMe": "Override bio", "skills": "oils, charcoal", "services": "", "phone": "555"},
        )
        record = build_content_record(self.artist, portfolio)
        self.assertEqual(record.about_me, "Override bio")
        self.assertEqual(record.skills, ("oils", "charcoal"))
        self.assertEqual(record.services, "")
        self.assertEqual(record.phone, "555")
        self.assertEqual(record.portfolio_title, "Studio Year")
        self.assertEqual([s.label for s in record.sections], ["GALLERY", "IN THE NEWS"])

    def test_content_from_mapping(self) -> None:
        record = content_from_mapping(
            {
                "name": "Ama K.",
                "email": "ama@x.com",
                "experience_level": "beginner",
                "location": {"city": "Accra"},
                "skills": "vocals,guitar",
                "socialLinks": {"instagram": "https://instagram.com/ama"},
            }
        )
        self.assertEqual(record.experience_level, "beginner")
        self.assertEqual(record.location, "Accra")
        self.assertEqual(record.skills, ("vocals", "guitar"))


class HtmlTests(unittest.TestCase):
    def test_modern_scenario(self) -> None:
        html = compose_html(AMA, "modern")
        self.assertTrue(html.startswith("<!DOCTYPE html>"))
        self.assertIn('<meta name="viewport"', html)
        self.assertIn('class="fab fa-instagram"', html)
        self.assertIn('href="https://instagram.com/ama"', html)
        self.assertEqual(html.count('class="skill-chip"'), 2)
        self.assertLess(html.index(">vocals<"), html.index(">guitar<"))
        self.assertNotIn(">Experience</h2>", html)
        self.assertNotIn(">Services</h2>", html)
        self.assertNotIn(">Testimonials</h2>", html)
        self.assertIn(">About Me</h2>", html)
        self.assertIn('<p class="section-text"></p>', html)
        self.assertIn(f"&copy; {date.today().year} Ama K.", html)
        self.assertNotIn("fa-phone", html)

    def test_contact_phone_line(self) -> None:
        record = ContentRecord(name="Ama K.", email="ama@x.com", phone="+233 20 000 0000")
        for template in ("modern", "classic", "artistic"):
            html = compose_html(record, template)
            self.assertIn('<i class="fas fa-phone"></i> +233 20 000 0000', html)
            self.assertIn('href="mailto:ama@x.com"', html)

    def test_optional_sections_appear_when_set(self) -> None:
        record = ContentRecord(name="A", email="a@x.com", jobs="Session player", services="Lessons", testimonials="Great")
        body = render_classic(record)
        self.assertIn(">Experience</h2>", body)
        self.assertIn(">Services</h2>", body)
        self.assertIn(">Testimonials</h2>", body)
        self.assertNotIn(">Skills</h2>", body)

    def test_unknown_template_falls_back_to_modern(self) -> None:
        self.assertIs(select_template("neon"), render_modern)
        self.assertIs(select_template(None), render_modern)
        self.assertIs(select_template(" Classic "), render_classic)
        self.assertIn('class="template-modern"', compose_html(AMA, "does-not-exist"))
        self.assertIn('class="template-artistic"', compose_html(AMA, "artistic"))

    def test_theme_variables(self) -> None:
        html = compose_html(AMA, "classic", resolve_theme({"colors": {"primary": "#123456"}}))
        self.assertIn("--primary: #123456;", html)
        self.assertIn(f"--accent: {config.DEFAULT_ACCENT};", html)

    def test_user_text_is_raw_unless_escaping_enabled(self) -> None:
        record = ContentRecord(name="<b>Ama</b>", email="ama@x.com")
        self.assertIn("<b>Ama</b>", compose_html(record))
        original = config.ESCAPE_HTML
        config.ESCAPE_HTML = True
        try:
            html = compose_html(record)
        finally:
            config.ESCAPE_HTML = original
        self.assertIn("&lt;b&gt;Ama&lt;/b&gt;", html)
        self.assertNotIn("<b>Ama</b>", html)


if __name__ == "__main__":
    unittest.main()
