from __future__ import annotations

from datetime import date
from html import escape
from typing import Callable, Dict, Optional

from .. import config
from .content import ContentRecord


SOCIAL_ICONS: Dict[str, str] = {
    "instagram": "fab fa-instagram",
    "youtube": "fab fa-youtube",
    "tiktok": "fab fa-tiktok",
    "facebook": "fab fa-facebook",
    "twitter": "fab fa-twitter",
    "website": "fas fa-globe",
}


def user_text(value: str) -> str:
    # user text goes in as-is unless escaping is switched on
    return escape(value) if config.ESCAPE_HTML else value


def _multiline(value: str) -> str:
    return user_text(value).replace("\n", "<br>")


def _block(key: str, heading: str, body: str, css: str = "section") -> str:
    return f"""
    <section class="{css}" id="{key}">
      <h2 class="section-title">{heading}</h2>
      {body}
    </section>"""


def _optional_block(key: str, heading: str, value: str, css: str = "section") -> str:
    if not value:
        return ""
    return _block(key, heading, f'<p class="section-text">{_multiline(value)}</p>', css)


# -------------------- Shared fragments --------------------
def identity(content: ContentRecord) -> str:
    lines = [f'<h1 class="artist-name">{user_text(content.name)}</h1>']
    if content.title:
        lines.append(f'<p class="artist-title">{user_text(content.title)}</p>')
    meta = []
    if content.experience_level:
        meta.append(
            f'<span class="meta-item"><i class="fas fa-star"></i> '
            f"{user_text(content.experience_level.title())} Level</span>"
        )
    if content.location:
        meta.append(f'<span class="meta-item"><i class="fas fa-map-marker-alt"></i> {user_text(content.location)}</span>')
    if meta:
        lines.append(f'<div class="artist-meta">{"".join(meta)}</div>')
    return "\n      ".join(lines)


def about(content: ContentRecord, css: str = "section") -> str:
    # always rendered, even with an empty body
    return _block("about", "About Me", f'<p class="section-text">{_multiline(content.about_me)}</p>', css)


def experience(content: ContentRecord, css: str = "section") -> str:
    return _optional_block("experience", "Experience", content.jobs, css)


def skills(content: ContentRecord, css: str = "section") -> str:
    if not content.skills:
        return ""
    chips = "".join(f'<span class="skill-chip">{user_text(skill)}</span>' for skill in content.skills)
    return _block("skills", "Skills", f'<div class="skills-grid">{chips}</div>', css)


def services(content: ContentRecord, css: str = "section") -> str:
    return _optional_block("services", "Services", content.services, css)


def testimonials(content: ContentRecord, css: str = "section") -> str:
    if not content.testimonials:
        return ""
    body = f'<blockquote class="testimonial">{_multiline(content.testimonials)}</blockquote>'
    return _block("testimonials", "Testimonials", body, css)


def contact(content: ContentRecord, css: str = "section") -> str:
    links = []
    for platform, url in content.populated_links():
        icon = SOCIAL_ICONS.get(platform)
        if icon is None:
            continue
        links.append(
            f'<a href="{user_text(url)}" class="social-link" target="_blank" rel="noopener" '
            f'aria-label="{platform.capitalize()}"><i class="{icon}"></i></a>'
        )
    lines = [
        f'<p class="contact-line"><i class="fas fa-envelope"></i> '
        f'<a href="mailto:{user_text(content.email)}">{user_text(content.email)}</a></p>'
    ]
    if content.phone:
        lines.append(f'<p class="contact-line"><i class="fas fa-phone"></i> {user_text(content.phone)}</p>')
    if links:
        lines.append(f'<div class="social-links">{"".join(links)}</div>')
    return _block("contact", "Contact", "\n      ".join(lines), css)


def footer(content: ContentRecord) -> str:
    return f"""
  <footer class="site-footer">
    <p>&copy; {date.today().year} {user_text(content.name)}. All rights reserved.</p>
  </footer>"""


# -------------------- Layouts --------------------
def render_modern(content: ContentRecord) -> str:
    return f"""
<body class="template-modern">
  <header class="hero">
    <div class="container">
      {identity(content)}
    </div>
  </header>
  <main class="container two-column">
    <div class="column-main">
      {about(content)}
      {experience(content)}
      {services(content)}
      {testimonials(content)}
    </div>
    <aside class="column-side">
      {skills(content)}
      {contact(content)}
    </aside>
  </main>
  {footer(content)}
</body>"""


def render_classic(content: ContentRecord) -> str:
    return f"""
<body class="template-classic">
  <div class="container single-column">
    <header class="classic-header">
      {identity(content)}
      <hr class="divider">
    </header>
    <main>
      {about(content, "section classic")}
      {experience(content, "section classic")}
      {skills(content, "section classic")}
      {services(content, "section classic")}
      {testimonials(content, "section classic")}
      {contact(content, "section classic")}
    </main>
    {footer(content)}
  </div>
</body>"""


def render_artistic(content: ContentRecord) -> str:
    return f"""
<body class="template-artistic">
  <div class="gradient-backdrop"></div>
  <header class="artistic-header">
    {identity(content)}
  </header>
  <main class="container card-grid">
    {about(content, "section card")}
    {skills(content, "section card")}
    {experience(content, "section card")}
    {services(content, "section card")}
    {testimonials(content, "section card")}
    {contact(content, "section card")}
  </main>
  {footer(content)}
</body>"""


TEMPLATE_RENDERERS: Dict[str, Callable[[ContentRecord], str]] = {
    "modern": render_modern,
    "classic": render_classic,
    "artistic": render_artistic,
}


def select_template(template_id: Optional[str]) -> Callable[[ContentRecord], str]:
    key = str(template_id or "").strip().lower()
    return TEMPLATE_RENDERERS.get(key) or TEMPLATE_RENDERERS[config.DEFAULT_TEMPLATE]
