from __future__ import annotations

from typing import Optional

from .content import ContentRecord
from .templates import select_template, user_text
from .theme import ColorTheme, resolve_theme


FONT_LINKS = (
    '<link rel="preconnect" href="https://fonts.googleapis.com">\n'
    '  <link href="https://fonts.googleapis.com/css2?family=Montserrat:wght@400;700;900'
    '&family=Poppins:wght@300;400;600&display=swap" rel="stylesheet">\n'
    '  <link rel="stylesheet" '
    'href="https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.5.1/css/all.min.css">'
)


def _stylesheet(theme: ColorTheme) -> str:
    return f"""
    :root {{
      --primary: {theme.primary};
      --accent: {theme.accent};
      --background: {theme.background};
      --text: #f5f5f7;
      --muted: #a1a1b5;
    }}
    * {{ box-sizing: border-box; margin: 0; padding: 0; }}
    body {{ font-family: 'Poppins', sans-serif; background: var(--background); color: var(--text); line-height: 1.6; }}
    h1, h2 {{ font-family: 'Montserrat', sans-serif; }}
    a {{ color: var(--accent); }}
    .container {{ max-width: 1100px; margin: 0 auto; padding: 2rem; }}
    .hero {{ background: linear-gradient(135deg, var(--primary), var(--background)); padding: 4rem 0; }}
    .artist-name {{ font-size: 3rem; font-weight: 900; }}
    .artist-title {{ color: var(--accent); text-transform: uppercase; letter-spacing: 2px; }}
    .artist-meta {{ display: flex; gap: 1.5rem; margin-top: 1rem; color: var(--muted); }}
    .two-column {{ display: grid; grid-template-columns: 2fr 1fr; gap: 2rem; }}
    .single-column {{ max-width: 800px; }}
    .classic-header {{ text-align: center; padding: 3rem 0 1rem; }}
    .divider {{ border: none; border-top: 2px solid var(--accent); width: 120px; margin: 1.5rem auto; }}
    .section {{ margin-bottom: 2.5rem; }}
    .section-title {{ color: var(--primary); border-left: 4px solid var(--accent); padding-left: .75rem; margin-bottom: 1rem; }}
    .section-text {{ color: var(--text); white-space: normal; }}
    .skills-grid {{ display: flex; flex-wrap: wrap; gap: .5rem; }}
    .skill-chip {{ background: var(--primary); color: #fff; border-radius: 999px; padding: .35rem .9rem; font-size: .85rem; }}
    .testimonial {{ border-left: 3px solid var(--accent); padding-left: 1rem; font-style: italic; }}
    .contact-line {{ margin-bottom: .5rem; }}
    .social-links {{ display: flex; gap: 1rem; font-size: 1.5rem; margin-top: 1rem; }}
    .social-link {{ color: var(--accent); }}
    .site-footer {{ text-align: center; padding: 2rem; color: var(--muted); font-size: .85rem; }}
    .template-artistic .gradient-backdrop {{ position: fixed; inset: 0; z-index: -1;
      background: radial-gradient(circle at 20% 20%, var(--primary), transparent 50%),
                  radial-gradient(circle at 80% 70%, var(--accent), transparent 45%), var(--background); opacity: .55; }}
    .artistic-header {{ text-align: center; padding: 5rem 1rem 2rem; }}
    .card-grid {{ display: grid; grid-template-columns: repeat(auto-fit, minmax(300px, 1fr)); gap: 1.5rem; }}
    .card {{ background: rgba(10, 10, 18, .72); border-radius: 18px; padding: 1.5rem; backdrop-filter: blur(6px); }}
    @media (max-width: 768px) {{ .two-column {{ grid-template-columns: 1fr; }} .artist-name {{ font-size: 2.2rem; }} }}
"""


def compose_html(content: ContentRecord, template_id: Optional[str] = None, theme: Optional[ColorTheme] = None) -> str:
    """Render a complete, self-contained HTML page for one portfolio."""
    theme = theme or resolve_theme()
    body = select_template(template_id)(content)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{user_text(content.name)} | Portfolio</title>
  {FONT_LINKS}
  <style>{_stylesheet(theme)}  </style>
</head>{body}
</html>
"""
