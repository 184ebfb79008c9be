"""
HTML rendering for the listing pages.

Pages are assembled from f-strings; every value that originates from a record
or from the settings goes through 'html.escape' first.
"""

import html as _html
from collections.abc import Sequence

from crud_toolkit.data_models import Record

_CSS = """
*{box-sizing:border-box;margin:0;padding:0}
body{font-family:-apple-system,BlinkMacSystemFont,"Segoe UI",sans-serif;color:#1f2328;font-size:14px;line-height:1.6}
nav{background:#f6f8fa;border-bottom:1px solid #d0d7de;padding:10px 20px;display:flex;gap:16px;align-items:center}
nav a{color:#0969da;text-decoration:none}
.brand{font-weight:600}
main{max-width:860px;margin:0 auto;padding:24px 20px}
h1{font-size:20px;margin-bottom:12px}
table{border-collapse:collapse;width:100%}
th,td{border-bottom:1px solid #d0d7de;padding:6px 8px;text-align:left}
td code{font-size:12px;color:#656d76}
.empty{color:#656d76;font-style:italic}
footer{color:#656d76;font-size:12px;margin-top:24px}
"""


def render_page(title: str, body: str, version: str, backend: str) -> str:
    """Wrap 'body' (already HTML) in the shared page layout."""
    t = _html.escape(title)
    return (
        f'<!DOCTYPE html>\n<html lang="en">\n<head>'
        f'<meta charset="utf-8"><meta name="viewport" content="width=device-width,initial-scale=1">'
        f'<title>{t}</title>'
        f'<style>{_CSS}</style>'
        f'</head>\n<body>'
        f'<nav><a class="brand" href="/">CRUD strategy pattern</a>'
        f'<a href="/accounts">accounts</a></nav>'
        f'<main><h1>{t}</h1>{body}'
        f'<footer>v{_html.escape(version)} &middot; backend: {_html.escape(backend)}</footer>'
        f'</main>'
        f'</body></html>'
    )


def render_records(records: Sequence[Record]) -> str:
    """Render records as a two-column table, or a placeholder when there are none."""
    if not records:
        return '<p class="empty">No records yet.</p>'
    rows = [
        f'<tr><td>{_html.escape(record.fullname)}</td><td><code>{record.id}</code></td></tr>'
        for record in records
    ]
    return f'<table><thead><tr><th>Full name</th><th>ID</th></tr></thead><tbody>{"".join(rows)}</tbody></table>'
