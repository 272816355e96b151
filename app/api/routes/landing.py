"""Landing page route for the form relay.

Serves a minimal page listing the available endpoints.
"""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["Landing"])


LANDING_PAGE_HTML = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>EdCatalyst Form Relay</title>
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Arial, sans-serif;
            line-height: 1.6;
            color: #1F2937;
            max-width: 640px;
            margin: 60px auto;
            padding: 0 20px;
        }
        code {
            background: #F3F4F6;
            padding: 2px 6px;
            border-radius: 4px;
        }
    </style>
</head>
<body>
    <main>
        <h1>EdCatalyst Form Relay</h1>
        <p>This service relays website form submissions as email.</p>
        <ul>
            <li><code>POST /api/send-email</code> contact form message</li>
            <li><code>POST /api/send-confirmation</code> internship registration confirmation</li>
            <li><code>GET /api/health</code> service status</li>
        </ul>
    </main>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
async def landing_page():
    """Landing page listing the form endpoints."""
    return HTMLResponse(content=LANDING_PAGE_HTML)
