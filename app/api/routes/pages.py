"""Placeholder HTML pages.

The browser client is served separately; these routes give the access
guard real targets for its login redirect and protected playground.
"""
from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["pages"])


def _page(title: str, body: str) -> str:
    return f"""
    <html>
        <head>
            <title>{title} - Component Playground</title>
        </head>
        <body>
            {body}
        </body>
    </html>
    """


@router.get("/", response_class=HTMLResponse)
def home():
    return _page(
        "Home",
        '<h1>Component Playground</h1><a href="/login">Log in</a> | <a href="/signup">Sign up</a>',
    )


@router.get("/login", response_class=HTMLResponse)
def login_page():
    return _page("Log in", "<h1>Log in</h1><p>POST /api/auth/login with email and password.</p>")


@router.get("/signup", response_class=HTMLResponse)
def signup_page():
    return _page("Sign up", "<h1>Sign up</h1><p>POST /api/auth/signup with name, email and password.</p>")


@router.get("/playground", response_class=HTMLResponse)
def playground_page():
    return _page("Playground", '<h1>Playground</h1><div id="root"></div>')
