"""Minimal HTML pages for the sign-in flow."""

from html import escape

from baby_profiles.services.auth_callback import CallbackOutcome


def login_page(provider: str, error: str | None = None) -> str:
    """Render the login page."""
    alert = f'<p class="error">{escape(error)}</p>' if error else ""
    return _LOGIN_HTML.replace("{alert}", alert).replace(
        "{provider}", escape(provider.title())
    )


def callback_failed_page(outcome: CallbackOutcome) -> str:
    """Render the failure page that returns to login after a delay."""
    return (
        _CALLBACK_FAILED_HTML.replace("{delay}", str(outcome.delay_seconds))
        .replace("{target}", escape(outcome.redirect_to))
        .replace("{error}", escape(outcome.error or ""))
    )


_LOGIN_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Baby Profiles Login</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      .error { color: #b00020; }
      a.button { display: inline-block; padding: 0.8rem 1.6rem;
        background: #1976d2; color: #fff; text-decoration: none; }
    </style>
  </head>
  <body>
    <h1>Baby Profiles Login</h1>
    {alert}
    <a class="button" href="/login/oauth">Login with {provider}</a>
  </body>
</html>
"""

_CALLBACK_FAILED_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta http-equiv="refresh" content="{delay};url={target}" />
    <title>Authentication failed</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      .error { color: #b00020; }
    </style>
  </head>
  <body>
    <p class="error">{error}</p>
    <p>Redirecting to login...</p>
  </body>
</html>
"""
