"""HTML bodies and subjects for the emails the service sends."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from html import escape

from stylist.forecast_service import DailyOutlook

BRAND = "Daily Weather Stylist"

_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }
    .content { background: #f8f9fa; padding: 30px; border-radius: 0 0 10px 10px; }
    .weather-card { background: white; padding: 20px; border-radius: 8px; margin: 20px 0; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
    .temp-display { font-size: 2em; font-weight: bold; color: #667eea; text-align: center; margin: 10px 0; }
    .callout { background: #e3f2fd; padding: 20px; border-radius: 8px; border-left: 4px solid #2196f3; margin: 20px 0; }
    .footer { text-align: center; padding: 20px; color: #666; font-size: 0.9em; }
"""

_FOOTER = f"""
    <div class="footer">
      <p>{BRAND} | Your personal weather &amp; style assistant</p>
      <p><small>To unsubscribe or update your preferences, please contact support.</small></p>
    </div>
"""


@dataclass
class RenderedEmail:
    """Subject line plus HTML body."""
    subject: str
    html: str


def _page(header_title: str, header_subtitle: str, body: str) -> str:
    """Wrap a content block in the shared page layout."""
    return f"""<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <style>{_STYLE}</style>
  </head>
  <body>
    <div class="header">
      <h1>{header_title}</h1>
      <p>{header_subtitle}</p>
    </div>
    <div class="content">
{body}
    </div>
{_FOOTER}
  </body>
</html>
"""


def render_daily_email(first_name: str, city: str | None, outlook: DailyOutlook) -> RenderedEmail:
    """Morning forecast + outfit email."""
    name = escape(first_name)
    place = escape(city) if city else "your area"
    rec = outlook.recommendation
    comparison = f"<p>{escape(outlook.comparison)}</p>" if outlook.comparison else ""

    body = f"""
      <div class="weather-card">
        <h2>Today's Weather</h2>
        {comparison}
        <p>It's looking like a <strong>{escape(outlook.description)}</strong> day in {place}!</p>
        <div class="temp-display">High: {outlook.high_f}&deg;F | Low: {outlook.low_f}&deg;F</div>
      </div>
      <div class="callout">
        <h3>Today's Outfit Recommendation</h3>
        <p><strong>Wear:</strong> {escape(rec.outfit)}</p>
        <p><em>{escape(rec.reason)}!</em></p>
      </div>
      <p>Have a wonderful day, {name}!</p>
"""
    return RenderedEmail(
        subject=f"Good Morning, {first_name}! ☀️",
        html=_page(f"Good Morning, {name}!", "Your daily weather &amp; style update", body),
    )


def render_confirmation_email(first_name: str, dispatch_hour: int = 5) -> RenderedEmail:
    """Welcome email sent right after a successful signup."""
    name = escape(first_name)
    hour_label = dt.time(hour=dispatch_hour).strftime("%I:%M %p").lstrip("0")
    body = f"""
      <h2>Hi {name}!</h2>
      <p>Welcome to {BRAND}! We're excited to help you start each day with the perfect outfit.</p>
      <div class="callout">
        <h3>What happens next?</h3>
        <ul>
          <li><strong>Tomorrow at {hour_label}</strong> - You'll receive your first weather update and outfit recommendation</li>
          <li><strong>Daily emails</strong> - Personalized weather forecasts and clothing suggestions</li>
          <li><strong>Smart recommendations</strong> - Based on the forecast for your area</li>
        </ul>
      </div>
      <p>Have a great day, {name}!</p>
"""
    return RenderedEmail(
        subject=f"Welcome to {BRAND}, {first_name}! 🌤️",
        html=_page(f"Welcome to {BRAND}!", "You're all set up for daily weather &amp; style updates", body),
    )


def render_test_email(sent_at: dt.datetime) -> RenderedEmail:
    """Small message used to check the email transport end to end."""
    body = f"""
      <p>This is a test email to verify that the {BRAND} email system is working correctly.</p>
      <p>If you received this email, the email system is properly configured.</p>
      <p>Time sent: {escape(sent_at.isoformat(timespec="seconds"))}</p>
"""
    return RenderedEmail(
        subject=f"Test Email - {BRAND}",
        html=_page("Email System Test", BRAND, body),
    )
