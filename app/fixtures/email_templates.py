"""Email templates for eligibility notifications.

Placeholders use ``{{name}}`` syntax. List values (reasons, disclaimers)
render as numbered lines in text and as ``<li>`` items in HTML.
"""

STAFF_ELIGIBILITY_SUMMARY = "staff_eligibility_summary"
PROSPECT_CONFIRMATION = "prospect_confirmation"

EMAIL_TEMPLATES: dict[str, dict[str, str]] = {
    # =========================================================================
    # Staff eligibility summary
    # =========================================================================
    STAFF_ELIGIBILITY_SUMMARY: {
        "subject": "Eligibility Assessment: {{contact}} - {{outlook}}",
        "body": """ELIGIBILITY ASSESSMENT

Submission: {{submission_id}}
Lead: {{contact}}
Jurisdiction: {{jurisdiction}}
Assessment: {{outlook}} (Chapter 7 eligibility {{tier}})
Recommended chapter: {{chapter}}

Financial Metrics:
- {{annual_income_label}}: {{annual_income}}
- Median income for household of {{household_size}}: {{median_income}}
- Monthly disposable income: {{disposable_income}}
- Income basis: {{income_basis}}

Rationale:
{{reasons}}

Threshold table: {{table_id}} (version {{table_version}}){{stale_notice}}

IMPORTANT DISCLAIMER:
{{disclaimers}}

---
Received: {{received_at}}

This is a staff-only automated assessment. Do not forward to the lead.""",
        "html_body": """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Eligibility Assessment</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif; line-height: 1.6; color: #374151; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h1 style="font-size: 20px;">Eligibility Assessment</h1>
    <p style="color: #6B7280; font-size: 14px;">Received {{received_at}}</p>

    <p><strong>Submission:</strong> {{submission_id}}<br>
    <strong>Lead:</strong> {{contact}}<br>
    <strong>Jurisdiction:</strong> {{jurisdiction}}</p>

    <h2 style="font-size: 18px;">Assessment: {{outlook}}</h2>
    <p>Chapter 7 eligibility {{tier}}; recommended chapter {{chapter}}.</p>

    <h3 style="font-size: 16px;">Financial Metrics</h3>
    <table style="width: 100%; border-collapse: collapse;">
        <tr><td>{{annual_income_label}}</td><td>{{annual_income}}</td></tr>
        <tr><td>Median income (household of {{household_size}})</td><td>{{median_income}}</td></tr>
        <tr><td>Monthly disposable income</td><td>{{disposable_income}}</td></tr>
        <tr><td>Income basis</td><td>{{income_basis}}</td></tr>
    </table>

    <h3 style="font-size: 16px;">Assessment Rationale</h3>
    <ul>{{reasons}}</ul>

    <p style="font-size: 13px;">Threshold table {{table_id}} (version {{table_version}}){{stale_notice}}</p>

    <div style="background-color: #FEF3C7; border-left: 4px solid #F59E0B; padding: 16px;">
        <h3 style="color: #92400E; margin: 0 0 8px 0; font-size: 14px;">IMPORTANT DISCLAIMER</h3>
        <ul style="color: #92400E; font-size: 13px;">{{disclaimers}}</ul>
    </div>

    <p style="color: #6B7280; font-size: 12px;">This is a staff-only automated assessment. Do not forward to the lead.</p>
</body>
</html>""",
    },
    # =========================================================================
    # Prospect confirmation
    # =========================================================================
    PROSPECT_CONFIRMATION: {
        "subject": "Thank you for your interest",
        "body": """Thank you for your interest

We have received your information and appreciate your interest in learning
more about your bankruptcy options in {{jurisdiction_name}}.

Our team will review your information and reach out to you shortly to
discuss your situation.

{{disclaimers}}

This email was sent to {{email}} because you requested information from us.""",
        "html_body": """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Thank you for your interest</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif; line-height: 1.6; color: #374151; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h1 style="font-size: 20px;">Thank you for your interest</h1>
    <p>We have received your information and appreciate your interest in learning
    more about your bankruptcy options in {{jurisdiction_name}}.</p>
    <p>Our team will review your information and reach out to you shortly to
    discuss your situation.</p>
    <ul style="font-size: 13px; color: #6B7280;">{{disclaimers}}</ul>
    <p style="font-size: 12px; color: #6B7280;">This email was sent to {{email}} because you requested information from us.</p>
</body>
</html>""",
    },
}


def get_email_template(code: str) -> dict[str, str]:
    """Return a template by code.

    Raises:
        KeyError: If no template exists for the code.
    """
    if code not in EMAIL_TEMPLATES:
        raise KeyError(f"Unknown email template: {code}")
    return EMAIL_TEMPLATES[code]
