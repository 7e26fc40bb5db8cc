from dataclasses import dataclass
from html import escape


@dataclass
class RenderedEmail:
    subject: str
    html: str
    text: str


def days_label(days: int) -> str:
    return "1 day" if days == 1 else f"{days} days"


def render_license_expiration_email(
    license_name: str,
    vendor: str,
    expiration_date: str,
    days_until_expiry: int,
    license_detail_url: str,
    alert_type: str,
    product_name: str,
) -> RenderedEmail:
    urgent = alert_type == "7_day"
    remaining = days_label(days_until_expiry)

    if urgent:
        subject = f"Urgent: {license_name} expires in {remaining}"
        heading = "License Expiring Soon"
    else:
        subject = f"Reminder: {license_name} expires in {remaining}"
        heading = "License Renewal Reminder"

    main_text = (
        f"Your license {license_name} from {vendor} will expire in "
        f"{remaining}, on {expiration_date}."
    )
    urgent_notice = "This license expires within a week. Renew it now to avoid service interruption."
    contact_vendor = f"Contact {vendor} to arrange the renewal."

    text_lines = [heading, ""]
    if urgent:
        text_lines += [urgent_notice, ""]
    text_lines += [
        main_text,
        "",
        f"License: {license_name}",
        f"Vendor: {vendor}",
        f"Expires on: {expiration_date}",
        f"Days remaining: {days_until_expiry}",
        "",
        f"View license: {license_detail_url}",
        contact_vendor,
        "",
        f"-- {product_name}",
    ]

    urgent_html = ""
    if urgent:
        urgent_html = (
            '<div style="background:#fef2f2;border-radius:8px;padding:16px;margin-bottom:16px">'
            f'<p style="margin:0;font-weight:600;color:#991b1b">{escape(urgent_notice)}</p>'
            "</div>"
        )

    html = (
        "<html><body style=\"font-family:sans-serif;color:#242424\">"
        f"<h1>{escape(heading)}</h1>"
        f"{urgent_html}"
        f"<p>{escape(main_text)}</p>"
        '<div style="border:1px solid #e5e7eb;background:#f9fafb;border-radius:8px;padding:16px">'
        "<p style=\"margin:0 0 8px;font-weight:600\">License details</p>"
        f"<p style=\"margin:0\"><strong>License:</strong> {escape(license_name)}</p>"
        f"<p style=\"margin:0\"><strong>Vendor:</strong> {escape(vendor)}</p>"
        f"<p style=\"margin:0\"><strong>Expires on:</strong> {escape(expiration_date)}</p>"
        f"<p style=\"margin:0\"><strong>Days remaining:</strong> {days_until_expiry}</p>"
        "</div>"
        f'<p><a href="{escape(license_detail_url, quote=True)}">View license</a></p>'
        f"<p>{escape(contact_vendor)}</p>"
        "<hr/>"
        f"<p style=\"color:#666666;font-size:12px\">{escape(product_name)}</p>"
        "</body></html>"
    )

    return RenderedEmail(subject=subject, html=html, text="\n".join(text_lines))
