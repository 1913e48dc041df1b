"""RFQ notification email to the supplier.

Sent to the owning organization's owner when a buyer submits an RFQ.
Reply-To is the buyer so the merchant can answer straight from their inbox.
"""

import logging
from html import escape as html_escape

from app.config import settings
from app.models.rfq import ProductRfq
from app.services.email import postmark

logger = logging.getLogger(__name__)


def _detail_rows(rfq: ProductRfq) -> list[tuple[str, str]]:
    rows = [
        ("Name", rfq.name),
        ("Company", rfq.company),
        ("Email", rfq.email),
    ]
    if rfq.phone:
        rows.append(("Phone", rfq.phone))
    if rfq.quantity:
        rows.append(("Quantity", rfq.quantity))
    if rfq.target_date:
        rows.append(("Target date", rfq.target_date))
    return rows


def build_subject(product_name: str, rfq: ProductRfq) -> str:
    return f"New RFQ for {product_name} from {rfq.company}"


def build_text(product_name: str, rfq: ProductRfq, dashboard_url: str) -> str:
    """Plain-text body."""
    lines = [f"You received a new request for quotation for {product_name}.", ""]
    lines += [f"{label}: {value}" for label, value in _detail_rows(rfq)]
    lines += ["", "Message:", rfq.message, "", f"View in Pitchivo: {dashboard_url}"]
    return "\n".join(lines)


def build_html(product_name: str, rfq: ProductRfq, dashboard_url: str) -> str:
    """HTML body. Every buyer-supplied value is escaped."""
    rows = "".join(
        f"""
                <tr>
                  <td style="padding: 6px 0; font-size: 13px; color: #71717a; width: 120px;">{html_escape(label)}</td>
                  <td style="padding: 6px 0; font-size: 14px; color: #18181b;">{html_escape(value)}</td>
                </tr>"""
        for label, value in _detail_rows(rfq)
    )
    message = html_escape(rfq.message).replace("\n", "<br>")
    return f"""\
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="margin: 0; padding: 0; background-color: #f4f4f5;
             font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif;">
  <table role="presentation" width="100%" cellpadding="0" cellspacing="0"
         style="background-color: #f4f4f5;">
    <tr>
      <td align="center" style="padding: 40px 16px;">
        <table role="presentation" width="100%" cellpadding="0" cellspacing="0"
               style="max-width: 520px; background-color: #ffffff; border-radius: 8px;">
          <tr>
            <td style="background-color: #18181b; padding: 20px 32px; text-align: center;">
              <span style="font-size: 15px; font-weight: 600; color: #fafafa;
                           letter-spacing: 1.5px;">PITCHIVO</span>
            </td>
          </tr>
          <tr>
            <td style="padding: 32px;">
              <h1 style="font-size: 20px; font-weight: 700; color: #18181b; margin: 0 0 12px;">
                New RFQ for {html_escape(product_name)}
              </h1>
              <table role="presentation" width="100%" cellpadding="0" cellspacing="0"
                     style="margin: 0 0 20px;">{rows}
              </table>
              <p style="font-size: 14px; color: #3f3f46; line-height: 1.6; margin: 0 0 24px;">
                {message}
              </p>
              <a href="{html_escape(dashboard_url)}"
                 style="display: inline-block; background-color: #18181b; color: #fafafa;
                        padding: 12px 20px; border-radius: 6px; font-size: 14px;
                        text-decoration: none;">View RFQ</a>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>"""


async def send_rfq_notification(
    recipient_email: str | None,
    product_name: str,
    rfq: ProductRfq,
) -> bool:
    """Notify a supplier about a new RFQ. Returns False if nothing was sent."""
    if not recipient_email:
        logger.warning(f"[rfq] No recipient for RFQ {rfq.id}, notification skipped")
        return False

    dashboard_url = f"{settings.frontend_url.rstrip('/')}/dashboard/rfqs"
    return await postmark.postmark_service.send(
        to=recipient_email,
        subject=build_subject(product_name, rfq),
        html_body=build_html(product_name, rfq, dashboard_url),
        text_body=build_text(product_name, rfq, dashboard_url),
        reply_to=rfq.email,
        tag="rfq-notification",
    )
