"""
Outbound email and SMS notifications.

Every sender returns a result dict ({"success": bool, ...}) and never raises:
delivery is a side channel and must not fail the request that triggered it.
Without provider configuration messages are written to the log instead.
"""
import asyncio
import smtplib
import time
from email.mime.text import MIMEText
from typing import Dict, Any, Optional

import aiohttp

from app.config import get_settings
import logging

settings = get_settings()
logger = logging.getLogger(__name__)

OTP_PURPOSE_SUBJECTS = {
    "password_reset": "Password Reset OTP",
    "email_verification": "Verify your email address",
    "signup": "Your Signup OTP",
}


def _otp_validity_text() -> str:
    minutes = settings.OTP_EXPIRE_MINUTES
    return f"{minutes} minute{'s' if minutes != 1 else ''}"


def _send_smtp(to_email: str, subject: str, html: str) -> str:
    msg = MIMEText(html, "html", "utf-8")
    msg["Subject"] = subject
    msg["From"] = settings.EMAIL_FROM
    msg["To"] = to_email

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.NOTIFICATION_TIMEOUT_SECONDS) as s:
        if settings.SMTP_USE_TLS:
            s.starttls()
        if settings.SMTP_USER:
            s.login(settings.SMTP_USER, settings.SMTP_PASS)
        s.sendmail(settings.EMAIL_FROM, [to_email], msg.as_string())
    return msg.get("Message-ID") or f"smtp-{int(time.time() * 1000)}"


async def send_email(to_email: str, subject: str, html: str) -> Dict[str, Any]:
    """Send an HTML email through SMTP, or log it when SMTP is not configured"""
    if not to_email:
        return {"success": False, "error": "Missing recipient email"}

    if not settings.SMTP_HOST:
        logger.info(f"[EMAIL] to={to_email} subject={subject!r}")
        logger.debug(f"[EMAIL] body={html}")
        return {"success": True, "message_id": f"dev-{int(time.time() * 1000)}"}

    try:
        # smtplib blocks, keep it off the event loop
        message_id = await asyncio.to_thread(_send_smtp, to_email, subject, html)
        logger.info(f"Email sent to {to_email}: {message_id}")
        return {"success": True, "message_id": message_id}
    except Exception as e:
        logger.error(f"Error sending email to {to_email}: {e}")
        return {"success": False, "error": str(e)}


async def send_sms(phone_number: str, message: str) -> Dict[str, Any]:
    """Send an SMS through the Twilio REST API, or log it when Twilio is not configured"""
    if not phone_number:
        return {"success": False, "error": "Missing recipient phone number"}

    if not settings.TWILIO_ACCOUNT_SID:
        logger.info(f"[SMS] to={phone_number} message={message!r}")
        return {"success": True, "sid": f"dev-{int(time.time() * 1000)}"}

    endpoint = f"{settings.TWILIO_API_URL}/Accounts/{settings.TWILIO_ACCOUNT_SID}/Messages.json"
    timeout = aiohttp.ClientTimeout(total=settings.NOTIFICATION_TIMEOUT_SECONDS)
    auth = aiohttp.BasicAuth(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
    form = {"To": phone_number, "From": settings.TWILIO_PHONE_NUMBER, "Body": message}

    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(endpoint, data=form, auth=auth) as response:
                data = await response.json(content_type=None)
                if response.status in (200, 201):
                    logger.info(f"SMS sent to {phone_number}: {data.get('sid')}")
                    return {"success": True, "sid": data.get("sid")}
                error = data.get("message") if isinstance(data, dict) else None
                logger.error(f"SMS provider returned {response.status} for {phone_number}: {error}")
                return {"success": False, "error": error or f"HTTP {response.status}"}
    except Exception as e:
        logger.error(f"Error sending SMS to {phone_number}: {e}")
        return {"success": False, "error": str(e)}


async def send_otp_email(email: str, otp: str, purpose: str = "login") -> Dict[str, Any]:
    """Send an OTP by email"""
    subject = OTP_PURPOSE_SUBJECTS.get(purpose, "Your Login OTP")
    title = subject.replace("Your ", "")
    html = f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2>{title}</h2>
        <p>Your One-Time Password (OTP) is:</p>
        <div style="background-color: #f5f5f5; padding: 20px; text-align: center; font-size: 32px; letter-spacing: 8px; font-weight: bold; margin: 20px 0;">
          {otp}
        </div>
        <p>This OTP will expire in {_otp_validity_text()}.</p>
        <p>If you didn't request this OTP, please ignore this email.</p>
      </div>
    """
    return await send_email(email, subject, html)


async def send_otp_sms(phone_number: str, otp: str) -> Dict[str, Any]:
    """Send an OTP by SMS"""
    message = (
        f"Your Aadhaar Advance OTP is: {otp}. This OTP is valid for {_otp_validity_text()}. "
        f"Do not share this OTP with anyone."
    )
    return await send_sms(phone_number, message)


async def send_appointment_confirmation(
    email: Optional[str],
    phone_number: Optional[str],
    booking_id: str,
    date: str,
    time_text: str,
    center: str,
    update_type: str,
) -> None:
    """Notify the citizen that a booking went through"""
    if phone_number:
        await send_sms(
            phone_number,
            f"Your Aadhaar Advance appointment is confirmed! Booking ID: {booking_id}. "
            f"Date: {date}, Time: {time_text}, Center: {center}. Please arrive 15 mins early.",
        )
    if email:
        html = f"""
          <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h2>Appointment Confirmed!</h2>
            <p><strong>Booking ID:</strong> {booking_id}</p>
            <p><strong>Date:</strong> {date}</p>
            <p><strong>Time:</strong> {time_text}</p>
            <p><strong>Center:</strong> {center}</p>
            <p><strong>Service:</strong> {update_type}</p>
            <p>Please arrive at the center 15 minutes before your scheduled time and bring the required documents.</p>
          </div>
        """
        await send_email(email, "Appointment Confirmation - Aadhaar Advance", html)


async def send_cancellation_notice(phone_number: Optional[str], booking_id: str) -> None:
    """Notify the citizen that a booking was cancelled"""
    if phone_number:
        await send_sms(
            phone_number,
            f"Your Aadhaar Advance appointment (ID: {booking_id}) has been cancelled successfully.",
        )
